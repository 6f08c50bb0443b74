# -*- coding: utf-8 -*-
"""
tests/conftest.py

Config global de tests del listener de IPN.

- Base de datos SQLite async en memoria (aiosqlite + StaticPool): una sola
  conexión compartida, así las tablas creadas por el fixture son visibles
  para todas las sesiones del test
- Settings aislados del entorno y de .env
- Singleton de settings reseteado entre tests
"""

from collections.abc import AsyncIterator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ipn_listener.modules.ipn.install import create_ipn_tables
from ipn_listener.shared.config import IpnSettings, reset_ipn_settings


@pytest.fixture(autouse=True)
def _reset_settings():
    reset_ipn_settings()
    yield
    reset_ipn_settings()


@pytest.fixture
def ipn_settings() -> IpnSettings:
    """Settings deterministas (sin .env) para los tests."""
    return IpnSettings(
        _env_file=None,
        ipn_mode="sandbox",
        ipn_site_url="https://shop.example.com/",
        app_name="ipn-listener",
        app_version="1.0.0",
        database_url="sqlite+aiosqlite:///:memory:",
    )


@pytest.fixture
async def db_engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_ipn_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)
