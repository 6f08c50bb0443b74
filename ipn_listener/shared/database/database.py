# -*- coding: utf-8 -*-
"""
ipn_listener/shared/database/database.py

SQLAlchemy async para el listener de IPN.

Provee:
- get_engine() (create_async_engine perezoso desde settings)
- get_session_factory() (async_sessionmaker)
- check_database_health() (usado por /health)
- dispose_engine() para el shutdown

Notas:
- El engine se crea en el primer uso, no al importar, para que tests y
  scripts puedan configurar DATABASE_URL antes.
- Cada escritura del listener abre su propia sesión/transacción: el log de
  mensajes y el registro de transacción son independientes.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ipn_listener.shared.config import get_ipn_settings
from ipn_listener.shared.database.base import Base

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """Retorna el engine singleton, creándolo desde settings si hace falta."""
    global _engine
    if _engine is None:
        settings = get_ipn_settings()
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.db_echo_sql,
            pool_pre_ping=True,
        )
        logger.info(f"[DB] Engine creado (echo={settings.db_echo_sql})")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Retorna la fábrica de sesiones singleton ligada al engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            expire_on_commit=False,
            class_=AsyncSession,
            autoflush=False,
        )
    return _session_factory


async def check_database_health(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    timeout_s: float = 3.0,
    sql: str = "SELECT 1",
) -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        session_factory: Fábrica a probar (default: get_session_factory())
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with (session_factory or get_session_factory())() as session:
                await session.execute(text(sql))
        return True
    except Exception as e:
        logger.warning(f"[DB] Health check falló: {e}")
        return False


async def dispose_engine() -> None:
    """Cierra el engine y descarta los singletons."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = [
    "Base",
    "get_engine",
    "get_session_factory",
    "check_database_health",
    "dispose_engine",
]
# Fin del archivo ipn_listener/shared/database/database.py
