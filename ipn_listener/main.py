# -*- coding: utf-8 -*-
"""
ipn_listener/main.py

Punto de entrada del listener de IPN de PayPal.

- create_app(): fábrica de la app FastAPI (inyectable en tests)
- Lifespan: logging, creación opcional de tablas, handler del módulo IPN
- /health: versión y conectividad a la base de datos (503 si falla)
  y cierre ordenado de clientes HTTP y engine en shutdown

Autor: DoxAI
Fecha: 2026-10-19
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# ---------------------------------------------------------------------------
# Cargar .env ANTES de construir settings
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=_ENV_PATH, override=False)

import anyio
import uvicorn
from fastapi import FastAPI, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ipn_listener import __version__
from ipn_listener.modules.ipn.facades.handler import IpnHandler
from ipn_listener.modules.ipn.routes import router as ipn_router
from ipn_listener.modules.ipn.services.ipn_hooks import IpnHooks
from ipn_listener.modules.ipn.services.verification.base import VerificationTransport
from ipn_listener.modules.ipn.services.verification.http_clients import close_ipn_http_clients
from ipn_listener.shared.config import IpnSettings, get_ipn_settings, setup_logging
from ipn_listener.shared.database.database import check_database_health

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[IpnSettings] = None,
    *,
    hooks: Optional[IpnHooks] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    transport: Optional[VerificationTransport] = None,
) -> FastAPI:
    """
    Construye la aplicación FastAPI.

    Args:
        settings: Configuración (default: get_ipn_settings())
        hooks: Filtros y subscribers del listener
        session_factory: Fábrica de sesiones (default: engine de settings)
        transport: Transporte de verificación (default: según settings)
    """
    settings = settings or get_ipn_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ────────── STARTUP ──────────
        setup_logging(settings.log_level, settings.log_format)

        if settings.ipn_create_tables_on_startup:
            from ipn_listener.modules.ipn.install import create_ipn_tables
            from ipn_listener.shared.database.database import get_engine

            await create_ipn_tables(get_engine())

        app.state.session_factory = session_factory
        app.state.ipn_handler = IpnHandler.from_settings(
            settings,
            hooks=hooks,
            session_factory=session_factory,
            transport=transport,
        )
        logger.info(f"🟢 Listener IPN iniciado (modo={settings.ipn_mode}, transporte={settings.ipn_transport})")
        try:
            yield
        finally:
            # ────────── SHUTDOWN ──────────
            logger.info("🔴 Iniciando shutdown ordenado...")
            with anyio.CancelScope(shield=True):
                try:
                    await close_ipn_http_clients()
                    logger.info("💳 Clientes HTTP de IPN cerrados")
                except Exception as e:
                    logger.warning(f"⚠️ Error cerrando clientes IPN: {e}")

                if session_factory is None:
                    from ipn_listener.shared.database.database import dispose_engine

                    await dispose_engine()
            logger.info("✅ Shutdown completo")

    app = FastAPI(
        title="PayPal IPN Listener",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(ipn_router)

    @app.get("/health", tags=["health"])
    async def health(request: Request, response: Response):
        database_ok = await check_database_health(request.app.state.session_factory)
        if not database_ok:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "ok" if database_ok else "degraded",
            "version": __version__,
            "database": database_ok,
        }

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_ipn_settings()
    enable_reload = os.getenv("DEV_RELOAD") == "1"

    logger.info(f"🔧 Starting server with reload={enable_reload}")

    uvicorn.run(
        "ipn_listener.main:app",
        host=settings.host,
        port=settings.port,
        reload=enable_reload,
    )

# Fin del archivo ipn_listener/main.py
