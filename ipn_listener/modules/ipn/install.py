# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/install.py

Creación idempotente de las tablas de IPN (tiempo de despliegue).

Sólo crea las tablas si no existen; nunca altera ni borra datos.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncEngine

from ipn_listener.modules.ipn.models import IpnMessage, IpnTransaction
from ipn_listener.shared.database.base import Base

logger = logging.getLogger(__name__)

IPN_TABLES = (IpnMessage.__table__, IpnTransaction.__table__)


async def create_ipn_tables(engine: AsyncEngine) -> List[str]:
    """
    Crea ipn_messages e ipn_transactions si no existen.

    Returns:
        Nombres de las tablas verificadas
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=list(IPN_TABLES), checkfirst=True)

    names = [table.name for table in IPN_TABLES]
    logger.info(f"[DB] Tablas IPN verificadas: {', '.join(names)}")
    return names


__all__ = ["IPN_TABLES", "create_ipn_tables"]

# Fin del archivo ipn_listener/modules/ipn/install.py
