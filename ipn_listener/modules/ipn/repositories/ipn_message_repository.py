# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/repositories/ipn_message_repository.py

Repositorio para la tabla ipn_messages.

Autor: DoxAI
Fecha: 2026-10-19
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ipn_listener.shared.database.repository import BaseRepository
from ipn_listener.modules.ipn.models.ipn_message_models import IpnMessage


class IpnMessageRepository(BaseRepository[IpnMessage]):
    def __init__(self) -> None:
        super().__init__(IpnMessage)

    # -----------------------------------------------------------
    # Mensajes por transacción de PayPal (auditoría)
    # -----------------------------------------------------------
    async def list_by_txn_id(
        self,
        session: AsyncSession,
        txn_id: str,
    ) -> Sequence[IpnMessage]:
        stmt = select(IpnMessage).where(IpnMessage.txn_id == txn_id)
        stmt = stmt.order_by(IpnMessage.id.asc())
        result = await session.execute(stmt)
        return result.scalars().all()

# Fin del archivo ipn_listener/modules/ipn/repositories/ipn_message_repository.py
