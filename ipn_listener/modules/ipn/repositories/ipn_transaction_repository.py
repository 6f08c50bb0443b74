# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/repositories/ipn_transaction_repository.py

Repositorio para la tabla ipn_transactions.

Autor: DoxAI
Fecha: 2026-10-19
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ipn_listener.shared.database.repository import BaseRepository
from ipn_listener.modules.ipn.models.ipn_transaction_models import IpnTransaction


class IpnTransactionRepository(BaseRepository[IpnTransaction]):
    def __init__(self) -> None:
        super().__init__(IpnTransaction)

    async def get_by_txn_id(
        self,
        session: AsyncSession,
        txn_id: str,
    ) -> Optional[IpnTransaction]:
        stmt = select(IpnTransaction).where(IpnTransaction.txn_id == txn_id)
        result = await session.execute(stmt)
        return result.scalars().first()

# Fin del archivo ipn_listener/modules/ipn/repositories/ipn_transaction_repository.py
