# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/transaction_recorder_service.py

Registro de transacciones confiables (ipn_transactions).

Sólo se invoca para callbacks VERIFIED sin errores de negocio. Se insertan
únicamente los campos de la lista permitida presentes en el payload; los
demás (incluidos campos desconocidos) quedan fuera del ledger y sólo
sobreviven en ipn_detail del log.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ipn_listener.modules.ipn.repositories.ipn_transaction_repository import (
    IpnTransactionRepository,
)

logger = logging.getLogger(__name__)

# Lista permitida de atributos de pago (columnas de ipn_transactions)
TRANSACTION_COLUMNS = (
    "payment_date",
    "receiver_email",
    "item_name",
    "item_number",
    "payment_status",
    "pending_reason",
    "mc_gross",
    "mc_fee",
    "tax",
    "mc_currency",
    "txn_id",
    "txn_type",
    "transaction_subject",
    "first_name",
    "last_name",
    "address_name",
    "address_street",
    "address_city",
    "address_state",
    "address_zip",
    "address_country",
    "address_country_code",
    "residence_country",
    "address_status",
    "payer_email",
    "payer_status",
    "payment_type",
    "payment_gross",
    "payment_fee",
    "notify_version",
    "verify_sign",
    "referrer_id",
    "business",
    "ipn_track_id",
)


def extract_transaction_fields(payload: Mapping[str, str]) -> Dict[str, str]:
    """Intersección del payload con la lista permitida."""
    return {column: payload[column] for column in TRANSACTION_COLUMNS if column in payload}


class TransactionRecorderService:
    """Escritura append-only en ipn_transactions. Nunca actualiza ni borra."""

    TABLE_NAME = "ipn_transactions"

    def __init__(self, transaction_repo: Optional[IpnTransactionRepository] = None) -> None:
        self.transaction_repo = transaction_repo or IpnTransactionRepository()

    async def record_transaction(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        user_id: int,
        payload: Mapping[str, str],
    ) -> bool:
        fields: Dict[str, Any] = self.transaction_repo.clip_to_columns(
            extract_transaction_fields(payload)
        )
        fields["user_id"] = user_id
        fields["timestamp"] = datetime.now(timezone.utc)

        try:
            async with session_factory() as session:
                async with session.begin():
                    await self.transaction_repo.create(session, **fields)
        except SQLAlchemyError:
            logger.exception(
                f"IPN: no se pudo registrar la transacción en {self.TABLE_NAME} "
                f"(txn_id={fields.get('txn_id')!r})"
            )
            return False

        logger.info(f"IPN transacción registrada: txn_id={fields.get('txn_id')!r} user_id={user_id}")
        return True


__all__ = [
    "TRANSACTION_COLUMNS",
    "TransactionRecorderService",
    "extract_transaction_fields",
]

# Fin del archivo ipn_listener/modules/ipn/services/transaction_recorder_service.py
