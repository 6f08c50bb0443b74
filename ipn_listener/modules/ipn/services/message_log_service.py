# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/message_log_service.py

Servicio del log de mensajes IPN (auditoría).

Reglas:
- Exactamente una fila por callback, cualquiera que sea el resultado
- txn_id / payment_status / pending_reason salen del payload ("" si faltan)
  y se recortan al largo de su columna
- ipn_detail = payload saneado completo como query string (incluye campos
  desconocidos)
- Transacción propia: un fallo de escritura se registra y se reporta
  (False), nunca interrumpe el handshake

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ipn_listener.modules.ipn.enums import VerificationResult
from ipn_listener.modules.ipn.repositories.ipn_message_repository import (
    IpnMessageRepository,
)

logger = logging.getLogger(__name__)


def serialize_payload(payload: Mapping[str, str]) -> str:
    """Serializa el payload completo como query string."""
    return urlencode(list(payload.items()))


def build_log_fields(
    *,
    user_id: int,
    payload: Mapping[str, str],
    result: VerificationResult,
    notes: str,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Columnas de la fila de log para un callback."""
    return {
        "user_id": user_id,
        "timestamp": timestamp or datetime.now(timezone.utc),
        "txn_id": payload.get("txn_id", ""),
        "result": result.value,
        "payment_status": payload.get("payment_status", ""),
        "pending_reason": payload.get("pending_reason", ""),
        "ipn_detail": serialize_payload(payload),
        "notes": notes,
    }


class MessageLogService:
    """Escritura append-only en ipn_messages."""

    TABLE_NAME = "ipn_messages"

    def __init__(self, message_repo: Optional[IpnMessageRepository] = None) -> None:
        self.message_repo = message_repo or IpnMessageRepository()

    async def log_message(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        user_id: int,
        payload: Mapping[str, str],
        result: VerificationResult,
        notes: str = "",
    ) -> bool:
        """
        Escribe la fila de log del callback.

        Returns:
            True si la fila quedó persistida, False si la escritura falló
        """
        fields = self.message_repo.clip_to_columns(
            build_log_fields(user_id=user_id, payload=payload, result=result, notes=notes)
        )
        try:
            async with session_factory() as session:
                async with session.begin():
                    await self.message_repo.create(session, **fields)
        except SQLAlchemyError:
            logger.exception(
                f"IPN log: no se pudo escribir {self.TABLE_NAME} "
                f"(txn_id={fields['txn_id']!r}, result={fields['result']})"
            )
            return False

        logger.debug(f"IPN log escrito: txn_id={fields['txn_id']!r} result={fields['result']}")
        return True


__all__ = [
    "MessageLogService",
    "build_log_fields",
    "serialize_payload",
]

# Fin del archivo ipn_listener/modules/ipn/services/message_log_service.py
