# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/models/ipn_message_models.py

Log de mensajes IPN: una fila por callback recibido, sea cual sea el
resultado de la verificación. Tabla append-only.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ipn_listener.shared.database.base import Base

# SQLite sólo autoincrementa INTEGER PRIMARY KEY
_ID_TYPE = BigInteger().with_variant(Integer(), "sqlite")


class IpnMessage(Base):
    __tablename__ = "ipn_messages"

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        doc="Correlación 'custom' (no autenticada); 0 si se desconoce.",
    )

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    txn_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    result: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        doc="VERIFIED / INVALID / TRANSPORT_ERROR.",
    )

    payment_status: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    pending_reason: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    ipn_detail: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        doc="Payload saneado completo, serializado como query string.",
    )

    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<IpnMessage id={self.id} txn_id={self.txn_id} result={self.result}>"

# Fin del archivo ipn_listener/modules/ipn/models/ipn_message_models.py
