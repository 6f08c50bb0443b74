# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/models/ipn_transaction_models.py

Ledger de transacciones IPN confiables: sólo callbacks VERIFIED sin errores
de reglas de negocio. Tabla append-only.

Todas las columnas de atributos son nullable: se insertan únicamente los
campos presentes en el payload (filas parciales).

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ipn_listener.shared.database.base import Base

_ID_TYPE = BigInteger().with_variant(Integer(), "sqlite")


class IpnTransaction(Base):
    __tablename__ = "ipn_transactions"

    id: Mapped[int] = mapped_column(_ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Pago
    payment_date: Mapped[Optional[str]] = mapped_column(String(64))
    receiver_email: Mapped[Optional[str]] = mapped_column(String(127))
    item_name: Mapped[Optional[str]] = mapped_column(String(255))
    item_number: Mapped[Optional[str]] = mapped_column(String(127))
    payment_status: Mapped[Optional[str]] = mapped_column(String(64))
    pending_reason: Mapped[Optional[str]] = mapped_column(String(64))
    mc_gross: Mapped[Optional[str]] = mapped_column(String(32))
    mc_fee: Mapped[Optional[str]] = mapped_column(String(32))
    tax: Mapped[Optional[str]] = mapped_column(String(32))
    mc_currency: Mapped[Optional[str]] = mapped_column(String(16))
    txn_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    txn_type: Mapped[Optional[str]] = mapped_column(String(64))
    transaction_subject: Mapped[Optional[str]] = mapped_column(String(255))

    # Pagador
    first_name: Mapped[Optional[str]] = mapped_column(String(64))
    last_name: Mapped[Optional[str]] = mapped_column(String(64))
    address_name: Mapped[Optional[str]] = mapped_column(String(128))
    address_street: Mapped[Optional[str]] = mapped_column(String(200))
    address_city: Mapped[Optional[str]] = mapped_column(String(64))
    address_state: Mapped[Optional[str]] = mapped_column(String(64))
    address_zip: Mapped[Optional[str]] = mapped_column(String(32))
    address_country: Mapped[Optional[str]] = mapped_column(String(64))
    address_country_code: Mapped[Optional[str]] = mapped_column(String(8))
    residence_country: Mapped[Optional[str]] = mapped_column(String(8))
    address_status: Mapped[Optional[str]] = mapped_column(String(32))
    payer_email: Mapped[Optional[str]] = mapped_column(String(127))
    payer_status: Mapped[Optional[str]] = mapped_column(String(32))

    # Metadatos del proveedor
    payment_type: Mapped[Optional[str]] = mapped_column(String(32))
    payment_gross: Mapped[Optional[str]] = mapped_column(String(32))
    payment_fee: Mapped[Optional[str]] = mapped_column(String(32))
    notify_version: Mapped[Optional[str]] = mapped_column(String(16))
    verify_sign: Mapped[Optional[str]] = mapped_column(String(255))
    referrer_id: Mapped[Optional[str]] = mapped_column(String(64))
    business: Mapped[Optional[str]] = mapped_column(String(127))
    ipn_track_id: Mapped[Optional[str]] = mapped_column(String(64))

    def __repr__(self) -> str:  # pragma: no cover - representacional
        return f"<IpnTransaction id={self.id} txn_id={self.txn_id} user_id={self.user_id}>"

# Fin del archivo ipn_listener/modules/ipn/models/ipn_transaction_models.py
