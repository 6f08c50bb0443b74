# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/business_rules.py

Reglas de negocio integradas, ejecutadas en el evento "validation"
(sólo para callbacks VERIFIED).

- La cuenta receptora (receiver_email / business) debe ser la configurada
- La moneda (mc_currency) debe ser la esperada
- Un payment_status distinto de "Completed" no es error, pero queda en notas

Ambas comprobaciones son opcionales: sin configuración no se valida nada.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ipn_listener.modules.ipn.services.ipn_hooks import IpnSubscriber
from ipn_listener.shared.config.settings_ipn import IpnSettings

if TYPE_CHECKING:
    from ipn_listener.modules.ipn.facades.context import IpnContext

logger = logging.getLogger(__name__)

COMPLETED_STATUS = "Completed"


class ExpectedPaymentRules(IpnSubscriber):
    """Valida cuenta receptora y moneda de un callback verificado."""

    def __init__(
        self,
        receiver_email: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> None:
        self.receiver_email = receiver_email.strip().lower() if receiver_email else None
        self.currency = currency.strip().upper() if currency else None

    @classmethod
    def from_settings(cls, settings: IpnSettings) -> "ExpectedPaymentRules":
        return cls(
            receiver_email=settings.ipn_receiver_email,
            currency=settings.ipn_expected_currency,
        )

    @property
    def is_active(self) -> bool:
        return bool(self.receiver_email or self.currency)

    def on_validation(self, context: "IpnContext") -> None:
        payload = context.payload

        if self.receiver_email:
            receiver = (payload.get("receiver_email") or payload.get("business") or "").strip().lower()
            if receiver != self.receiver_email:
                context.add_error(f"receiver_email mismatch: {receiver or '(empty)'}")

        if self.currency:
            currency = (payload.get("mc_currency") or "").strip().upper()
            if currency != self.currency:
                context.add_error(
                    f"currency mismatch: expected {self.currency}, got {currency or '(empty)'}"
                )

        status = payload.get("payment_status", "")
        if status and status != COMPLETED_STATUS:
            context.add_note(f"payment_status={status}")

        if context.has_errors:
            logger.warning(f"IPN reglas de negocio: txn_id={context.txn_id!r} errores={context.errors}")


__all__ = ["ExpectedPaymentRules", "COMPLETED_STATUS"]

# Fin del archivo ipn_listener/modules/ipn/services/business_rules.py
