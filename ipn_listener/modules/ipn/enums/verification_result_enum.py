# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/enums/verification_result_enum.py

Resultado del handshake de verificación (echo-back) contra PayPal.
El valor se persiste tal cual en ipn_messages.result.

Autor: DoxAI
Fecha: 2026-10-19
"""

from enum import StrEnum


class VerificationResult(StrEnum):
    """Clasificación de la respuesta de PayPal al echo-back."""

    VERIFIED = "VERIFIED"
    INVALID = "INVALID"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


__all__ = ["VerificationResult"]


# Fin del archivo ipn_listener/modules/ipn/enums/verification_result_enum.py
