# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/schemas/ipn_schemas.py

Schemas Pydantic del listener de IPN.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ipn_listener.modules.ipn.enums import IpnState, VerificationResult


class IpnAckResponse(BaseModel):
    """Respuesta inmediata a PayPal (el procesamiento sigue en background)."""

    status: str = Field(default="received", description="Acuse de recibo")


class IpnProcessingResult(BaseModel):
    """Resultado del procesamiento de un callback."""

    state: IpnState = Field(..., description="Estado final del despachador")
    verification: VerificationResult = Field(..., description="Resultado del echo-back")
    user_id: int = Field(0, description="Correlación 'custom' (no autenticada)")
    txn_id: str = Field("", description="txn_id de PayPal, si viene en el payload")
    log_written: bool = Field(False, description="Se escribió la fila en ipn_messages")
    transaction_recorded: bool = Field(
        False,
        description="Se escribió la fila en ipn_transactions",
    )
    storage_errors: List[str] = Field(
        default_factory=list,
        description="Tablas cuya escritura falló",
    )


__all__ = ["IpnAckResponse", "IpnProcessingResult"]

# Fin del archivo ipn_listener/modules/ipn/schemas/ipn_schemas.py
