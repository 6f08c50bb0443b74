# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/verification/base.py

Contrato común de verificación echo-back.

El protocolo de PayPal no tiene integridad criptográfica: la única defensa
contra callbacks falsificados es devolverle los datos y exigir el token
literal "VERIFIED". Todo transporte implementa este mismo contrato.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Mapping

from ipn_listener.modules.ipn.enums import TransportMode, VerificationResult

# Token literal de PayPal (comparación byte a byte, sin normalizar)
VERIFIED_TOKEN = b"VERIFIED"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class VerificationOutcome:
    """Resultado inmutable del handshake (uno por callback)."""

    result: VerificationResult
    detail: str = ""

    @classmethod
    def verified(cls) -> "VerificationOutcome":
        return cls(VerificationResult.VERIFIED)

    @classmethod
    def invalid(cls, detail: str = "") -> "VerificationOutcome":
        return cls(VerificationResult.INVALID, detail)

    @classmethod
    def transport_error(cls, detail: str) -> "VerificationOutcome":
        return cls(VerificationResult.TRANSPORT_ERROR, detail)

    @property
    def is_verified(self) -> bool:
        return self.result is VerificationResult.VERIFIED

    @property
    def is_transport_error(self) -> bool:
        return self.result is VerificationResult.TRANSPORT_ERROR


def describe_transport_error(exc: Exception) -> str:
    """Descripción legible de un fallo del echo-back (algunos errores de httpx vienen sin mensaje)."""
    message = str(exc).strip()
    if message:
        return f"{type(exc).__name__}: {message}"
    return type(exc).__name__


def summarize_reply(status_code: int | None, body: bytes) -> str:
    """Resumen corto de una respuesta no VERIFIED para logs y notas."""
    snippet = body[:40].decode("utf-8", errors="replace")
    if status_code is None:
        return f"reply={snippet!r}"
    return f"HTTP {status_code} reply={snippet!r}"


class VerificationTransport(abc.ABC):
    """Capacidad polimórfica de verificación (gestionado / bajo nivel)."""

    mode: TransportMode

    def __init__(self, verification_url: str, timeout_seconds: float = 30.0) -> None:
        self.verification_url = verification_url
        self.timeout_seconds = timeout_seconds

    @abc.abstractmethod
    async def verify(
        self,
        raw_body: bytes,
        echo_fields: Mapping[str, str],
    ) -> VerificationOutcome:
        """
        Devuelve el callback a PayPal y clasifica la respuesta.

        Args:
            raw_body: Body crudo del callback
            echo_fields: Campos tal cual se recibieron

        Returns:
            VerificationOutcome (VERIFIED / INVALID / TRANSPORT_ERROR)
        """


__all__ = [
    "VERIFIED_TOKEN",
    "VerificationOutcome",
    "VerificationTransport",
    "describe_transport_error",
    "summarize_reply",
]

# Fin del archivo ipn_listener/modules/ipn/services/verification/base.py
