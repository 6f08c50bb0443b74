# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/facades/context.py

Contexto explícito de un callback IPN.

Cada callback crea su propio contexto: errores y notas no se comparten
entre callbacks concurrentes.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ipn_listener.modules.ipn.enums import IpnState
from ipn_listener.modules.ipn.services.payload_normalizer import (
    normalize_callback_payload,
    resolve_user_id,
)
from ipn_listener.modules.ipn.services.verification.base import VerificationOutcome


@dataclass
class IpnContext:
    raw_body: bytes
    echo_fields: Dict[str, str]
    payload: Dict[str, str]
    user_id: int = 0
    outcome: Optional[VerificationOutcome] = None
    errors: List[str] = field(default_factory=list)
    notes: str = ""
    state: IpnState = IpnState.RECEIVED

    @classmethod
    def from_raw_body(cls, raw_body: bytes) -> "IpnContext":
        normalized = normalize_callback_payload(raw_body)
        return cls(
            raw_body=raw_body,
            echo_fields=dict(normalized.echo_fields),
            payload=dict(normalized.payload),
            user_id=resolve_user_id(normalized.payload),
        )

    @property
    def txn_id(self) -> str:
        return self.payload.get("txn_id", "")

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_note(self, note: str) -> None:
        self.notes = f"{self.notes}; {note}" if self.notes else note

    def log_notes(self) -> str:
        """Notas para el log: notas del contexto seguidas de los errores."""
        parts = [self.notes] if self.notes else []
        parts.extend(self.errors)
        return "; ".join(parts)


__all__ = ["IpnContext"]

# Fin del archivo ipn_listener/modules/ipn/facades/context.py
