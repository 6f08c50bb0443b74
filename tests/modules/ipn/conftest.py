# -*- coding: utf-8 -*-
"""
tests/modules/ipn/conftest.py

Fixtures compartidos para los tests del módulo IPN:
- Body de callback de ejemplo (form-encoded)
- Subscriber que registra los eventos emitidos
- Respondedores de PayPal para httpx.MockTransport
"""

from typing import Callable, List, Optional
from urllib.parse import urlencode

import httpx
import pytest

from ipn_listener.modules.ipn.enums import TransportMode
from ipn_listener.modules.ipn.services.ipn_hooks import IpnSubscriber
from ipn_listener.modules.ipn.services.verification.base import (
    VerificationOutcome,
    VerificationTransport,
)

SANDBOX_URL = "https://ipnpb.sandbox.paypal.com/cgi-bin/webscr"

BASE_FIELDS = {
    "txn_id": "9XY12345AB678901C",
    "txn_type": "web_accept",
    "payment_status": "Completed",
    "mc_gross": "19.95",
    "mc_currency": "USD",
    "receiver_email": "seller@example.com",
    "payer_email": "buyer@example.com",
    "first_name": "Ana",
    "last_name": "López",
    "item_name": "Plan Pro",
    "custom": "42",
}


def build_ipn_body(**overrides: Optional[str]) -> bytes:
    """Body form-encoded de un callback IPN (None elimina el campo)."""
    fields = dict(BASE_FIELDS)
    for key, value in overrides.items():
        if value is None:
            fields.pop(key, None)
        else:
            fields[key] = value
    return urlencode(fields).encode("utf-8")


def paypal_reply(
    body: bytes = b"VERIFIED",
    status_code: int = 200,
    calls: Optional[List[httpx.Request]] = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Handler para httpx.MockTransport que simula el endpoint de PayPal."""

    def _handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, content=body)

    return _handler


def paypal_unreachable(exc_type=httpx.ReadTimeout) -> Callable[[httpx.Request], httpx.Response]:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("simulated network failure", request=request)

    return _handler


class StaticTransport(VerificationTransport):
    """Transporte fijo para tests de handler/rutas (sin red)."""

    mode = TransportMode.MANAGED

    def __init__(self, outcome: VerificationOutcome) -> None:
        super().__init__(SANDBOX_URL)
        self.outcome = outcome
        self.calls: List[bytes] = []

    async def verify(self, raw_body, echo_fields):
        self.calls.append(raw_body)
        return self.outcome


class RecordingSubscriber(IpnSubscriber):
    """Registra cada evento como (nombre, datos)."""

    def __init__(self) -> None:
        self.events: List[tuple] = []

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def on_start(self, context):
        self.events.append(("start", context.txn_id))

    def on_validation(self, context):
        self.events.append(("validation", context.txn_id))

    def on_success(self, user_id, payload, notes):
        self.events.append(("success", (user_id, dict(payload), notes)))

    def on_error(self, user_id, payload, errors):
        self.events.append(("error", (user_id, dict(payload), list(errors))))

    def on_invalid(self, user_id, payload, notes):
        self.events.append(("invalid", (user_id, dict(payload), notes)))

    def on_transport_error(self, detail):
        self.events.append(("transport_error", detail))


@pytest.fixture
def recorder() -> RecordingSubscriber:
    return RecordingSubscriber()


@pytest.fixture
def ipn_body() -> bytes:
    return build_ipn_body()


@pytest.fixture
def make_ipn_body():
    return build_ipn_body


@pytest.fixture
def make_paypal_reply():
    return paypal_reply


@pytest.fixture
def make_paypal_unreachable():
    return paypal_unreachable


@pytest.fixture
def make_static_transport():
    def _make(outcome: Optional[VerificationOutcome] = None) -> StaticTransport:
        return StaticTransport(outcome or VerificationOutcome.verified())

    return _make
