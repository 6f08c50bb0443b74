# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/verification/managed_transport.py

Transporte gestionado (default): POST HTTPS con httpx usando los clientes
singleton con keep-alive.

Reglas:
- Body = campos recibidos + cmd=_notify-validate, codificado a mano en el
  charset del callback (data= de httpx siempre usaría UTF-8)
- Timeout acotado (30s por defecto)
- User-Agent descriptivo
- Verificación TLS activa por defecto; el modo inseguro debe pedirse
  explícitamente y cada request inseguro queda en el log
- VERIFIED sólo si status en [200, 300) Y body == b"VERIFIED"
- Fallo de red (timeout, DNS, TLS) => TRANSPORT_ERROR, nunca INVALID
- Sin reintentos: reintentar un IPN puede duplicar el procesamiento si se
  cruza con un reenvío de PayPal

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

import httpx

from ipn_listener.modules.ipn.enums import TransportMode
from ipn_listener.modules.ipn.services.ipn_hooks import IpnHooks
from ipn_listener.modules.ipn.services.payload_normalizer import (
    VALIDATE_COMMAND,
    VALIDATE_FIELD,
    encode_form_fields,
    form_charset,
    to_wire_bytes,
)
from .base import (
    FORM_CONTENT_TYPE,
    VERIFIED_TOKEN,
    VerificationOutcome,
    VerificationTransport,
    describe_transport_error,
    summarize_reply,
)
from .http_clients import get_ipn_http_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[bool], httpx.AsyncClient]


def classify_managed_response(status_code: int, body: bytes) -> VerificationOutcome:
    """
    Clasifica la respuesta de PayPal para el transporte gestionado.

    Sin coincidencias difusas: espacios, mayúsculas/minúsculas o
    coincidencias parciales dan INVALID.
    """
    if 200 <= status_code < 300 and body == VERIFIED_TOKEN:
        return VerificationOutcome.verified()
    return VerificationOutcome.invalid(summarize_reply(status_code, body))


class ManagedVerificationTransport(VerificationTransport):
    """Echo-back vía httpx.AsyncClient compartido."""

    mode = TransportMode.MANAGED

    def __init__(
        self,
        verification_url: str,
        *,
        hooks: IpnHooks,
        user_agent: str,
        timeout_seconds: float = 30.0,
        verify_ssl: bool = True,
        client_factory: ClientFactory = get_ipn_http_client,
    ) -> None:
        super().__init__(verification_url, timeout_seconds)
        self.hooks = hooks
        self.user_agent = user_agent
        self.verify_ssl = verify_ssl
        self._client_factory = client_factory

    def build_request_options(self, echo_fields: Mapping[str, str]) -> Dict[str, Any]:
        """Opciones del request antes de aplicar el filtro externo."""
        data = dict(echo_fields)
        data[VALIDATE_FIELD] = VALIDATE_COMMAND
        return {
            "url": self.verification_url,
            "data": data,
            "timeout": self.timeout_seconds,
            "verify": self.verify_ssl,
            "headers": {"User-Agent": self.user_agent},
        }

    async def verify(
        self,
        raw_body: bytes,
        echo_fields: Mapping[str, str],
    ) -> VerificationOutcome:
        options = self.hooks.filter_request_options(self.build_request_options(echo_fields))

        verify_tls = bool(options.get("verify", True))
        if not verify_tls:
            logger.warning(
                "IPN: verificación TLS DESHABILITADA explícitamente (modo legacy). "
                "Esto NUNCA debe usarse en producción."
            )

        data = options.get("data") or {}
        charset = form_charset(data)
        headers = dict(options.get("headers") or {})
        headers.setdefault("Content-Type", FORM_CONTENT_TYPE)

        client = self._client_factory(verify_tls)
        try:
            response = await client.post(
                options["url"],
                content=to_wire_bytes(encode_form_fields(data, charset), charset),
                headers=headers,
                timeout=options.get("timeout", self.timeout_seconds),
            )
        except httpx.HTTPError as e:
            detail = describe_transport_error(e)
            logger.error(f"IPN verify: no se pudo contactar a PayPal - {detail}")
            return VerificationOutcome.transport_error(detail)

        outcome = classify_managed_response(response.status_code, response.content)
        if not outcome.is_verified:
            logger.warning(f"IPN verify: PayPal no confirmó el mensaje ({outcome.detail})")
        return outcome


__all__ = [
    "ManagedVerificationTransport",
    "classify_managed_response",
]

# Fin del archivo ipn_listener/modules/ipn/services/verification/managed_transport.py
