# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/verification/low_level_transport.py

Transporte de bajo nivel: reconstruye el body a partir del request crudo
y lo envía con un httpx.AsyncHTTPTransport dedicado, configurado opción
por opción (versión HTTP, verificación de peer/host, sin reutilizar
conexión, header Connection: Close, versión/cifrados TLS).

Diferencias con el transporte gestionado:
- El body NO sale de los campos parseados por el framework: se parte el
  body crudo en '&' / '=' (split_raw_body) y se vuelve a codificar en el
  charset declarado, de modo que PayPal recibe los mismos bytes.
- Filtros: encoded_body (string final) y low_level_options (opciones).
- Clasificación: VERIFIED sólo si el body de respuesta es exactamente
  b"VERIFIED" (el status no se consulta, igual que el listener original).
- Modo legacy opcional: un fallo de transporte lanza IpnTransportFatalError
  en lugar de devolver TRANSPORT_ERROR.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
import ssl
from typing import Any, Callable, Dict, Mapping, Optional

import certifi
import httpx

from ipn_listener.modules.ipn.enums import TransportMode
from ipn_listener.modules.ipn.exceptions import IpnConfigurationError, IpnTransportFatalError
from ipn_listener.modules.ipn.services.ipn_hooks import IpnHooks
from ipn_listener.modules.ipn.services.payload_normalizer import (
    detect_body_charset,
    encode_validation_body,
    split_raw_body,
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

logger = logging.getLogger(__name__)

TransportFactory = Callable[[Dict[str, Any]], httpx.AsyncBaseTransport]

# Nombres aceptados en ssl_version -> versión mínima de TLS
_TLS_VERSIONS = {
    "TLSv1": ssl.TLSVersion.TLSv1,
    "TLSv1_1": ssl.TLSVersion.TLSv1_1,
    "TLSv1_2": ssl.TLSVersion.TLSv1_2,
    "TLSv1_3": ssl.TLSVersion.TLSv1_3,
}


def default_low_level_options(
    *,
    http_version: str = "1.1",
    verify_ssl: bool = True,
    forbid_reuse: bool = True,
    timeout_seconds: float = 30.0,
) -> Dict[str, Any]:
    """Opciones por defecto del transporte de bajo nivel (antes del filtro)."""
    return {
        "http_version": http_version,
        "verify_peer": verify_ssl,
        "verify_host": verify_ssl,
        "forbid_reuse": forbid_reuse,
        "headers": {"Connection": "Close"},
        "ssl_version": None,
        "ssl_cipher_list": None,
        "timeout": timeout_seconds,
    }


def build_ssl_context(options: Mapping[str, Any]) -> ssl.SSLContext:
    """
    Construye el contexto TLS según verify_peer / verify_host /
    ssl_version / ssl_cipher_list.
    """
    ctx = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH, cafile=certifi.where())

    verify_peer = bool(options.get("verify_peer", True))
    verify_host = bool(options.get("verify_host", True))
    if not verify_peer:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    else:
        ctx.check_hostname = verify_host
        ctx.verify_mode = ssl.CERT_REQUIRED

    ssl_version = options.get("ssl_version")
    if ssl_version:
        if ssl_version not in _TLS_VERSIONS:
            raise IpnConfigurationError(f"ssl_version no soportada: {ssl_version!r}")
        ctx.minimum_version = _TLS_VERSIONS[ssl_version]

    cipher_list = options.get("ssl_cipher_list")
    if cipher_list:
        try:
            ctx.set_ciphers(cipher_list)
        except ssl.SSLError as e:
            raise IpnConfigurationError(f"ssl_cipher_list inválida: {cipher_list!r}") from e

    return ctx


def build_http_transport(options: Mapping[str, Any]) -> httpx.AsyncHTTPTransport:
    """Crea el AsyncHTTPTransport dedicado para un único echo-back."""
    http_version = str(options.get("http_version", "1.1"))
    if http_version not in ("1.1", "2"):
        raise IpnConfigurationError(f"http_version no soportada: {http_version!r}")

    limits = httpx.Limits(max_keepalive_connections=0) if options.get("forbid_reuse", True) else None
    kwargs: Dict[str, Any] = {
        "verify": build_ssl_context(options),
        "http1": True,
        "http2": http_version == "2",
        "retries": 0,
    }
    if limits is not None:
        kwargs["limits"] = limits
    return httpx.AsyncHTTPTransport(**kwargs)


class LowLevelVerificationTransport(VerificationTransport):
    """Echo-back con body reconstruido y transporte configurado a mano."""

    mode = TransportMode.LOW_LEVEL

    def __init__(
        self,
        verification_url: str,
        *,
        hooks: IpnHooks,
        timeout_seconds: float = 30.0,
        verify_ssl: bool = True,
        http_version: str = "1.1",
        forbid_reuse: bool = True,
        fatal_transport_errors: bool = False,
        transport_factory: Optional[TransportFactory] = None,
    ) -> None:
        super().__init__(verification_url, timeout_seconds)
        self.hooks = hooks
        self.verify_ssl = verify_ssl
        self.http_version = http_version
        self.forbid_reuse = forbid_reuse
        self.fatal_transport_errors = fatal_transport_errors
        self._transport_factory = transport_factory or build_http_transport

    def build_options(self) -> Dict[str, Any]:
        return default_low_level_options(
            http_version=self.http_version,
            verify_ssl=self.verify_ssl,
            forbid_reuse=self.forbid_reuse,
            timeout_seconds=self.timeout_seconds,
        )

    def build_encoded_body(self, raw_body: bytes, charset: Optional[str] = None) -> str:
        charset = charset or detect_body_charset(raw_body)
        return encode_validation_body(split_raw_body(raw_body, charset), charset)

    async def verify(
        self,
        raw_body: bytes,
        echo_fields: Mapping[str, str],
    ) -> VerificationOutcome:
        charset = detect_body_charset(raw_body)
        encoded_body = self.hooks.filter_encoded_body(self.build_encoded_body(raw_body, charset))
        options = self.hooks.filter_low_level_options(self.build_options())

        if not options.get("verify_peer", True) or not options.get("verify_host", True):
            logger.warning(
                "IPN low-level: verificación TLS DESHABILITADA explícitamente. "
                "Esto NUNCA debe usarse en producción."
            )

        headers = dict(options.get("headers") or {})
        headers.setdefault("Content-Type", FORM_CONTENT_TYPE)

        transport = self._transport_factory(dict(options))
        try:
            async with httpx.AsyncClient(
                transport=transport,
                timeout=options.get("timeout", self.timeout_seconds),
            ) as client:
                response = await client.post(
                    self.verification_url,
                    content=to_wire_bytes(encoded_body, charset),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            detail = describe_transport_error(e)
            logger.error(f"IPN low-level: no se pudo contactar a PayPal - {detail}")
            if self.fatal_transport_errors:
                raise IpnTransportFatalError(detail) from e
            return VerificationOutcome.transport_error(detail)

        if response.content == VERIFIED_TOKEN:
            return VerificationOutcome.verified()

        detail = summarize_reply(response.status_code, response.content)
        logger.warning(f"IPN low-level: PayPal no confirmó el mensaje ({detail})")
        return VerificationOutcome.invalid(detail)


__all__ = [
    "FORM_CONTENT_TYPE",
    "LowLevelVerificationTransport",
    "build_http_transport",
    "build_ssl_context",
    "default_low_level_options",
]

# Fin del archivo ipn_listener/modules/ipn/services/verification/low_level_transport.py
