# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/verification/factory.py

Selección del transporte de verificación según la configuración.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging

from ipn_listener.modules.ipn.enums import TransportMode
from ipn_listener.modules.ipn.exceptions import IpnConfigurationError
from ipn_listener.modules.ipn.services.ipn_hooks import IpnHooks
from ipn_listener.shared.config.settings_ipn import IpnSettings
from .base import VerificationTransport
from .low_level_transport import LowLevelVerificationTransport
from .managed_transport import ManagedVerificationTransport

logger = logging.getLogger(__name__)


def build_verification_transport(
    settings: IpnSettings,
    hooks: IpnHooks,
) -> VerificationTransport:
    """
    Crea el transporte configurado (managed por defecto).

    Raises:
        IpnConfigurationError: si ipn_transport no es un modo conocido
    """
    try:
        mode = TransportMode(settings.ipn_transport)
    except ValueError as e:
        raise IpnConfigurationError(f"Modo de transporte IPN desconocido: {settings.ipn_transport!r}") from e

    if mode is TransportMode.LOW_LEVEL:
        transport: VerificationTransport = LowLevelVerificationTransport(
            settings.verification_url,
            hooks=hooks,
            timeout_seconds=settings.ipn_timeout_seconds,
            verify_ssl=settings.ipn_verify_ssl,
            http_version=settings.ipn_low_level_http_version,
            forbid_reuse=settings.ipn_low_level_forbid_reuse,
            fatal_transport_errors=settings.ipn_low_level_fatal_transport_errors,
        )
    else:
        transport = ManagedVerificationTransport(
            settings.verification_url,
            hooks=hooks,
            user_agent=settings.user_agent,
            timeout_seconds=settings.ipn_timeout_seconds,
            verify_ssl=settings.ipn_verify_ssl,
        )

    logger.info(f"IPN: transporte de verificación={mode.value} url={settings.verification_url}")
    return transport


__all__ = ["build_verification_transport"]

# Fin del archivo ipn_listener/modules/ipn/services/verification/factory.py
