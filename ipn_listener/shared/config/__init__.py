# -*- coding: utf-8 -*-
"""
ipn_listener/shared/config/__init__.py

Punto único de acceso a la configuración:
    from ipn_listener.shared.config import get_ipn_settings
"""

from .settings_ipn import (
    IpnSettings,
    get_ipn_settings,
    reset_ipn_settings,
    PAYPAL_IPN_LIVE_URL,
    PAYPAL_IPN_SANDBOX_URL,
)
from .logging_config import setup_logging

__all__ = [
    "IpnSettings",
    "get_ipn_settings",
    "reset_ipn_settings",
    "PAYPAL_IPN_LIVE_URL",
    "PAYPAL_IPN_SANDBOX_URL",
    "setup_logging",
]

# Fin del archivo ipn_listener/shared/config/__init__.py
