# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/verification/__init__.py

Cliente de verificación echo-back (transportes gestionado y de bajo nivel).
"""

from .base import VERIFIED_TOKEN, VerificationOutcome, VerificationTransport
from .factory import build_verification_transport
from .http_clients import close_ipn_http_clients, get_ipn_http_client
from .low_level_transport import LowLevelVerificationTransport, build_http_transport
from .managed_transport import ManagedVerificationTransport, classify_managed_response

__all__ = [
    "VERIFIED_TOKEN",
    "VerificationOutcome",
    "VerificationTransport",
    "build_verification_transport",
    "close_ipn_http_clients",
    "get_ipn_http_client",
    "LowLevelVerificationTransport",
    "build_http_transport",
    "ManagedVerificationTransport",
    "classify_managed_response",
]

# Fin del archivo ipn_listener/modules/ipn/services/verification/__init__.py
