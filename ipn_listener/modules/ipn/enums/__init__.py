# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/enums/__init__.py

Enums del módulo IPN.
"""

from .verification_result_enum import VerificationResult
from .transport_mode_enum import TransportMode
from .ipn_state_enum import IpnState

__all__ = [
    "VerificationResult",
    "TransportMode",
    "IpnState",
]

# Fin del archivo ipn_listener/modules/ipn/enums/__init__.py
