# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/__init__.py

Servicios del listener de IPN.
"""

from .business_rules import ExpectedPaymentRules
from .ipn_hooks import IpnHooks, IpnSubscriber
from .message_log_service import MessageLogService
from .payload_normalizer import NormalizedCallback, normalize_callback_payload, resolve_user_id
from .transaction_recorder_service import TRANSACTION_COLUMNS, TransactionRecorderService

__all__ = [
    "ExpectedPaymentRules",
    "IpnHooks",
    "IpnSubscriber",
    "MessageLogService",
    "NormalizedCallback",
    "normalize_callback_payload",
    "resolve_user_id",
    "TRANSACTION_COLUMNS",
    "TransactionRecorderService",
]

# Fin del archivo ipn_listener/modules/ipn/services/__init__.py
