# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/facades/__init__.py

Fachadas del handshake IPN: contexto, despachador y handler.
"""

from .context import IpnContext
from .dispatcher import DispatchReport, OutcomeDispatcher, decide_state
from .handler import IpnHandler, process_ipn_notification

__all__ = [
    "IpnContext",
    "DispatchReport",
    "OutcomeDispatcher",
    "decide_state",
    "IpnHandler",
    "process_ipn_notification",
]

# Fin del archivo ipn_listener/modules/ipn/facades/__init__.py
