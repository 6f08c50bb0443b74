# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/models/__init__.py

Modelos ORM del módulo IPN.
"""

from .ipn_message_models import IpnMessage
from .ipn_transaction_models import IpnTransaction

__all__ = ["IpnMessage", "IpnTransaction"]

# Fin del archivo ipn_listener/modules/ipn/models/__init__.py
