# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/repositories/__init__.py
"""

from .ipn_message_repository import IpnMessageRepository
from .ipn_transaction_repository import IpnTransactionRepository

__all__ = ["IpnMessageRepository", "IpnTransactionRepository"]
