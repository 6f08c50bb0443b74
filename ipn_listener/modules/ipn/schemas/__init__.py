# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/schemas/__init__.py
"""

from .ipn_schemas import IpnAckResponse, IpnProcessingResult

__all__ = ["IpnAckResponse", "IpnProcessingResult"]
