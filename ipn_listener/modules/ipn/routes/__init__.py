# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/routes/__init__.py
"""

from .ipn_routes import router

__all__ = ["router"]
