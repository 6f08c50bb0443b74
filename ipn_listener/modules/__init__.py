# -*- coding: utf-8 -*-
"""
ipn_listener/modules/__init__.py

Módulos de dominio del listener.
"""
