# -*- coding: utf-8 -*-
"""
ipn_listener/shared/__init__.py

Infraestructura compartida: configuración, logging y base de datos.
"""
