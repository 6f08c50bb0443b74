# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/__init__.py

Módulo IPN: listener de Instant Payment Notification de PayPal con
verificación echo-back.

Los submódulos se importan explícitamente (routes, facades, services)
para no cargar FastAPI desde los scripts de instalación.
"""
