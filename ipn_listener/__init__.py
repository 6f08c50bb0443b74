# -*- coding: utf-8 -*-
"""
ipn_listener/__init__.py

Listener de IPN (Instant Payment Notification) de PayPal.

Recibe notificaciones no autenticadas, las verifica por echo-back contra
PayPal y sólo entonces las registra y despacha como confiables.

Autor: DoxAI
Fecha: 2026-10-19
"""

__version__ = "1.0.0"
