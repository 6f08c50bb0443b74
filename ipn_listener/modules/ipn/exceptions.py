# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/exceptions.py

Excepciones del módulo IPN.

Un rechazo de PayPal ("INVALID") NO es una excepción: es un resultado
legítimo del protocolo. Tampoco lo son los errores de reglas de negocio,
que se acumulan en el contexto del callback.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations


class IpnError(Exception):
    """Error base del listener de IPN."""


class IpnConfigurationError(IpnError):
    """Configuración inválida (p. ej. modo de transporte desconocido)."""


class IpnTransportFatalError(IpnError):
    """
    Fallo de transporte en modo compatibilidad legacy (bajo nivel).

    Aborta el procesamiento del callback actual: sin conocer el estado de
    verificación no es seguro continuar.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


__all__ = [
    "IpnError",
    "IpnConfigurationError",
    "IpnTransportFatalError",
]

# Fin del archivo ipn_listener/modules/ipn/exceptions.py
