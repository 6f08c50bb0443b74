# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/enums/transport_mode_enum.py

Estrategias de transporte para la llamada de verificación.

Autor: DoxAI
Fecha: 2026-10-19
"""

from enum import StrEnum


class TransportMode(StrEnum):
    """Transporte usado para el echo-back a PayPal."""

    MANAGED = "managed"
    LOW_LEVEL = "low_level"


__all__ = ["TransportMode"]


# Fin del archivo ipn_listener/modules/ipn/enums/transport_mode_enum.py
