# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/enums/ipn_state_enum.py

Estados del despachador de IPN. RECEIVED es el único estado no terminal;
cada callback hace exactamente una transición.

Autor: DoxAI
Fecha: 2026-10-19
"""

from enum import StrEnum


class IpnState(StrEnum):
    """Estado del procesamiento de un callback IPN."""

    RECEIVED = "received"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED = "rejected"


__all__ = ["IpnState"]


# Fin del archivo ipn_listener/modules/ipn/enums/ipn_state_enum.py
