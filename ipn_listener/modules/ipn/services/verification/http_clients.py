# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/verification/http_clients.py

Clientes HTTP singleton para el transporte gestionado.

NOTA: El cliente singleton mantiene conexiones keep-alive hacia PayPal.
NO usar "async with" por request; el cliente se reutiliza.
Para cleanup en shutdown, close_ipn_http_clients() se registra en el
lifespan de la app.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import Dict

import httpx

logger = logging.getLogger(__name__)

# Límites de conexión para los clientes singleton
IPN_HTTP_LIMITS = httpx.Limits(
    max_keepalive_connections=20,
    max_connections=50,
    keepalive_expiry=30.0,
)

# Claves explícitas: httpx fija la verificación TLS por cliente
IPN_CLIENT_VERIFY_TLS = "ipn_verify_tls"
IPN_CLIENT_INSECURE = "ipn_insecure"

_ipn_clients: Dict[str, httpx.AsyncClient] = {}


def get_ipn_http_client(verify: bool = True) -> httpx.AsyncClient:
    """
    Retorna el cliente HTTP singleton para el modo TLS indicado.

    Args:
        verify: True para verificar certificados (default)

    Returns:
        httpx.AsyncClient configurado y reutilizable
    """
    client_key = IPN_CLIENT_VERIFY_TLS if verify else IPN_CLIENT_INSECURE
    if client_key not in _ipn_clients:
        _ipn_clients[client_key] = httpx.AsyncClient(
            verify=verify,
            limits=IPN_HTTP_LIMITS,
        )
        logger.debug(f"Creado cliente IPN HTTP singleton (key={client_key})")
    return _ipn_clients[client_key]


async def close_ipn_http_clients() -> None:
    """Cierra todos los clientes HTTP de IPN."""
    for key, client in list(_ipn_clients.items()):
        try:
            await client.aclose()
            logger.debug(f"Cliente IPN HTTP cerrado (key={key})")
        except Exception as e:
            logger.warning(f"Error cerrando cliente IPN HTTP: {e}")
    _ipn_clients.clear()


def _get_ipn_clients_count() -> int:
    """Retorna número de clientes activos (para tests)."""
    return len(_ipn_clients)


__all__ = [
    "IPN_HTTP_LIMITS",
    "get_ipn_http_client",
    "close_ipn_http_clients",
]

# Fin del archivo ipn_listener/modules/ipn/services/verification/http_clients.py
