# -*- coding: utf-8 -*-
"""
Tests de los clientes HTTP singleton del transporte gestionado.

Autor: DoxAI
Fecha: 2026-10-19
"""

import pytest

from ipn_listener.modules.ipn.services.verification.http_clients import (
    _get_ipn_clients_count,
    close_ipn_http_clients,
    get_ipn_http_client,
)


@pytest.mark.asyncio
async def test_one_client_per_tls_mode():
    try:
        secure = get_ipn_http_client()
        assert get_ipn_http_client(verify=True) is secure

        insecure = get_ipn_http_client(verify=False)
        assert insecure is not secure
        assert _get_ipn_clients_count() == 2
    finally:
        await close_ipn_http_clients()


@pytest.mark.asyncio
async def test_close_clears_clients():
    client = get_ipn_http_client()

    await close_ipn_http_clients()

    assert _get_ipn_clients_count() == 0
    assert client.is_closed
    assert get_ipn_http_client() is not client
    await close_ipn_http_clients()
