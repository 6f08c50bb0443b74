# -*- coding: utf-8 -*-
"""
tests/shared/config/test_settings_ipn.py

Tests de configuración del listener de IPN.

Autor: DoxAI
Fecha: 2026-10-19
"""

import pytest
from pydantic import ValidationError

from ipn_listener.shared.config.settings_ipn import (
    PAYPAL_IPN_LIVE_URL,
    PAYPAL_IPN_SANDBOX_URL,
    IpnSettings,
    get_ipn_settings,
    reset_ipn_settings,
)


def test_ipn_settings_defaults():
    """Verifica que IpnSettings tiene defaults seguros."""
    settings = IpnSettings(_env_file=None)

    # Verificación
    assert settings.ipn_mode == "live"
    assert settings.verification_url == PAYPAL_IPN_LIVE_URL
    assert settings.ipn_transport == "managed"
    assert settings.ipn_timeout_seconds == 30.0
    assert settings.ipn_verify_ssl is True  # Nunca inseguro por defecto

    # Bajo nivel
    assert settings.ipn_low_level_http_version == "1.1"
    assert settings.ipn_low_level_forbid_reuse is True
    assert settings.ipn_low_level_fatal_transport_errors is False

    # Reglas de negocio (desactivadas)
    assert settings.ipn_receiver_email is None
    assert settings.ipn_expected_currency is None

    # Base de datos
    assert settings.database_url == "sqlite+aiosqlite:///./ipn.db"
    assert settings.ipn_create_tables_on_startup is False


def test_sandbox_mode_uses_sandbox_url(monkeypatch):
    monkeypatch.setenv("IPN_MODE", "sandbox")
    settings = IpnSettings(_env_file=None)
    assert settings.verification_url == PAYPAL_IPN_SANDBOX_URL


def test_explicit_verification_url_wins(monkeypatch):
    monkeypatch.setenv("IPN_MODE", "sandbox")
    monkeypatch.setenv("IPN_VERIFICATION_URL", "https://paypal.test/cgi-bin/webscr")
    settings = IpnSettings(_env_file=None)
    assert settings.verification_url == "https://paypal.test/cgi-bin/webscr"


def test_env_vars_are_case_insensitive(monkeypatch):
    monkeypatch.setenv("ipn_verify_ssl", "false")
    monkeypatch.setenv("IPN_TRANSPORT", "low_level")
    settings = IpnSettings(_env_file=None)
    assert settings.ipn_verify_ssl is False
    assert settings.ipn_transport == "low_level"


def test_unknown_transport_rejected(monkeypatch):
    monkeypatch.setenv("IPN_TRANSPORT", "carrier_pigeon")
    with pytest.raises(ValidationError):
        IpnSettings(_env_file=None)


def test_currency_is_normalized(monkeypatch):
    monkeypatch.setenv("IPN_EXPECTED_CURRENCY", " usd ")
    assert IpnSettings(_env_file=None).ipn_expected_currency == "USD"

    monkeypatch.setenv("IPN_EXPECTED_CURRENCY", "")
    assert IpnSettings(_env_file=None).ipn_expected_currency is None


def test_user_agent_is_descriptive():
    settings = IpnSettings(
        _env_file=None,
        app_name="shop-ipn",
        app_version="2.1.0",
        ipn_site_url="https://shop.example.com/",
    )
    assert settings.user_agent == "shop-ipn/2.1.0; https://shop.example.com/"

    custom = IpnSettings(_env_file=None, ipn_user_agent="Custom/1.0")
    assert custom.user_agent == "Custom/1.0"


def test_get_ipn_settings_singleton():
    """Verifica que get_ipn_settings devuelve un singleton."""
    settings1 = get_ipn_settings()
    settings2 = get_ipn_settings()
    assert settings1 is settings2

    reset_ipn_settings()
    assert get_ipn_settings() is not settings1

# Fin del archivo tests/shared/config/test_settings_ipn.py
