# -*- coding: utf-8 -*-
"""
ipn_listener/shared/config/settings_ipn.py

Configuración del listener de IPN (Instant Payment Notification) de PayPal.

Descripción:
    Centraliza URL de verificación, estrategia de transporte, timeouts,
    reglas de negocio y conexión a base de datos.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PAYPAL_IPN_LIVE_URL = "https://ipnpb.paypal.com/cgi-bin/webscr"
PAYPAL_IPN_SANDBOX_URL = "https://ipnpb.sandbox.paypal.com/cgi-bin/webscr"


class IpnSettings(BaseSettings):
    """Configuración del sistema de IPN."""

    # =========================================================================
    # APLICACIÓN
    # =========================================================================

    app_name: str = Field(
        default="ipn-listener",
        description="Nombre de la aplicación (se usa en el User-Agent)"
    )

    app_version: str = Field(
        default="1.0.0",
        description="Versión de la aplicación (se usa en el User-Agent)"
    )

    ipn_site_url: str = Field(
        default="http://localhost/",
        description="URL pública del sitio que recibe las notificaciones"
    )

    host: str = Field(default="0.0.0.0", description="Host del servidor uvicorn")

    port: int = Field(default=8000, description="Puerto del servidor uvicorn")

    # =========================================================================
    # PAYPAL / VERIFICACIÓN
    # =========================================================================

    ipn_mode: Literal["live", "sandbox"] = Field(
        default="live",
        description="Modo de PayPal: 'live' o 'sandbox'"
    )

    ipn_verification_url: Optional[str] = Field(
        default=None,
        description="URL de verificación explícita (sobrescribe ipn_mode)"
    )

    ipn_transport: Literal["managed", "low_level"] = Field(
        default="managed",
        description="Estrategia de transporte para el echo-back de verificación"
    )

    ipn_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout de la llamada de verificación (segundos)"
    )

    ipn_verify_ssl: bool = Field(
        default=True,
        description="Verificación de certificado TLS (False SOLO por compatibilidad legacy)"
    )

    ipn_user_agent: Optional[str] = Field(
        default=None,
        description="User-Agent del cliente de verificación (default: app/version; sitio)"
    )

    # =========================================================================
    # TRANSPORTE DE BAJO NIVEL
    # =========================================================================

    ipn_low_level_http_version: Literal["1.1", "2"] = Field(
        default="1.1",
        description="Versión HTTP del transporte de bajo nivel"
    )

    ipn_low_level_forbid_reuse: bool = Field(
        default=True,
        description="No reutilizar conexiones en el transporte de bajo nivel"
    )

    ipn_low_level_fatal_transport_errors: bool = Field(
        default=False,
        description="Modo compatibilidad: un error de transporte aborta el callback"
    )

    # =========================================================================
    # REGLAS DE NEGOCIO
    # =========================================================================

    ipn_receiver_email: Optional[str] = Field(
        default=None,
        description="Email de la cuenta PayPal receptora esperada"
    )

    ipn_expected_currency: Optional[str] = Field(
        default=None,
        description="Moneda esperada (mc_currency) para pagos válidos"
    )

    # =========================================================================
    # BASE DE DATOS
    # =========================================================================

    database_url: str = Field(
        default="sqlite+aiosqlite:///./ipn.db",
        description="DSN async de SQLAlchemy"
    )

    db_echo_sql: bool = Field(
        default=False,
        description="Log de SQL emitido por SQLAlchemy"
    )

    ipn_create_tables_on_startup: bool = Field(
        default=False,
        description="Crea las tablas de IPN (if not exists) al arrancar la app"
    )

    # =========================================================================
    # LOGGING
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Nivel de logging"
    )

    log_format: Literal["plain", "pretty", "json"] = Field(
        default="plain",
        description="Formato de logging"
    )

    @field_validator("ipn_expected_currency", mode="before")
    @classmethod
    def _upper_currency(cls, v: Optional[str]) -> Optional[str]:
        """Normaliza la moneda esperada a mayúsculas; vacío equivale a None."""
        if not v:
            return None
        return str(v).strip().upper()

    @property
    def verification_url(self) -> str:
        """URL efectiva del endpoint de verificación de PayPal."""
        if self.ipn_verification_url:
            return self.ipn_verification_url
        if self.ipn_mode == "sandbox":
            return PAYPAL_IPN_SANDBOX_URL
        return PAYPAL_IPN_LIVE_URL

    @property
    def user_agent(self) -> str:
        """User-Agent descriptivo para el cliente de verificación."""
        if self.ipn_user_agent:
            return self.ipn_user_agent
        return f"{self.app_name}/{self.app_version}; {self.ipn_site_url}"

    # =========================================================================
    # CONFIGURACIÓN DE PYDANTIC
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Singleton global
_ipn_settings: Optional[IpnSettings] = None


def get_ipn_settings() -> IpnSettings:
    """
    Obtiene la instancia global de configuración de IPN.

    Returns:
        IpnSettings: Configuración de IPN
    """
    global _ipn_settings
    if _ipn_settings is None:
        _ipn_settings = IpnSettings()
    return _ipn_settings


def reset_ipn_settings() -> None:
    """Descarta el singleton (útil para tests)."""
    global _ipn_settings
    _ipn_settings = None


__all__ = [
    "IpnSettings",
    "get_ipn_settings",
    "reset_ipn_settings",
    "PAYPAL_IPN_LIVE_URL",
    "PAYPAL_IPN_SANDBOX_URL",
]
# Fin del archivo ipn_listener/shared/config/settings_ipn.py
