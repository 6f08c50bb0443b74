# -*- coding: utf-8 -*-
"""
ipn_listener/shared/config/logging_config.py

Configuración centralizada de logging para el listener de IPN.
Soporta formato plain (desarrollo) y json (producción).

Qué registra el listener (loggers bajo ipn_listener.*):
- INFO: callback recibido (txn_id, user_id, transporte), outcome y estado
  final, transacción registrada
- WARNING: respuesta distinta de VERIFIED, errores de reglas de negocio,
  verificación TLS deshabilitada, health check de base de datos fallido
- ERROR: PayPal inalcanzable (TRANSPORT_ERROR) y fallos de escritura en
  ipn_messages / ipn_transactions, con traceback

Nunca se registra el payload completo: los datos del pagador sólo quedan
en ipn_detail. Los loggers de httpx/httpcore se limitan a WARNING para
que cada echo-back no duplique una línea INFO por request.

Autor: DoxAI
Fecha: 2026-10-19
"""

import importlib
import logging.config
from typing import Literal


def _json_formatter_path() -> str:
    """Resuelve la ruta del JsonFormatter (v3 usa jsonlogger, v4 usa json)."""
    try:
        importlib.import_module("pythonjsonlogger.json")
        return "pythonjsonlogger.json.JsonFormatter"
    except ImportError:  # pragma: no cover
        return "pythonjsonlogger.jsonlogger.JsonFormatter"


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain"
) -> None:
    """
    Configura el sistema de logging de la aplicación.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Formato de salida (plain, pretty, json)

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    # pretty == plain para efectos prácticos
    use_json = fmt == "json"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else "default",
            "stream": "ext://sys.stdout",
        }
    }

    formatters = {
        "default": {
            "format": "%(asctime)s - %(levelname)s [%(name)s]: %(message)s"
        },
        "json": {
            "()": _json_formatter_path(),
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
        },
    }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(logging_config)


__all__ = ["setup_logging"]
# Fin del archivo ipn_listener/shared/config/logging_config.py
