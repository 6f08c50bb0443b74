# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/metrics/prometheus_exporter.py

Exporter Prometheus del listener de IPN.

Métricas separadas para verificación (respuesta de PayPal) y outcome
(estado final del despachador).

Autor: DoxAI
Fecha: 2026-10-19
"""

import logging

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------
# Registro propio del módulo
# --------------------------------------------------------------------------
registry = CollectorRegistry()

# --------------------------------------------------------------------------
# Definición de métricas
# --------------------------------------------------------------------------
IPN_RECEIVED_TOTAL = Counter(
    "ipn_received_total",
    "Total de callbacks IPN recibidos",
    registry=registry,
)

IPN_VERIFICATION_TOTAL = Counter(
    "ipn_verification_total",
    "Callbacks IPN por resultado de verificación (VERIFIED/INVALID/TRANSPORT_ERROR)",
    ["result"],
    registry=registry,
)

IPN_OUTCOME_TOTAL = Counter(
    "ipn_outcome_total",
    "Callbacks IPN por estado final (succeeded/failed/rejected)",
    ["state"],
    registry=registry,
)

IPN_STORAGE_FAILURES_TOTAL = Counter(
    "ipn_storage_failures_total",
    "Escrituras fallidas por tabla",
    ["table"],
    registry=registry,
)

IPN_PROCESSING_SECONDS = Histogram(
    "ipn_processing_seconds",
    "Tiempo de procesamiento de un callback IPN (segundos)",
    registry=registry,
)


# --------------------------------------------------------------------------
# Funciones auxiliares
# --------------------------------------------------------------------------
def render_prometheus_metrics() -> bytes:
    """Salida actual de las métricas en formato Prometheus."""
    return generate_latest(registry)


def observe_ipn_received() -> None:
    IPN_RECEIVED_TOTAL.inc()


def observe_ipn_verification(result: str, duration: float) -> None:
    """
    Registra el resultado de la verificación.

    Args:
        result: VERIFIED / INVALID / TRANSPORT_ERROR
        duration: Tiempo de procesamiento en segundos
    """
    IPN_VERIFICATION_TOTAL.labels(result=result).inc()
    IPN_PROCESSING_SECONDS.observe(duration)
    logger.debug(f"[Prometheus] IPN verification={result} duration={duration:.4f}s")


def observe_ipn_outcome(state: str) -> None:
    IPN_OUTCOME_TOTAL.labels(state=state).inc()


def observe_storage_failure(table: str) -> None:
    IPN_STORAGE_FAILURES_TOTAL.labels(table=table).inc()
    logger.debug(f"[Prometheus] IPN storage failure table={table}")


__all__ = [
    "CONTENT_TYPE_LATEST",
    "registry",
    "IPN_RECEIVED_TOTAL",
    "IPN_VERIFICATION_TOTAL",
    "IPN_OUTCOME_TOTAL",
    "IPN_STORAGE_FAILURES_TOTAL",
    "IPN_PROCESSING_SECONDS",
    "render_prometheus_metrics",
    "observe_ipn_received",
    "observe_ipn_verification",
    "observe_ipn_outcome",
    "observe_storage_failure",
]

# Fin del archivo ipn_listener/modules/ipn/metrics/prometheus_exporter.py
