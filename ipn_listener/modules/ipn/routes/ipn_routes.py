# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/routes/ipn_routes.py

Endpoints del listener de IPN.

- POST /ipn/paypal   Callback de PayPal (acuse 200 inmediato; el handshake
                     corre como background task)
- GET  /ipn/metrics  Métricas Prometheus

El endpoint no requiere autenticación: la confianza se obtiene sólo con el
echo-back a PayPal.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Request, status
from fastapi.responses import Response

from ipn_listener.modules.ipn.facades.handler import IpnHandler, process_ipn_notification
from ipn_listener.modules.ipn.metrics.prometheus_exporter import (
    CONTENT_TYPE_LATEST,
    render_prometheus_metrics,
)
from ipn_listener.modules.ipn.schemas.ipn_schemas import IpnAckResponse

router = APIRouter(prefix="/ipn", tags=["ipn"])


def get_ipn_handler(request: Request) -> IpnHandler:
    handler = getattr(request.app.state, "ipn_handler", None)
    if handler is None:
        handler = IpnHandler.from_settings()
        request.app.state.ipn_handler = handler
    return handler


@router.post(
    "/paypal",
    status_code=status.HTTP_200_OK,
    response_model=IpnAckResponse,
    summary="Callback IPN de PayPal",
)
async def paypal_ipn(request: Request, background_tasks: BackgroundTasks) -> IpnAckResponse:
    """
    Recibe el callback (form-encoded) y agenda la verificación.

    Siempre responde 200: los errores de procesamiento se registran en el
    log y nunca se exponen a PayPal.
    """
    raw_body = await request.body()
    background_tasks.add_task(process_ipn_notification, get_ipn_handler(request), raw_body)
    return IpnAckResponse()


@router.get("/metrics", summary="Métricas Prometheus del listener")
def ipn_metrics() -> Response:
    return Response(content=render_prometheus_metrics(), media_type=CONTENT_TYPE_LATEST)


# Fin del archivo ipn_listener/modules/ipn/routes/ipn_routes.py
