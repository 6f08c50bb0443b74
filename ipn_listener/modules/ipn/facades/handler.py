# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/facades/handler.py

Orquestación del handshake IPN para un callback:

1. Normaliza el body crudo (echo_fields + payload saneado) -> IpnContext
2. Notifica "start"
3. Echo-back a PayPal con el transporte configurado
4. Despacha el outcome (log siempre; registro sólo si SUCCEEDED)
5. Métricas de verificación, estado y fallos de almacenamiento

Si el echo-back no llega a producir un outcome (modo legacy de bajo nivel
con IPN_LOW_LEVEL_FATAL_TRANSPORT_ERRORS=true, filtros u opciones TLS
inválidos) se escribe el log como TRANSPORT_ERROR, se notifica
"transport_error" y se relanza la excepción sin despachar.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ipn_listener.modules.ipn.exceptions import IpnTransportFatalError
from ipn_listener.modules.ipn.metrics.prometheus_exporter import (
    observe_ipn_outcome,
    observe_ipn_received,
    observe_ipn_verification,
    observe_storage_failure,
)
from ipn_listener.modules.ipn.schemas.ipn_schemas import IpnProcessingResult
from ipn_listener.modules.ipn.services.business_rules import ExpectedPaymentRules
from ipn_listener.modules.ipn.services.ipn_hooks import IpnHooks
from ipn_listener.modules.ipn.services.message_log_service import MessageLogService
from ipn_listener.modules.ipn.services.verification.base import (
    VerificationOutcome,
    VerificationTransport,
    describe_transport_error,
)
from ipn_listener.modules.ipn.services.verification.factory import (
    build_verification_transport,
)
from ipn_listener.shared.config.settings_ipn import IpnSettings, get_ipn_settings
from .context import IpnContext
from .dispatcher import OutcomeDispatcher

logger = logging.getLogger(__name__)


class IpnHandler:
    """Handshake completo de un callback IPN."""

    def __init__(
        self,
        transport: VerificationTransport,
        hooks: IpnHooks,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        dispatcher: Optional[OutcomeDispatcher] = None,
    ) -> None:
        self.transport = transport
        self.hooks = hooks
        self.dispatcher = dispatcher or OutcomeDispatcher(hooks, session_factory)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[IpnSettings] = None,
        *,
        hooks: Optional[IpnHooks] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        transport: Optional[VerificationTransport] = None,
    ) -> "IpnHandler":
        """
        Construye el handler desde la configuración.

        Las reglas de negocio integradas se suscriben sólo si hay cuenta
        receptora o moneda esperada configuradas, sobre una copia de los
        hooks recibidos (el llamador puede reutilizarlos en otro arranque).
        """
        settings = settings or get_ipn_settings()
        hooks = hooks or IpnHooks()

        rules = ExpectedPaymentRules.from_settings(settings)
        if rules.is_active:
            hooks = hooks.with_subscribers(rules)

        if session_factory is None:
            from ipn_listener.shared.database.database import get_session_factory

            session_factory = get_session_factory()

        transport = transport or build_verification_transport(settings, hooks)
        return cls(transport, hooks, session_factory)

    async def handle(self, raw_body: bytes) -> IpnProcessingResult:
        """
        Procesa un callback IPN.

        Si la verificación falla sin respuesta de PayPal (modo legacy fatal,
        filtro o configuración TLS inválidos) se escribe igualmente la fila
        de log como TRANSPORT_ERROR, se notifica transport_error y se relanza.

        Raises:
            IpnTransportFatalError: sólo en el modo legacy de bajo nivel
            IpnConfigurationError: filtros u opciones de transporte inválidos
        """
        started = time.perf_counter()
        observe_ipn_received()

        context = IpnContext.from_raw_body(raw_body)
        logger.info(
            f"IPN recibido: txn_id={context.txn_id!r} user_id={context.user_id} "
            f"campos={len(context.payload)} transporte={self.transport.mode.value}"
        )
        self.hooks.notify_start(context)

        try:
            context.outcome = await self.transport.verify(context.raw_body, context.echo_fields)
        except IpnTransportFatalError as e:
            logger.error(
                f"IPN abortado por error de transporte (modo legacy): txn_id={context.txn_id!r}"
            )
            await self._abort_verification(context, e.detail, started)
            raise
        except Exception as e:
            logger.exception(
                f"IPN: la verificación no pudo completarse: txn_id={context.txn_id!r}"
            )
            await self._abort_verification(context, describe_transport_error(e), started)
            raise

        observe_ipn_verification(context.outcome.result.value, time.perf_counter() - started)

        report = await self.dispatcher.dispatch(context)

        observe_ipn_outcome(report.state.value)
        for table in report.storage_errors:
            observe_storage_failure(table)

        return IpnProcessingResult(
            state=report.state,
            verification=context.outcome.result,
            user_id=context.user_id,
            txn_id=context.txn_id,
            log_written=report.log_written,
            transaction_recorded=report.transaction_recorded,
            storage_errors=report.storage_errors,
        )

    async def _abort_verification(self, context: IpnContext, detail: str, started: float) -> None:
        """Sin outcome no hay despacho: queda la fila de log y transport_error."""
        context.outcome = VerificationOutcome.transport_error(detail)
        context.add_note(detail)
        observe_ipn_verification(context.outcome.result.value, time.perf_counter() - started)
        try:
            if not await self.dispatcher.write_log(context):
                observe_storage_failure(MessageLogService.TABLE_NAME)
        finally:
            self.hooks.notify_transport_error(detail)


async def process_ipn_notification(handler: IpnHandler, raw_body: bytes) -> None:
    """
    Ejecuta el handshake en background (después de responder 200 a PayPal).

    Los errores se registran y no se propagan: PayPal ya recibió su acuse.
    """
    try:
        result = await handler.handle(raw_body)
        logger.info(
            f"IPN procesado: txn_id={result.txn_id!r} state={result.state.value} "
            f"log={result.log_written} transaccion={result.transaction_recorded}"
        )
    except IpnTransportFatalError as e:
        logger.error(f"IPN abortado: {e.detail}")
    except Exception:
        logger.exception("IPN: error procesando la notificación")


__all__ = ["IpnHandler", "process_ipn_notification"]

# Fin del archivo ipn_listener/modules/ipn/facades/handler.py
