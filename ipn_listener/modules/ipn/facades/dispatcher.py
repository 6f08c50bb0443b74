# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/facades/dispatcher.py

Despachador de outcome: aplica el resultado de la verificación.

Máquina de estados (una sola transición por callback):
    RECEIVED -> SUCCEEDED  (VERIFIED, sin errores de negocio)
    RECEIVED -> FAILED     (VERIFIED, con errores de negocio)
    RECEIVED -> REJECTED   (INVALID o TRANSPORT_ERROR)

Efectos:
- SUCCEEDED: registra transacción y luego notifica "success"
- FAILED:    notifica "error"; no registra transacción
- REJECTED:  notifica "invalid" (y antes "transport_error" si aplica)
- Siempre:   una fila en el log de mensajes, escrita en un finally para
             que también quede registro si un subscriber falla

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ipn_listener.modules.ipn.enums import IpnState, VerificationResult
from ipn_listener.modules.ipn.services.ipn_hooks import IpnHooks
from ipn_listener.modules.ipn.services.message_log_service import MessageLogService
from ipn_listener.modules.ipn.services.transaction_recorder_service import (
    TransactionRecorderService,
)
from ipn_listener.modules.ipn.services.verification.base import VerificationOutcome
from .context import IpnContext

logger = logging.getLogger(__name__)


def decide_state(outcome: VerificationOutcome, errors: Sequence[str]) -> IpnState:
    """Estado terminal a partir del resultado de verificación y los errores."""
    if not outcome.is_verified:
        return IpnState.REJECTED
    if errors:
        return IpnState.FAILED
    return IpnState.SUCCEEDED


@dataclass
class DispatchReport:
    state: IpnState
    log_written: bool = False
    transaction_recorded: bool = False
    storage_errors: List[str] = field(default_factory=list)


class OutcomeDispatcher:
    """Decide log vs. log+registro y emite las notificaciones finales."""

    def __init__(
        self,
        hooks: IpnHooks,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        message_log: Optional[MessageLogService] = None,
        recorder: Optional[TransactionRecorderService] = None,
    ) -> None:
        self.hooks = hooks
        self.session_factory = session_factory
        self.message_log = message_log or MessageLogService()
        self.recorder = recorder or TransactionRecorderService()

    async def write_log(self, context: IpnContext) -> bool:
        """Escribe la fila de log del callback (resultado + notas + errores)."""
        result = context.outcome.result if context.outcome else VerificationResult.TRANSPORT_ERROR
        return await self.message_log.log_message(
            self.session_factory,
            user_id=context.user_id,
            payload=context.payload,
            result=result,
            notes=context.log_notes(),
        )

    async def dispatch(self, context: IpnContext) -> DispatchReport:
        if context.outcome is None:
            raise ValueError("dispatch() requiere un contexto verificado (outcome=None)")

        outcome = context.outcome
        report = DispatchReport(state=context.state)
        try:
            if outcome.is_verified:
                self.hooks.notify_validation(context)

            context.state = decide_state(outcome, context.errors)
            report.state = context.state
            logger.info(
                f"IPN outcome: txn_id={context.txn_id!r} result={outcome.result.value} "
                f"state={context.state.value}"
            )

            if context.state is IpnState.SUCCEEDED:
                report.transaction_recorded = await self.recorder.record_transaction(
                    self.session_factory,
                    user_id=context.user_id,
                    payload=context.payload,
                )
                if not report.transaction_recorded:
                    report.storage_errors.append(TransactionRecorderService.TABLE_NAME)
                self.hooks.notify_success(context.user_id, context.payload, context.notes)

            elif context.state is IpnState.FAILED:
                self.hooks.notify_error(context.user_id, context.payload, context.errors)

            else:
                if outcome.detail:
                    context.add_note(outcome.detail)
                if outcome.is_transport_error:
                    self.hooks.notify_transport_error(outcome.detail)
                self.hooks.notify_invalid(context.user_id, context.payload, context.notes)
        finally:
            report.log_written = await self.write_log(context)
            if not report.log_written:
                report.storage_errors.append(MessageLogService.TABLE_NAME)

        return report


__all__ = ["DispatchReport", "OutcomeDispatcher", "decide_state"]

# Fin del archivo ipn_listener/modules/ipn/facades/dispatcher.py
