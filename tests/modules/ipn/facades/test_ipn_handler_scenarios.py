# -*- coding: utf-8 -*-
"""
Tests de escenarios completos del handshake IPN.

Escenarios:
A. VERIFIED sin errores      -> SUCCEEDED, transacción + log, "success"
B. INVALID                   -> REJECTED, sólo log, "invalid"
C. Timeout de red            -> REJECTED, log TRANSPORT_ERROR,
                                "transport_error" + "invalid"
D. Moneda distinta           -> FAILED, sólo log con el error, "error"

Además: aislamiento de fallos de almacenamiento, excepciones de
subscribers, el modo legacy fatal del transporte de bajo nivel y fallos
de filtros/opciones antes del envío (siempre queda la fila de log).

Autor: DoxAI
Fecha: 2026-10-19
"""

import httpx
import pytest
from pydantic import ValidationError

from ipn_listener.modules.ipn.enums import IpnState, VerificationResult
from ipn_listener.modules.ipn.exceptions import IpnConfigurationError, IpnTransportFatalError
from ipn_listener.modules.ipn.facades.context import IpnContext
from ipn_listener.modules.ipn.facades.dispatcher import decide_state
from ipn_listener.modules.ipn.facades.handler import IpnHandler, process_ipn_notification
from ipn_listener.modules.ipn.models import IpnMessage, IpnTransaction
from ipn_listener.modules.ipn.repositories import IpnMessageRepository, IpnTransactionRepository
from ipn_listener.modules.ipn.schemas.ipn_schemas import IpnProcessingResult
from ipn_listener.modules.ipn.services.business_rules import ExpectedPaymentRules
from ipn_listener.modules.ipn.services.ipn_hooks import IpnHooks, IpnSubscriber
from ipn_listener.modules.ipn.services.verification import (
    LowLevelVerificationTransport,
    ManagedVerificationTransport,
)
from ipn_listener.modules.ipn.services.verification.base import VerificationOutcome

SANDBOX_URL = "https://ipnpb.sandbox.paypal.com/cgi-bin/webscr"


async def count_rows(session_factory):
    async with session_factory() as session:
        messages = await IpnMessageRepository().count(session)
        transactions = await IpnTransactionRepository().count(session)
    return messages, transactions


async def only_message(session_factory) -> IpnMessage:
    async with session_factory() as session:
        rows = await IpnMessageRepository().list(session)
    assert len(rows) == 1
    return rows[0]


class TestDecideState:

    def test_verified_without_errors(self):
        assert decide_state(VerificationOutcome.verified(), []) is IpnState.SUCCEEDED

    def test_verified_with_errors(self):
        assert decide_state(VerificationOutcome.verified(), ["x"]) is IpnState.FAILED

    def test_invalid(self):
        assert decide_state(VerificationOutcome.invalid(), []) is IpnState.REJECTED

    def test_transport_error_ignores_errors(self):
        outcome = VerificationOutcome.transport_error("timeout")
        assert decide_state(outcome, ["x"]) is IpnState.REJECTED


class TestIpnContext:

    def test_from_raw_body(self, ipn_body):
        context = IpnContext.from_raw_body(ipn_body)

        assert context.user_id == 42
        assert context.txn_id == "9XY12345AB678901C"
        assert context.state is IpnState.RECEIVED
        assert context.outcome is None

    def test_log_notes_joins_notes_and_errors(self, ipn_body):
        context = IpnContext.from_raw_body(ipn_body)
        context.add_note("n1")
        context.add_note("n2")
        context.add_error("e1")
        context.add_error("e2")

        assert context.notes == "n1; n2"
        assert context.log_notes() == "n1; n2; e1; e2"

    def test_contexts_do_not_share_state(self, ipn_body):
        first = IpnContext.from_raw_body(ipn_body)
        second = IpnContext.from_raw_body(ipn_body)
        first.add_error("only first")

        assert second.errors == []


class TestIpnProcessingResult:

    def test_verification_is_required(self):
        with pytest.raises(ValidationError):
            IpnProcessingResult(state=IpnState.REJECTED)


class TestHandlerScenarios:

    @pytest.mark.asyncio
    async def test_a_verified_succeeds(self, session_factory, recorder, ipn_body, make_static_transport):
        handler = IpnHandler(make_static_transport(), IpnHooks([recorder]), session_factory)

        result = await handler.handle(ipn_body)

        assert result.state is IpnState.SUCCEEDED
        assert result.verification is VerificationResult.VERIFIED
        assert result.transaction_recorded is True
        assert result.log_written is True
        assert result.storage_errors == []
        assert await count_rows(session_factory) == (1, 1)

        message = await only_message(session_factory)
        assert message.result == "VERIFIED"
        assert message.user_id == 42
        assert message.txn_id == "9XY12345AB678901C"

        assert recorder.names == ["start", "validation", "success"]
        user_id, payload, notes = recorder.events[-1][1]
        assert user_id == 42
        assert payload["mc_gross"] == "19.95"

    @pytest.mark.asyncio
    async def test_b_invalid_is_rejected(self, session_factory, recorder, ipn_body, make_static_transport):
        transport = make_static_transport(VerificationOutcome.invalid("HTTP 200 reply='INVALID'"))
        handler = IpnHandler(transport, IpnHooks([recorder]), session_factory)

        result = await handler.handle(ipn_body)

        assert result.state is IpnState.REJECTED
        assert result.transaction_recorded is False
        assert await count_rows(session_factory) == (1, 0)
        message = await only_message(session_factory)
        assert message.result == "INVALID"
        assert "INVALID" in message.notes
        assert recorder.names == ["start", "invalid"]

    @pytest.mark.asyncio
    async def test_c_timeout_is_transport_error(
        self, session_factory, recorder, ipn_body, make_paypal_unreachable
    ):
        hooks = IpnHooks([recorder])
        transport = LowLevelVerificationTransport(
            SANDBOX_URL,
            hooks=hooks,
            transport_factory=lambda options: httpx.MockTransport(
                make_paypal_unreachable(httpx.ReadTimeout)
            ),
        )
        handler = IpnHandler(transport, hooks, session_factory)

        result = await handler.handle(ipn_body)

        assert result.state is IpnState.REJECTED
        assert result.verification is VerificationResult.TRANSPORT_ERROR
        assert await count_rows(session_factory) == (1, 0)
        message = await only_message(session_factory)
        assert message.result == "TRANSPORT_ERROR"
        assert recorder.names == ["start", "transport_error", "invalid"]
        assert "ReadTimeout" in recorder.events[1][1]

    @pytest.mark.asyncio
    async def test_d_currency_mismatch_fails(
        self, session_factory, recorder, make_ipn_body, make_static_transport
    ):
        hooks = IpnHooks([ExpectedPaymentRules(currency="USD"), recorder])
        handler = IpnHandler(make_static_transport(), hooks, session_factory)

        result = await handler.handle(make_ipn_body(mc_currency="EUR"))

        assert result.state is IpnState.FAILED
        assert result.transaction_recorded is False
        assert await count_rows(session_factory) == (1, 0)
        message = await only_message(session_factory)
        assert message.result == "VERIFIED"
        assert "currency mismatch" in message.notes
        assert recorder.names == ["start", "validation", "error"]
        assert recorder.events[-1][1][2] == ["currency mismatch: expected USD, got EUR"]


class TestHandlerInvariants:

    @pytest.mark.asyncio
    async def test_unknown_fields_only_in_log_detail(
        self, session_factory, make_ipn_body, make_static_transport
    ):
        handler = IpnHandler(make_static_transport(), IpnHooks(), session_factory)

        await handler.handle(make_ipn_body(x_new_paypal_field="hello"))

        message = await only_message(session_factory)
        assert "x_new_paypal_field=hello" in message.ipn_detail
        assert "x_new_paypal_field" not in IpnTransaction.__table__.columns

    @pytest.mark.asyncio
    async def test_sanitized_payload_is_persisted(
        self, session_factory, make_ipn_body, make_static_transport
    ):
        handler = IpnHandler(make_static_transport(), IpnHooks(), session_factory)

        await handler.handle(make_ipn_body(item_name="<script>x()</script>Plan\nPro"))

        async with session_factory() as session:
            row = await IpnTransactionRepository().get_by_txn_id(session, "9XY12345AB678901C")
        assert row.item_name == "Plan Pro"

    @pytest.mark.asyncio
    async def test_log_failure_does_not_block_transaction(
        self, session_factory, db_engine, ipn_body, make_static_transport
    ):
        async with db_engine.begin() as conn:
            await conn.run_sync(IpnMessage.__table__.drop)
        handler = IpnHandler(make_static_transport(), IpnHooks(), session_factory)

        result = await handler.handle(ipn_body)

        assert result.state is IpnState.SUCCEEDED
        assert result.transaction_recorded is True
        assert result.log_written is False
        assert result.storage_errors == ["ipn_messages"]

    @pytest.mark.asyncio
    async def test_transaction_failure_is_reported(
        self, session_factory, db_engine, ipn_body, make_static_transport, recorder
    ):
        async with db_engine.begin() as conn:
            await conn.run_sync(IpnTransaction.__table__.drop)
        handler = IpnHandler(make_static_transport(), IpnHooks([recorder]), session_factory)

        result = await handler.handle(ipn_body)

        assert result.state is IpnState.SUCCEEDED
        assert result.transaction_recorded is False
        assert result.log_written is True
        assert result.storage_errors == ["ipn_transactions"]
        assert recorder.names[-1] == "success"

    @pytest.mark.asyncio
    async def test_subscriber_exception_still_logs(self, session_factory, ipn_body, make_static_transport):
        class Boom(IpnSubscriber):
            def on_success(self, user_id, payload, notes):
                raise RuntimeError("listener failed")

        handler = IpnHandler(make_static_transport(), IpnHooks([Boom()]), session_factory)

        with pytest.raises(RuntimeError):
            await handler.handle(ipn_body)

        assert await count_rows(session_factory) == (1, 1)

    @pytest.mark.asyncio
    async def test_legacy_fatal_transport_error(
        self, session_factory, recorder, ipn_body, make_paypal_unreachable
    ):
        hooks = IpnHooks([recorder])
        transport = LowLevelVerificationTransport(
            SANDBOX_URL,
            hooks=hooks,
            fatal_transport_errors=True,
            transport_factory=lambda options: httpx.MockTransport(
                make_paypal_unreachable(httpx.ConnectError)
            ),
        )
        handler = IpnHandler(transport, hooks, session_factory)

        with pytest.raises(IpnTransportFatalError):
            await handler.handle(ipn_body)

        assert await count_rows(session_factory) == (1, 0)
        message = await only_message(session_factory)
        assert message.result == "TRANSPORT_ERROR"
        assert recorder.names == ["start", "transport_error"]

    @pytest.mark.asyncio
    async def test_background_processing_swallows_errors(
        self, session_factory, ipn_body, make_static_transport, caplog
    ):
        class Boom(IpnSubscriber):
            def on_start(self, context):
                raise RuntimeError("listener failed")

        handler = IpnHandler(make_static_transport(), IpnHooks([Boom()]), session_factory)

        await process_ipn_notification(handler, ipn_body)

        assert "error procesando la notificación" in caplog.text

    @pytest.mark.asyncio
    async def test_from_settings_subscribes_configured_rules(
        self, ipn_settings, session_factory, make_static_transport
    ):
        settings = ipn_settings.model_copy(update={"ipn_expected_currency": "USD"})

        handler = IpnHandler.from_settings(
            settings,
            session_factory=session_factory,
            transport=make_static_transport(),
        )

        assert any(isinstance(s, ExpectedPaymentRules) for s in handler.hooks.subscribers)

    @pytest.mark.asyncio
    async def test_invalid_tls_option_still_logs(self, session_factory, recorder, ipn_body):
        def _options_filter(options):
            options["ssl_version"] = "SSLv3"
            return options

        hooks = IpnHooks([recorder], low_level_options_filter=_options_filter)
        handler = IpnHandler(LowLevelVerificationTransport(SANDBOX_URL, hooks=hooks), hooks, session_factory)

        with pytest.raises(IpnConfigurationError):
            await handler.handle(ipn_body)

        assert await count_rows(session_factory) == (1, 0)
        message = await only_message(session_factory)
        assert message.result == "TRANSPORT_ERROR"
        assert "ssl_version" in message.notes
        assert recorder.names == ["start", "transport_error"]

    @pytest.mark.asyncio
    async def test_failing_request_filter_still_logs(self, session_factory, recorder, ipn_body):
        def _broken_filter(options):
            raise KeyError("url")

        def _unused_client_factory(verify):
            raise AssertionError("no debe crearse cliente")

        hooks = IpnHooks([recorder], request_options_filter=_broken_filter)
        transport = ManagedVerificationTransport(
            SANDBOX_URL,
            hooks=hooks,
            user_agent="ipn-listener/test",
            client_factory=_unused_client_factory,
        )
        handler = IpnHandler(transport, hooks, session_factory)

        with pytest.raises(KeyError):
            await handler.handle(ipn_body)

        message = await only_message(session_factory)
        assert message.result == "TRANSPORT_ERROR"
        assert "KeyError" in message.notes
        assert recorder.names == ["start", "transport_error"]

    @pytest.mark.asyncio
    async def test_from_settings_does_not_mutate_caller_hooks(
        self, ipn_settings, session_factory, recorder, make_ipn_body, make_static_transport
    ):
        settings = ipn_settings.model_copy(update={"ipn_expected_currency": "USD"})
        hooks = IpnHooks([recorder])

        IpnHandler.from_settings(
            settings, hooks=hooks, session_factory=session_factory, transport=make_static_transport()
        )
        handler = IpnHandler.from_settings(
            settings, hooks=hooks, session_factory=session_factory, transport=make_static_transport()
        )

        assert hooks.subscribers == (recorder,)
        result = await handler.handle(make_ipn_body(mc_currency="EUR"))

        assert result.state is IpnState.FAILED
        assert recorder.events[-1][1][2] == ["currency mismatch: expected USD, got EUR"]
