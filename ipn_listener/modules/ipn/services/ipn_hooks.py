# -*- coding: utf-8 -*-
"""
ipn_listener/modules/ipn/services/ipn_hooks.py

Puntos de extensión del listener de IPN.

Dos tipos de hook, ambos SÍNCRONOS y en el mismo task del callback:

1. Filtros (política externa antes de transmitir):
   - request_options     (transporte gestionado)
   - encoded_body        (transporte de bajo nivel)
   - low_level_options   (transporte de bajo nivel)
   Cada filtro se aplica exactamente una vez, inmediatamente antes del envío.

2. Notificaciones de ciclo de vida, entregadas a subscribers inyectados
   en la construcción: start, validation, success, error, invalid,
   transport_error. Cada evento se dispara una sola vez por callback.

Las excepciones de un subscriber se propagan: son colaboradores del
handshake, no listeners fire-and-forget.

Autor: DoxAI
Fecha: 2026-10-19
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ipn_listener.modules.ipn.exceptions import IpnConfigurationError

if TYPE_CHECKING:
    from ipn_listener.modules.ipn.facades.context import IpnContext

logger = logging.getLogger(__name__)

RequestOptionsFilter = Callable[[Dict[str, Any]], Dict[str, Any]]
EncodedBodyFilter = Callable[[str], str]
LowLevelOptionsFilter = Callable[[Dict[str, Any]], Dict[str, Any]]


class IpnSubscriber:
    """
    Subscriber de eventos IPN. Todos los métodos son no-op; las subclases
    sobrescriben sólo lo que necesitan.
    """

    def on_start(self, context: "IpnContext") -> None:
        """Callback recibido y normalizado, antes de verificar."""

    def on_validation(self, context: "IpnContext") -> None:
        """
        Callback VERIFIED, antes de decidir el estado final.
        Punto de las reglas de negocio: usar context.add_error() / add_note().
        """

    def on_success(self, user_id: int, payload: Mapping[str, str], notes: str) -> None:
        """Callback VERIFIED sin errores de negocio; la transacción ya se registró."""

    def on_error(self, user_id: int, payload: Mapping[str, str], errors: Sequence[str]) -> None:
        """Callback VERIFIED con errores de negocio; no se registra transacción."""

    def on_invalid(self, user_id: int, payload: Mapping[str, str], notes: str) -> None:
        """Callback rechazado (INVALID o error de transporte)."""

    def on_transport_error(self, detail: str) -> None:
        """No se pudo consultar a PayPal."""


class IpnHooks:
    """Registro de filtros y subscribers para un listener."""

    def __init__(
        self,
        subscribers: Optional[Iterable[IpnSubscriber]] = None,
        *,
        request_options_filter: Optional[RequestOptionsFilter] = None,
        encoded_body_filter: Optional[EncodedBodyFilter] = None,
        low_level_options_filter: Optional[LowLevelOptionsFilter] = None,
    ) -> None:
        self._subscribers: List[IpnSubscriber] = list(subscribers or [])
        self._request_options_filter = request_options_filter
        self._encoded_body_filter = encoded_body_filter
        self._low_level_options_filter = low_level_options_filter

    @property
    def subscribers(self) -> Sequence[IpnSubscriber]:
        return tuple(self._subscribers)

    def subscribe(self, subscriber: IpnSubscriber) -> None:
        self._subscribers.append(subscriber)

    def with_subscribers(self, *subscribers: IpnSubscriber) -> "IpnHooks":
        """Copia con los mismos filtros y los subscribers extra al final."""
        return IpnHooks(
            [*self._subscribers, *subscribers],
            request_options_filter=self._request_options_filter,
            encoded_body_filter=self._encoded_body_filter,
            low_level_options_filter=self._low_level_options_filter,
        )

    # -----------------------------------------------------------------
    # Filtros
    # -----------------------------------------------------------------
    def filter_request_options(self, options: Dict[str, Any]) -> Dict[str, Any]:
        if self._request_options_filter is None:
            return options
        filtered = self._request_options_filter(dict(options))
        if not isinstance(filtered, dict):
            raise IpnConfigurationError("request_options filter must return a dict")
        return filtered

    def filter_encoded_body(self, encoded_body: str) -> str:
        if self._encoded_body_filter is None:
            return encoded_body
        filtered = self._encoded_body_filter(encoded_body)
        if not isinstance(filtered, str):
            raise IpnConfigurationError("encoded_body filter must return a str")
        return filtered

    def filter_low_level_options(self, options: Dict[str, Any]) -> Dict[str, Any]:
        if self._low_level_options_filter is None:
            return options
        filtered = self._low_level_options_filter(dict(options))
        if not isinstance(filtered, dict):
            raise IpnConfigurationError("low_level_options filter must return a dict")
        return filtered

    # -----------------------------------------------------------------
    # Notificaciones
    # -----------------------------------------------------------------
    def notify_start(self, context: "IpnContext") -> None:
        for subscriber in self._subscribers:
            subscriber.on_start(context)

    def notify_validation(self, context: "IpnContext") -> None:
        for subscriber in self._subscribers:
            subscriber.on_validation(context)

    def notify_success(self, user_id: int, payload: Mapping[str, str], notes: str) -> None:
        for subscriber in self._subscribers:
            subscriber.on_success(user_id, payload, notes)

    def notify_error(self, user_id: int, payload: Mapping[str, str], errors: Sequence[str]) -> None:
        for subscriber in self._subscribers:
            subscriber.on_error(user_id, payload, tuple(errors))

    def notify_invalid(self, user_id: int, payload: Mapping[str, str], notes: str) -> None:
        for subscriber in self._subscribers:
            subscriber.on_invalid(user_id, payload, notes)

    def notify_transport_error(self, detail: str) -> None:
        logger.debug(f"IPN transport_error notificado a {len(self._subscribers)} subscribers")
        for subscriber in self._subscribers:
            subscriber.on_transport_error(detail)


__all__ = [
    "IpnSubscriber",
    "IpnHooks",
    "RequestOptionsFilter",
    "EncodedBodyFilter",
    "LowLevelOptionsFilter",
]

# Fin del archivo ipn_listener/modules/ipn/services/ipn_hooks.py
