"""Intent router mapping intent names to skill handlers."""

from __future__ import annotations

from typing import Awaitable, Callable, Mapping, MutableMapping

from train_traffic_engine.core.exceptions import UnsupportedIntentError
from train_traffic_engine.core.logging import get_logger
from train_traffic_engine.core.models import Intent, Session
from train_traffic_engine.core.ports import Responder

logger = get_logger(__name__)

IntentHandler = Callable[[Intent, Session, Responder], Awaitable[None]]


class IntentRouter:
    """Dispatch intents to registered handlers by exact name."""

    def __init__(self, handlers: Mapping[str, IntentHandler] | None = None) -> None:
        self._handlers: MutableMapping[str, IntentHandler] = dict(handlers or {})

    def register(self, name: str, handler: IntentHandler) -> None:
        """Register or replace a handler for intent ``name``."""

        self._handlers[name] = handler

    def unregister(self, name: str) -> None:
        """Remove a handler if present."""

        self._handlers.pop(name, None)

    async def dispatch(self, intent: Intent, session: Session, responder: Responder) -> None:
        """Invoke the handler registered for ``intent.name``."""

        try:
            handler = self._handlers[intent.name]
        except KeyError as exc:
            raise UnsupportedIntentError(intent.name) from exc
        logger.info("dispatch intent = %s", intent.name)
        await handler(intent, session, responder)

    def handlers(self) -> Mapping[str, IntentHandler]:
        """Return a shallow copy of the current intent handler registry."""

        return dict(self._handlers)


__all__ = ["IntentHandler", "IntentRouter"]
