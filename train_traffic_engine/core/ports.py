"""Protocol definitions for the host, handlers, and infrastructure adapters."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Any, Optional, Protocol

from train_traffic_engine.core.models import (
    LaunchRequest,
    Request,
    Session,
    SessionEndedRequest,
    StatusRecord,
)
from train_traffic_engine.core.speech import SpeechInput


class InvocationContext(Protocol):
    """Host callback pair; exactly one of the two is called per invocation."""

    def succeed(self, payload: Optional[dict[str, Any]] = None) -> None:
        """Report success, optionally with a response envelope."""
        ...

    def fail(self, error: BaseException) -> None:
        """Report failure with the error that ended the invocation."""
        ...


class Responder(Protocol):
    """Terminal response operations available to handlers."""

    def tell(self, speech: SpeechInput) -> None:
        """Speak and end the session."""
        ...

    def tell_with_card(self, speech: SpeechInput, card_title: str, card_content: str) -> None:
        """Speak, show a card, and end the session."""
        ...

    def ask(self, speech: SpeechInput, reprompt: SpeechInput) -> None:
        """Speak and keep the session open for a reply."""
        ...

    def ask_with_card(
        self,
        speech: SpeechInput,
        reprompt: SpeechInput,
        card_title: str,
        card_content: str,
    ) -> None:
        """Speak, show a card, and keep the session open."""
        ...


class SkillHandlers(Protocol):
    """Lifecycle hooks a concrete skill supplies to the dispatcher."""

    async def on_session_started(self, request: Request, session: Session) -> None:
        """Called once for a new session, before routing."""
        ...

    async def on_launch(self, request: LaunchRequest, session: Session, responder: Responder) -> None:
        """Respond to the user opening the skill without an intent."""
        ...

    async def on_session_ended(self, request: SessionEndedRequest, session: Session) -> None:
        """Release anything tied to the session; no response is sent."""
        ...


class StatusSourcePort(Protocol):
    """Port exposing the external line-status feed."""

    async def fetch_statuses(self) -> list[StatusRecord]:
        """Return the current status records or raise ``FetchError``."""
        ...


__all__ = [
    "InvocationContext",
    "Responder",
    "SkillHandlers",
    "StatusSourcePort",
]
