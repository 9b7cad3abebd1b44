"""Build voice-platform response envelopes and hand them to the host."""

from __future__ import annotations

import copy
from typing import Any, Optional

from train_traffic_engine.core.exceptions import ResponseAlreadySentError
from train_traffic_engine.core.logging import get_logger
from train_traffic_engine.core.models import Session
from train_traffic_engine.core.ports import InvocationContext
from train_traffic_engine.core.speech import SpeechInput, build_speech_payload

logger = get_logger(__name__)

RESPONSE_VERSION = "1.0"
CARD_TYPE_SIMPLE = "Simple"


def build_speechlet_response(
    *,
    output: SpeechInput,
    should_end_session: bool,
    session: Optional[Session] = None,
    reprompt: Optional[SpeechInput] = None,
    card_title: Optional[str] = None,
    card_content: Optional[str] = None,
) -> dict[str, Any]:
    """Assemble the full response envelope.

    The card is only emitted when both title and content are non-empty, and
    session attributes are echoed as a snapshot only when the mapping has entries.
    """
    response: dict[str, Any] = {
        "outputSpeech": build_speech_payload(output),
        "shouldEndSession": should_end_session,
    }
    if reprompt is not None:
        response["reprompt"] = {"outputSpeech": build_speech_payload(reprompt)}
    if card_title and card_content:
        response["card"] = {
            "type": CARD_TYPE_SIMPLE,
            "title": card_title,
            "content": card_content,
        }
    envelope: dict[str, Any] = {"version": RESPONSE_VERSION, "response": response}
    if session is not None and session.attributes:
        envelope["sessionAttributes"] = copy.deepcopy(session.attributes)
    return envelope


class ResponseBuilder:
    """Per-invocation responder wrapping the host context and the session.

    Exactly one terminal operation may run; a second one raises
    :class:`ResponseAlreadySentError` without signalling the host again.
    """

    def __init__(self, context: InvocationContext, session: Session) -> None:
        self._context = context
        self._session = session
        self._responded = False

    @property
    def responded(self) -> bool:
        return self._responded

    def tell(self, speech: SpeechInput) -> None:
        self._send(output=speech, should_end_session=True)

    def tell_with_card(self, speech: SpeechInput, card_title: str, card_content: str) -> None:
        self._send(
            output=speech,
            should_end_session=True,
            card_title=card_title,
            card_content=card_content,
        )

    def ask(self, speech: SpeechInput, reprompt: SpeechInput) -> None:
        self._send(output=speech, reprompt=reprompt, should_end_session=False)

    def ask_with_card(
        self,
        speech: SpeechInput,
        reprompt: SpeechInput,
        card_title: str,
        card_content: str,
    ) -> None:
        self._send(
            output=speech,
            reprompt=reprompt,
            should_end_session=False,
            card_title=card_title,
            card_content=card_content,
        )

    def _send(self, **options: Any) -> None:
        if self._responded:
            raise ResponseAlreadySentError(
                f"a response was already sent for session {self._session.session_id}"
            )
        envelope = build_speechlet_response(session=self._session, **options)
        self._responded = True
        logger.debug(
            "response built",
            extra={"should_end_session": options["should_end_session"]},
        )
        self._context.succeed(envelope)


__all__ = ["CARD_TYPE_SIMPLE", "RESPONSE_VERSION", "ResponseBuilder", "build_speechlet_response"]
