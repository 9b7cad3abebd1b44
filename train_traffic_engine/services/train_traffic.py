"""Train Traffic skill: spoken line-status lookups with paged details.

Example dialog::

    User:  "Alexa, open train traffic"
    Alexa: "What trainline color do you want status information for?"
    User:  "The yellow line."
    Alexa: "For the yellow line, there is currently, delays. ... Would you like more details?"
    User:  "Yes."
    Alexa: "<next page of details>"
"""

from __future__ import annotations

from typing import Any, MutableMapping
from xml.sax.saxutils import escape

from train_traffic_engine.core.exceptions import FetchError
from train_traffic_engine.core.logging import get_logger
from train_traffic_engine.core.models import (
    Intent,
    LaunchRequest,
    Request,
    Session,
    SessionEndedRequest,
)
from train_traffic_engine.core.ports import Responder, StatusSourcePort
from train_traffic_engine.core.speech import SpeechOutput, speak
from train_traffic_engine.services.intent_router import IntentRouter
from train_traffic_engine.services.line_status import (
    normalize_line_color,
    status_entries,
    status_for_line,
)

logger = get_logger(__name__)

GET_LINE_STATUS_INTENT = "GetFirstEventIntent"
GET_MORE_DETAILS_INTENT = "GetNextEventIntent"
HELP_INTENT = "AMAZON.HelpIntent"
STOP_INTENT = "AMAZON.StopIntent"
CANCEL_INTENT = "AMAZON.CancelIntent"

LINE_SLOT = "train"
DEFAULT_PAGE_SIZE = 3

HELP_TEXT = (
    "With Train Traffic, you can check the status of your trainline.  "
    "For example, you could say how is service on the yellow line?"
)
REPROMPT_TEXT = HELP_TEXT + " Now, which trainline color do you want?"
LINE_REPROMPT_TEXT = "Which trainline color do you want?"
FETCH_FAILURE_TEXT = "There is a problem connecting to the MTA at this time. Please try again later."
MORE_DETAILS_PROMPT = "Would you like more details?"
MORE_DETAILS_REPROMPT = "Do you want to hear more about this line?"
ANOTHER_LINE_CARD_TITLE = "Would you like to check another train"

_DISPLAY_NAMES = {"lightgreen": "light green"}


def read_page(attributes: MutableMapping[str, Any], page_size: int) -> tuple[list[str], bool]:
    """Take the next page of ``results`` and advance the ``index`` cursor.

    Returns the page and whether entries remain after it.
    """
    results = list(attributes.get("results") or [])
    index = int(attributes.get("index") or 0)
    page = results[index : index + page_size]
    attributes["index"] = index + len(page)
    return [str(entry) for entry in page], attributes["index"] < len(results)


class TrainTrafficSkill:
    """Skill handlers for the Train Traffic voice skill."""

    def __init__(self, status_source: StatusSourcePort, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._status_source = status_source
        self._page_size = page_size

    def intent_router(self) -> IntentRouter:
        """Build the intent-name routing table for this skill."""
        return IntentRouter(
            {
                GET_LINE_STATUS_INTENT: self.handle_line_status,
                GET_MORE_DETAILS_INTENT: self.handle_more_details,
                HELP_INTENT: self.handle_help,
                STOP_INTENT: self.handle_stop,
                CANCEL_INTENT: self.handle_stop,
            }
        )

    async def on_session_started(self, request: Request, session: Session) -> None:
        logger.info(
            "TrainTrafficSkill onSessionStarted requestId: %s, sessionId: %s",
            request.request_id,
            session.session_id,
        )

    async def on_launch(self, request: LaunchRequest, session: Session, responder: Responder) -> None:
        logger.info(
            "TrainTrafficSkill onLaunch requestId: %s, sessionId: %s",
            request.request_id,
            session.session_id,
        )
        responder.ask_with_card(
            speak("<p>Rider.</p> <p>What trainline color do you want status information for?</p>"),
            SpeechOutput.plain(REPROMPT_TEXT),
            "Trainline status",
            "Rider. What trainline color do you want status information for?",
        )

    async def on_session_ended(self, request: SessionEndedRequest, session: Session) -> None:
        logger.info(
            "onSessionEnded requestId: %s, sessionId: %s, reason: %s",
            request.request_id,
            session.session_id,
            request.reason,
        )

    async def handle_line_status(self, intent: Intent, session: Session, responder: Responder) -> None:
        """Fetch the feed once and read the first page for the requested line."""
        colour = normalize_line_color(intent.slot_value(LINE_SLOT))
        if colour is None:
            responder.ask(
                SpeechOutput.plain("I didn't catch that line. " + LINE_REPROMPT_TEXT),
                SpeechOutput.plain(REPROMPT_TEXT),
            )
            return

        try:
            records = await self._status_source.fetch_statuses()
            record = status_for_line(records, colour)
        except FetchError as exc:
            logger.warning("Line status unavailable for %s: %s", colour, exc)
            responder.tell(FETCH_FAILURE_TEXT)
            return

        line = _display_name(colour)
        session.attributes = {"line": colour, "results": status_entries(record), "index": 0}
        page, more = read_page(session.attributes, self._page_size)

        speech = f"<p>For the {line} line, there is currently, </p>"
        card = f"For the {line} line, there is currently, "
        if page:
            speech += "".join(f"<p>{escape(entry)}</p> " for entry in page)
            card += " ".join(page)
        else:
            speech += "<p>no status reported.</p> "
            card += "no status reported."
        if more:
            speech += f"<p>{MORE_DETAILS_PROMPT}</p>"
            card += f" {MORE_DETAILS_PROMPT}"

        responder.ask_with_card(
            speak(speech),
            SpeechOutput.plain(MORE_DETAILS_REPROMPT if more else REPROMPT_TEXT),
            f"Status of the {line} line.",
            card,
        )

    async def handle_more_details(self, intent: Intent, session: Session, responder: Responder) -> None:
        """Read the next page of stored results for the line asked about last."""
        attributes = session.attributes if session.attributes is not None else {}
        results = attributes.get("results")
        line = _display_name(str(attributes.get("line") or "this"))

        if not results:
            speech = REPROMPT_TEXT
            card = REPROMPT_TEXT
        elif int(attributes.get("index") or 0) >= len(results):
            speech = (
                f"There are no more updates for the {line} line. Try another line by saying "
                '<break time="0.3s"/> how is service on the yellow line?'
            )
            card = (
                f"There are no more updates for the {line} line. Try another line by saying, "
                "how is service on the yellow line?"
            )
        else:
            page, more = read_page(attributes, self._page_size)
            speech = "".join(f"<p>{escape(entry)}</p> " for entry in page)
            card = " ".join(page)
            if more:
                speech += f" {MORE_DETAILS_PROMPT}"
                card += f" {MORE_DETAILS_PROMPT}"

        responder.ask_with_card(
            speak(speech),
            SpeechOutput.plain(MORE_DETAILS_REPROMPT),
            ANOTHER_LINE_CARD_TITLE,
            card,
        )

    async def handle_help(self, intent: Intent, session: Session, responder: Responder) -> None:
        responder.ask(
            {"speech": HELP_TEXT, "type": "PlainText"},
            {"speech": LINE_REPROMPT_TEXT, "type": "PlainText"},
        )

    async def handle_stop(self, intent: Intent, session: Session, responder: Responder) -> None:
        responder.tell({"speech": "Goodbye", "type": "PlainText"})


def _display_name(colour: str) -> str:
    return _DISPLAY_NAMES.get(colour, colour)


__all__ = [
    "CANCEL_INTENT",
    "FETCH_FAILURE_TEXT",
    "GET_LINE_STATUS_INTENT",
    "GET_MORE_DETAILS_INTENT",
    "HELP_INTENT",
    "STOP_INTENT",
    "TrainTrafficSkill",
    "read_page",
]
