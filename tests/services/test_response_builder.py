"""Tests for response envelope construction."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from train_traffic_engine.core.exceptions import ResponseAlreadySentError
from train_traffic_engine.core.models import Session
from train_traffic_engine.core.speech import SpeechOutput
from train_traffic_engine.services.response_builder import ResponseBuilder, build_speechlet_response


class _RecordingContext:
    def __init__(self) -> None:
        self.succeeded: list[Optional[dict[str, Any]]] = []
        self.failed: list[BaseException] = []

    def succeed(self, payload: Optional[dict[str, Any]] = None) -> None:
        self.succeeded.append(payload)

    def fail(self, error: BaseException) -> None:
        self.failed.append(error)


def _builder(attributes: Optional[dict[str, Any]] = None) -> tuple[ResponseBuilder, _RecordingContext]:
    context = _RecordingContext()
    session = Session(session_id="s-1", application_id="app", attributes=attributes)
    return ResponseBuilder(context, session), context


def test_tell_ends_session_without_reprompt_or_card() -> None:
    builder, context = _builder()
    builder.tell("Goodbye")

    assert context.succeeded == [
        {
            "version": "1.0",
            "response": {
                "outputSpeech": {"type": "PlainText", "text": "Goodbye"},
                "shouldEndSession": True,
            },
        }
    ]
    assert builder.responded is True


def test_tell_with_card_adds_simple_card() -> None:
    builder, context = _builder()
    builder.tell_with_card("Done", "Title", "Content")

    response = context.succeeded[0]["response"]
    assert response["shouldEndSession"] is True
    assert response["card"] == {"type": "Simple", "title": "Title", "content": "Content"}
    assert "reprompt" not in response


def test_ask_keeps_session_open_with_reprompt() -> None:
    builder, context = _builder()
    builder.ask(SpeechOutput.ssml("<speak>Which line?</speak>"), {"speech": "Which line?"})

    response = context.succeeded[0]["response"]
    assert response["shouldEndSession"] is False
    assert response["outputSpeech"] == {"type": "SSML", "ssml": "<speak>Which line?</speak>"}
    assert response["reprompt"] == {"outputSpeech": {"type": "PlainText", "text": "Which line?"}}
    assert "card" not in response


def test_ask_with_card_includes_everything() -> None:
    builder, context = _builder({"index": 3})
    builder.ask_with_card("Speech", "Reprompt", "Card title", "Card body")

    envelope = context.succeeded[0]
    assert envelope["response"]["shouldEndSession"] is False
    assert envelope["response"]["card"]["title"] == "Card title"
    assert envelope["response"]["reprompt"]["outputSpeech"]["text"] == "Reprompt"
    assert envelope["sessionAttributes"] == {"index": 3}


@pytest.mark.parametrize("title,content", [("", "body"), ("title", ""), ("", "")])
def test_card_requires_title_and_content(title: str, content: str) -> None:
    envelope = build_speechlet_response(
        output="hi", should_end_session=True, card_title=title, card_content=content
    )
    assert "card" not in envelope["response"]


@pytest.mark.parametrize("attributes", [None, {}])
def test_session_attributes_omitted_when_empty(attributes) -> None:
    builder, context = _builder(attributes)
    builder.tell("bye")
    assert "sessionAttributes" not in context.succeeded[0]


def test_session_attributes_read_at_build_time() -> None:
    """Attributes replaced on the session after construction are still echoed."""
    context = _RecordingContext()
    session = Session(session_id="s-1", application_id="app", attributes={})
    builder = ResponseBuilder(context, session)
    session.attributes = {"line": "red"}
    builder.tell("bye")
    assert context.succeeded[0]["sessionAttributes"] == {"line": "red"}


def test_session_attributes_are_snapshotted_when_sent() -> None:
    """Later changes to the live session do not leak into an emitted envelope."""
    attributes: dict[str, Any] = {"index": 3, "results": ["Delays on the red line."]}
    builder, context = _builder(attributes)
    builder.ask("More?", "Want more?")

    attributes["results"].append("Mutated")
    attributes.clear()

    assert context.succeeded[0]["sessionAttributes"] == {
        "index": 3,
        "results": ["Delays on the red line."],
    }


def test_second_terminal_call_is_rejected() -> None:
    builder, context = _builder()
    builder.ask("first", "again?")

    with pytest.raises(ResponseAlreadySentError):
        builder.tell("second")

    assert len(context.succeeded) == 1
    assert context.succeeded[0]["response"]["outputSpeech"]["text"] == "first"
    assert context.failed == []
