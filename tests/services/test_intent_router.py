"""Unit tests for the intent router."""

from __future__ import annotations

import asyncio

import pytest

from train_traffic_engine.core.exceptions import UnsupportedIntentError
from train_traffic_engine.core.models import Intent, Session, Slot
from train_traffic_engine.services.intent_router import IntentRouter


class _Responder:
    def __init__(self) -> None:
        self.told: list[str] = []

    def tell(self, speech) -> None:
        self.told.append(speech)


def _session() -> Session:
    return Session(session_id="s-1", application_id="app", attributes={})


def test_dispatch_invokes_registered_handler():
    """Router calls exactly the handler registered under the intent name."""
    calls: list[str] = []

    async def echo(intent, session, responder):
        calls.append(intent.name)
        responder.tell(f"You said: {intent.slot_value('text')}")

    async def other(intent, session, responder):
        calls.append("other")

    router = IntentRouter({"EchoIntent": echo, "OtherIntent": other})
    responder = _Responder()
    intent = Intent(name="EchoIntent", slots={"text": Slot(name="text", value="hello")})

    asyncio.run(router.dispatch(intent, _session(), responder))

    assert calls == ["EchoIntent"]
    assert responder.told == ["You said: hello"]


def test_dispatch_unknown_intent_raises():
    router = IntentRouter()

    with pytest.raises(UnsupportedIntentError) as excinfo:
        asyncio.run(router.dispatch(Intent(name="MissingIntent"), _session(), _Responder()))

    assert excinfo.value.intent_name == "MissingIntent"
    assert "MissingIntent" in str(excinfo.value)


def test_lookup_is_exact():
    """Names are matched exactly, without case folding."""

    async def noop(intent, session, responder):
        return None

    router = IntentRouter({"AMAZON.HelpIntent": noop})
    with pytest.raises(UnsupportedIntentError):
        asyncio.run(router.dispatch(Intent(name="amazon.helpintent"), _session(), _Responder()))


def test_register_and_unregister_update_snapshot():
    async def noop(intent, session, responder):
        return None

    router = IntentRouter()
    router.register("A", noop)
    snapshot = router.handlers()
    router.unregister("A")
    router.unregister("never-registered")

    assert snapshot == {"A": noop}
    assert router.handlers() == {}
