"""Tests for the host invocation entry point and bootstrap wiring."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from train_traffic_engine import handler as entry
from train_traffic_engine.adapters.status_source import HttpStatusSource
from train_traffic_engine.bootstrap import build_default_skill
from train_traffic_engine.core.config import Settings
from train_traffic_engine.core.exceptions import AuthorizationError
from train_traffic_engine.services.skill import SkillDispatcher
from train_traffic_engine.services.train_traffic import TrainTrafficSkill


class _HostContext:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def succeed(self, payload: Optional[dict[str, Any]] = None) -> None:
        self.calls.append(("succeed", payload))

    def fail(self, error: BaseException) -> None:
        self.calls.append(("fail", error))


@pytest.fixture(autouse=True)
def _reset_dispatcher():
    entry.set_dispatcher(None)
    yield
    entry.set_dispatcher(None)


def _launch_event(application_id: str = "amzn1.any") -> dict[str, Any]:
    return {
        "session": {"new": True, "sessionId": "s-1", "application": {"applicationId": application_id}},
        "request": {"type": "LaunchRequest", "requestId": "req-1"},
    }


def test_handler_signals_success_once():
    context = _HostContext()
    entry.handler(_launch_event(), context)

    assert len(context.calls) == 1
    kind, payload = context.calls[0]
    assert kind == "succeed"
    assert payload["response"]["shouldEndSession"] is False


def test_handler_signals_failure_for_foreign_application():
    settings = Settings(SKILL_APPLICATION_ID="amzn1.mine")
    entry.set_dispatcher(SkillDispatcher(build_default_skill(app_settings=settings)))
    context = _HostContext()

    entry.handler(_launch_event("amzn1.theirs"), context)

    assert len(context.calls) == 1
    assert context.calls[0][0] == "fail"
    assert isinstance(context.calls[0][1], AuthorizationError)


def test_get_dispatcher_is_cached():
    assert entry.get_dispatcher() is entry.get_dispatcher()


def test_build_default_skill_uses_settings():
    settings = Settings(
        SKILL_APPLICATION_ID="amzn1.mine",
        STATUS_SOURCE_URL="https://feed.example.com/",
        PAGINATION_SIZE=5,
    )
    skill = build_default_skill(app_settings=settings)

    assert skill.application_id == "amzn1.mine"
    assert isinstance(skill.handlers, TrainTrafficSkill)
    assert "GetNextEventIntent" in skill.intent_router.handlers()
    source = skill.handlers._status_source  # pylint: disable=protected-access
    assert isinstance(source, HttpStatusSource)
    assert source.base_url == "https://feed.example.com/"
