"""Voice-platform request and session models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional, Union

from train_traffic_engine.core.exceptions import InvalidEventError


class RequestType(str, Enum):
    """Request kinds the dispatcher knows how to route."""

    LAUNCH = "LaunchRequest"
    INTENT = "IntentRequest"
    SESSION_ENDED = "SessionEndedRequest"


@dataclass(slots=True)
class Slot:
    """A named, optional value extracted from user speech."""

    name: str
    value: Optional[str] = None

    @classmethod
    def from_data(cls, name: str, data: Any) -> "Slot":
        if not isinstance(data, Mapping):
            return cls(name=name)
        value = data.get("value")
        return cls(name=str(data.get("name") or name), value=value if isinstance(value, str) else None)


@dataclass(slots=True)
class Intent:
    """A named user goal recognised upstream by the voice platform."""

    name: str
    slots: dict[str, Slot] = field(default_factory=dict)

    def slot_value(self, name: str) -> Optional[str]:
        """Return the value of slot ``name`` or ``None`` when absent or unfilled."""
        slot = self.slots.get(name)
        return slot.value if slot is not None else None

    @classmethod
    def from_data(cls, data: Any) -> "Intent":
        if not isinstance(data, Mapping):
            raise InvalidEventError("intent request is missing its intent")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidEventError("intent is missing its name")
        raw_slots = data.get("slots") or {}
        if not isinstance(raw_slots, Mapping):
            raise InvalidEventError("intent slots must be a mapping")
        slots = {str(key): Slot.from_data(str(key), value) for key, value in raw_slots.items()}
        return cls(name=name, slots=slots)


@dataclass(slots=True)
class LaunchRequest:
    """The user opened the skill without asking for anything specific."""

    type: ClassVar[RequestType] = RequestType.LAUNCH

    request_id: str
    timestamp: Optional[str] = None
    locale: Optional[str] = None


@dataclass(slots=True)
class IntentRequest:
    """The user asked for something the platform mapped to an intent."""

    type: ClassVar[RequestType] = RequestType.INTENT

    request_id: str
    intent: Intent
    timestamp: Optional[str] = None
    locale: Optional[str] = None


@dataclass(slots=True)
class SessionEndedRequest:
    """The platform closed the session (user exit, error, or timeout)."""

    type: ClassVar[RequestType] = RequestType.SESSION_ENDED

    request_id: str
    reason: Optional[str] = None
    timestamp: Optional[str] = None
    locale: Optional[str] = None


Request = Union[LaunchRequest, IntentRequest, SessionEndedRequest]


@dataclass(slots=True)
class Session:
    """Per-conversation state handed in by the caller on every turn.

    ``attributes`` is the only state that survives between turns: the platform
    sends it in, handlers mutate it, and the response echoes it back.
    """

    session_id: str
    application_id: str
    new: bool = False
    user_id: Optional[str] = None
    attributes: Optional[dict[str, Any]] = None

    @classmethod
    def from_data(cls, data: Any) -> "Session":
        if not isinstance(data, Mapping):
            raise InvalidEventError("event is missing its session")
        session_id = data.get("sessionId")
        if not isinstance(session_id, str) or not session_id:
            raise InvalidEventError("missing or invalid session id")
        application = data.get("application")
        application_id = application.get("applicationId") if isinstance(application, Mapping) else None
        if not isinstance(application_id, str):
            raise InvalidEventError("missing or invalid application id")
        user = data.get("user")
        user_id = user.get("userId") if isinstance(user, Mapping) else None
        attributes = data.get("attributes")
        if attributes is not None and not isinstance(attributes, Mapping):
            raise InvalidEventError("session attributes must be a mapping")
        new = data.get("new", False)
        if not isinstance(new, bool):
            raise InvalidEventError("session new flag must be a boolean")
        return cls(
            session_id=session_id,
            application_id=application_id,
            new=new,
            user_id=user_id if isinstance(user_id, str) else None,
            attributes=dict(attributes) if attributes is not None else None,
        )


@dataclass(slots=True)
class StatusRecord:
    """One line-status entry from the upstream status feed."""

    status: str
    name: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_data(cls, data: Any) -> "StatusRecord":
        if not isinstance(data, Mapping):
            raise ValueError("status record must be an object")
        status = data.get("status")
        if not isinstance(status, str):
            raise ValueError("status record is missing its status")
        name = data.get("name")
        text = data.get("text")
        return cls(
            status=status.strip(),
            name=name if isinstance(name, str) else None,
            text=text if isinstance(text, str) else None,
        )


def parse_request(data: Any) -> Request:
    """Build the typed request variant from a raw ``request`` payload."""
    if not isinstance(data, Mapping):
        raise InvalidEventError("event is missing its request")
    request_id = data.get("requestId")
    if not isinstance(request_id, str) or not request_id:
        raise InvalidEventError("missing or invalid request id")
    raw_type = data.get("type")
    try:
        request_type = RequestType(raw_type)
    except ValueError as exc:
        raise InvalidEventError(f"unsupported request type: {raw_type!r}") from exc

    timestamp = data.get("timestamp")
    locale = data.get("locale")
    common: dict[str, Any] = {
        "request_id": request_id,
        "timestamp": timestamp if isinstance(timestamp, str) else None,
        "locale": locale if isinstance(locale, str) else None,
    }
    if request_type is RequestType.LAUNCH:
        return LaunchRequest(**common)
    if request_type is RequestType.INTENT:
        return IntentRequest(intent=Intent.from_data(data.get("intent")), **common)
    reason = data.get("reason")
    return SessionEndedRequest(reason=reason if isinstance(reason, str) else None, **common)


def parse_event(event: Any) -> tuple[Request, Session]:
    """Split a raw platform event into its typed request and session."""
    if not isinstance(event, Mapping):
        raise InvalidEventError("event must be a JSON object")
    return parse_request(event.get("request")), Session.from_data(event.get("session"))


__all__ = [
    "Intent",
    "IntentRequest",
    "LaunchRequest",
    "Request",
    "RequestType",
    "Session",
    "SessionEndedRequest",
    "Slot",
    "StatusRecord",
    "parse_event",
    "parse_request",
]
