"""Skill dispatcher: origin validation, session lifecycle, and request routing.

One invocation moves through ``NotStarted -> SessionActive -> Responded``, or
ends early in ``SessionEnded`` for session-ended requests. The dispatcher holds
no state between invocations; the session attributes carried inside the event
are the only cross-turn memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

from train_traffic_engine.core.exceptions import (
    AuthorizationError,
    DispatchError,
    HandlerError,
    InvalidEventError,
)
from train_traffic_engine.core.logging import (
    get_logger,
    request_id_context,
    session_id_context,
)
from train_traffic_engine.core.models import (
    LaunchRequest,
    Request,
    Session,
    SessionEndedRequest,
    parse_request,
)
from train_traffic_engine.core.ports import InvocationContext, SkillHandlers
from train_traffic_engine.services.intent_router import IntentRouter
from train_traffic_engine.services.response_builder import ResponseBuilder

logger = get_logger(__name__)


@dataclass(slots=True)
class SkillDefinition:
    """Per-skill configuration assembled once at startup."""

    handlers: SkillHandlers
    intent_router: IntentRouter
    application_id: Optional[str] = None


@dataclass(slots=True)
class DispatchOutcome:
    """Result of one dispatch: an envelope on success or the error that ended it."""

    envelope: Optional[dict[str, Any]] = None
    error: Optional[DispatchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class _CapturingContext:
    """Collects the envelope a responder emits so the dispatcher owns the host signal."""

    def __init__(self) -> None:
        self.envelope: Optional[dict[str, Any]] = None
        self.completed = False

    def succeed(self, payload: Optional[dict[str, Any]] = None) -> None:
        self.envelope = payload
        self.completed = True

    def fail(self, error: BaseException) -> None:
        raise error


class SkillDispatcher:
    """Route platform events to a skill's handlers."""

    def __init__(self, skill: SkillDefinition) -> None:
        self._skill = skill

    @property
    def skill(self) -> SkillDefinition:
        return self._skill

    async def execute(self, event: Any, context: InvocationContext) -> None:
        """Dispatch ``event`` and signal ``context`` exactly once."""
        outcome = await self.dispatch(event)
        if outcome.error is not None:
            context.fail(outcome.error)
        else:
            context.succeed(outcome.envelope)

    async def dispatch(self, event: Any) -> DispatchOutcome:
        """Dispatch ``event`` and return the envelope or the error; never raises."""
        try:
            if not isinstance(event, Mapping):
                raise InvalidEventError("event must be a JSON object")
            session = Session.from_data(event.get("session"))
        except DispatchError as exc:
            logger.warning("Rejected malformed event: %s", exc)
            return DispatchOutcome(error=exc)

        with session_id_context(session.session_id):
            # Origin is checked before the request body is trusted at all.
            try:
                self._validate_origin(session)
                request = parse_request(event.get("request"))
            except DispatchError as exc:
                logger.warning("Rejected event: %s", exc)
                return DispatchOutcome(error=exc)

            with request_id_context(request.request_id):
                try:
                    envelope = await self._route(request, session)
                except DispatchError as exc:
                    logger.error("Unexpected exception %s: %s", type(exc).__name__, exc)
                    return DispatchOutcome(error=exc)
                except Exception as exc:  # pylint: disable=broad-except
                    logger.exception("Unexpected exception while dispatching")
                    return DispatchOutcome(error=HandlerError(str(exc)))
                return DispatchOutcome(envelope=envelope)

    async def _route(self, request: Request, session: Session) -> Optional[dict[str, Any]]:
        if session.attributes is None:
            session.attributes = {}

        handlers = self._skill.handlers
        if session.new:
            await _invoke("onSessionStarted", handlers.on_session_started, request, session)

        if isinstance(request, SessionEndedRequest):
            await _invoke("onSessionEnded", handlers.on_session_ended, request, session)
            return None

        context = _CapturingContext()
        responder = ResponseBuilder(context, session)
        if isinstance(request, LaunchRequest):
            label = "onLaunch"
            await _invoke(label, handlers.on_launch, request, session, responder)
        else:
            label = f"intent {request.intent.name}"
            await _invoke(label, self._skill.intent_router.dispatch, request.intent, session, responder)

        if not context.completed:
            raise HandlerError(f"{label} returned without producing a response")
        return context.envelope

    def _validate_origin(self, session: Session) -> None:
        logger.info("session applicationId: %s", session.application_id)
        expected = self._skill.application_id
        if expected and session.application_id != expected:
            logger.warning(
                "The applicationIds don't match : %s and %s", session.application_id, expected
            )
            raise AuthorizationError("Invalid applicationId")


async def _invoke(label: str, func: Callable[..., Awaitable[None]], *args: Any) -> None:
    """Await a handler, wrapping anything outside the dispatch taxonomy in ``HandlerError``."""
    try:
        await func(*args)
    except DispatchError:
        raise
    except Exception as exc:  # pylint: disable=broad-except
        raise HandlerError(f"{label} failed: {exc}") from exc


__all__ = ["DispatchOutcome", "SkillDefinition", "SkillDispatcher"]
