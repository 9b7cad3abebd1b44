"""Voice-platform webhook route."""

from __future__ import annotations

from typing import Annotated, Any, Mapping, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from train_traffic_engine.core.exceptions import (
    AuthorizationError,
    InvalidEventError,
    UnsupportedIntentError,
)
from train_traffic_engine.core.logging import get_logger
from train_traffic_engine.services.skill import SkillDispatcher

from ..dependencies import get_dispatcher

router = APIRouter(tags=["alexa"])
logger = get_logger(__name__)

_ERROR_STATUS: dict[type[BaseException], int] = {
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    InvalidEventError: status.HTTP_400_BAD_REQUEST,
    UnsupportedIntentError: status.HTTP_400_BAD_REQUEST,
}


class HttpInvocationContext:
    """Invocation context that records the single outcome for the HTTP reply."""

    def __init__(self) -> None:
        self.payload: Optional[dict[str, Any]] = None
        self.error: Optional[BaseException] = None
        self.signals = 0

    def succeed(self, payload: Optional[dict[str, Any]] = None) -> None:
        self.signals += 1
        self.payload = payload

    def fail(self, error: BaseException) -> None:
        self.signals += 1
        self.error = error

    def to_response(self) -> JSONResponse:
        if self.error is None:
            return JSONResponse(self.payload or {})
        status_code = _ERROR_STATUS.get(type(self.error), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(
            {"error": type(self.error).__name__, "detail": str(self.error)},
            status_code=status_code,
        )


def _record_skill_request(request: Request, event: Any) -> None:
    """Expose the platform request type and id to the logging middleware."""
    body = event.get("request") if isinstance(event, Mapping) else None
    if not isinstance(body, Mapping):
        return
    if isinstance(body.get("type"), str):
        request.state.skill_request_type = body["type"]
    if isinstance(body.get("requestId"), str):
        request.state.skill_request_id = body["requestId"]


@router.post("/alexa")
async def handle_event(
    request: Request,
    dispatcher: Annotated[SkillDispatcher, Depends(get_dispatcher)],
) -> JSONResponse:
    """Dispatch one voice-platform event and return its response envelope."""
    try:
        event = await request.json()
    except ValueError:
        logger.warning("Rejected request with a non-JSON body")
        return JSONResponse(
            {"error": InvalidEventError.__name__, "detail": "request body must be JSON"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    _record_skill_request(request, event)
    context = HttpInvocationContext()
    await dispatcher.execute(event, context)
    return context.to_response()


__all__ = ["HttpInvocationContext", "router"]
