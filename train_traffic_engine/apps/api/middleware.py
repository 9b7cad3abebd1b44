"""HTTP middleware for the skill webhook."""

from __future__ import annotations

import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response

from train_traffic_engine.core.logging import correlation_id_context, get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
SKILL_REQUEST_HEADER = "X-Skill-Request-ID"


async def log_skill_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind an HTTP correlation id around the request and log its outcome.

    The correlation id comes from the inbound header or is generated, and is
    echoed back. The platform request id stays separate: the route records it
    on ``request.state`` and the dispatcher binds it to its own log field.
    """
    correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
    start_time = time.perf_counter()
    status_code = 500
    with correlation_id_context(correlation_id):
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            logger.info(
                "skill request completed",
                extra={
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": round((time.perf_counter() - start_time) * 1000.0, 2),
                    "skill_request_type": getattr(request.state, "skill_request_type", None),
                    "skill_request_id": getattr(request.state, "skill_request_id", None),
                },
            )

    response.headers[CORRELATION_HEADER] = correlation_id
    skill_request_id = getattr(request.state, "skill_request_id", None)
    if skill_request_id:
        response.headers[SKILL_REQUEST_HEADER] = skill_request_id
    return response


__all__ = ["CORRELATION_HEADER", "SKILL_REQUEST_HEADER", "log_skill_requests"]
