"""Host invocation entry point: ``handler(event, context)``."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from train_traffic_engine.core.ports import InvocationContext
from train_traffic_engine.services.skill import SkillDispatcher

from .bootstrap import build_default_dispatcher

_dispatcher: Optional[SkillDispatcher] = None


def get_dispatcher() -> SkillDispatcher:
    """Return the process-wide dispatcher, building it on first use."""
    global _dispatcher  # pylint: disable=global-statement
    if _dispatcher is None:
        _dispatcher = build_default_dispatcher()
    return _dispatcher


def set_dispatcher(dispatcher: Optional[SkillDispatcher]) -> None:
    """Override the process-wide dispatcher (used primarily in tests)."""
    global _dispatcher  # pylint: disable=global-statement
    _dispatcher = dispatcher


def handler(event: Any, context: InvocationContext) -> None:
    """Handle one platform event, signalling ``context`` exactly once."""
    asyncio.run(get_dispatcher().execute(event, context))


__all__ = ["get_dispatcher", "handler", "set_dispatcher"]
