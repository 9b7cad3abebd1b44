"""Shared FastAPI dependencies."""

from fastapi import HTTPException, Request, status

from train_traffic_engine.services.skill import SkillDispatcher


def get_dispatcher(request: Request) -> SkillDispatcher:
    """Resolve the dispatcher configured on the application."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if not isinstance(dispatcher, SkillDispatcher):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Skill dispatcher not configured",
        )
    return dispatcher


__all__ = ["get_dispatcher"]
