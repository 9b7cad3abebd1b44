"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from train_traffic_engine.apps.api.middleware import log_skill_requests
from train_traffic_engine.core.logging import get_logger
from train_traffic_engine.services.skill import SkillDispatcher

logger = get_logger(__name__)


def create_app(dispatcher: SkillDispatcher | None = None) -> FastAPI:
    """Build the FastAPI application serving ``dispatcher``."""
    if dispatcher is None:
        raise RuntimeError("Skill dispatcher must be provided when creating the app.")
    app = FastAPI()
    app.state.dispatcher = dispatcher
    app.middleware("http")(log_skill_requests)

    # Import lazily to avoid potential circular imports when routers grow.
    from .routes import health, skill  # pylint: disable=import-outside-toplevel

    app.include_router(health.router)
    app.include_router(skill.router)
    logger.info("Train traffic API ready.")
    return app


__all__ = ["create_app"]
