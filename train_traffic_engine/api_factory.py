"""API factory entrypoint wiring the default skill to the FastAPI app."""

from __future__ import annotations

from train_traffic_engine.apps.api.app import create_app as _create_app
from train_traffic_engine.bootstrap import build_default_dispatcher


def create_app():  # noqa: D401 - FastAPI factory signature
    """Return a FastAPI app configured with the default skill dispatcher."""

    return _create_app(build_default_dispatcher())


__all__ = ["create_app"]
