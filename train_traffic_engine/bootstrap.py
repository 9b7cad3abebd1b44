"""Application bootstrap helpers for assembling the skill."""

from __future__ import annotations

from typing import Optional

from train_traffic_engine.adapters.status_source import HttpStatusSource
from train_traffic_engine.core.config import Settings, settings
from train_traffic_engine.core.ports import StatusSourcePort
from train_traffic_engine.services.skill import SkillDefinition, SkillDispatcher
from train_traffic_engine.services.train_traffic import TrainTrafficSkill


def build_default_skill(
    *,
    app_settings: Optional[Settings] = None,
    status_source: Optional[StatusSourcePort] = None,
) -> SkillDefinition:
    """Return the Train Traffic skill wired to the configured status feed."""

    cfg = app_settings or settings
    source = status_source or HttpStatusSource(cfg.STATUS_SOURCE_URL)
    skill = TrainTrafficSkill(source, page_size=cfg.PAGINATION_SIZE)
    return SkillDefinition(
        handlers=skill,
        intent_router=skill.intent_router(),
        application_id=cfg.SKILL_APPLICATION_ID,
    )


def build_default_dispatcher(**kwargs) -> SkillDispatcher:  # type: ignore[no-untyped-def]
    """Return a dispatcher around :func:`build_default_skill`."""

    return SkillDispatcher(build_default_skill(**kwargs))


__all__ = ["build_default_dispatcher", "build_default_skill"]
