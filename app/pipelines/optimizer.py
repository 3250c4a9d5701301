"""
Career Views - Steps 6 and 7 of the career build
app/pipelines/optimizer.py

Projects the full career set into the game view and the public view.
Nothing new is computed here; fields are only dropped or shortened.
The public view is produced only after the strict publish check passes.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from app.config import settings
from app.models.career import Career, GameCareer, GameCareerMetadata, PublicCareer
from app.pipelines.classifier import classify_career
from app.pipelines.pipeline_state import CareerPipelineState
from app.pipelines.validator import check_publishable

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
PUBLIC_SKILL_COUNT = 5
MIN_PUBLIC_SKILLS = 3


def truncate_text(text: Optional[str], max_length: int) -> str:
    """
    Shorten text to at most max_length characters plus an ellipsis.

    Cuts at the last space inside the limit so no word is split, unless that
    would keep less than half the limit; then the text is hard-cut.
    """
    if not text or len(text) <= max_length:
        return text or ""

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space >= max_length // 2:
        return truncated[:last_space].rstrip() + ELLIPSIS
    return truncated + ELLIPSIS


def _with_metadata(career: Career) -> Career:
    return career if career.metadata is not None else classify_career(career)


def to_game_career(career: Career) -> GameCareer:
    career = _with_metadata(career)
    return GameCareer(
        id=career.id,
        soc=career.soc,
        title=career.title,
        title_short=career.title_short,
        description=truncate_text(career.description, settings.GAME_DESCRIPTION_LIMIT),
        salary=career.salary,
        salary_range=career.salary_range,
        salary_hourly=career.salary_hourly,
        education=career.education,
        work_experience=career.work_experience,
        demand=career.demand,
        growth_rate=career.growth_rate,
        growth_category=career.growth_category,
        job_count=career.job_count,
        work_environment=truncate_text(career.work_environment, settings.GAME_ENVIRONMENT_LIMIT),
        metadata=GameCareerMetadata(
            salary_tier=career.metadata.salary_tier,
            cluster=career.metadata.cluster,
            education_level=career.metadata.education_level,
            search_text=career.metadata.search_text,
        ),
        source=career.source,
    )


def public_skills(career: Career) -> List[str]:
    """First five keywords; the career's own skills when there are too few keywords."""
    keywords = career.metadata.keywords if career.metadata else []
    if len(keywords) >= MIN_PUBLIC_SKILLS:
        return list(keywords[:PUBLIC_SKILL_COUNT])
    return list(career.skills[:PUBLIC_SKILL_COUNT])


def to_public_career(career: Career) -> PublicCareer:
    career = _with_metadata(career)
    return PublicCareer(
        id=career.id,
        soc=career.soc,
        title=career.title,
        description=truncate_text(career.description, settings.PUBLIC_DESCRIPTION_LIMIT),
        education=career.education,
        demand=career.demand,
        salary=career.salary,
        work_environment=truncate_text(career.work_environment, settings.PUBLIC_ENVIRONMENT_LIMIT),
        skills=public_skills(career),
        source=career.source,
    )


def step6_optimize_for_game(state: CareerPipelineState) -> CareerPipelineState:
    logger.info("-" * 40)
    logger.info("✂️ [6/7] OPTIMIZING FOR GAME")

    state.game_careers = [to_game_career(c) for c in state.careers]

    full_chars = sum(len(c.description) + len(c.what_they_do) + len(c.how_to_become_one) for c in state.careers)
    game_chars = sum(len(c.description) for c in state.game_careers)
    logger.info(f"   Game careers: {len(state.game_careers)}")
    logger.info(f"   Text kept: {game_chars:,} of {full_chars:,} characters")
    return state


def step7_publish(state: CareerPipelineState) -> CareerPipelineState:
    """Strict check, then the public view. Raises PublishValidationError on any failure."""
    logger.info("-" * 40)
    logger.info("🚀 [7/7] PUBLISHING PUBLIC DATASET")

    check_publishable(state.careers)
    public_careers = [to_public_career(c) for c in state.careers]
    check_publishable(public_careers)
    state.public_careers = public_careers
    state.summary["published"] = True

    logger.info(f"   ✅ {len(state.public_careers)} careers passed the publish check")
    return state
