"""
Career Index - Step 5 of the career build
app/pipelines/indexer.py

Groups classified careers by cluster, salary tier, education level and
growth category. The index is rebuilt from scratch on every run.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from app.exceptions import CareerGameError
from app.models.career import Career
from app.pipelines.classifier import (
    get_cluster_metadata,
    get_education_metadata,
    get_tier_metadata,
)
from app.pipelines.keywords import EDUCATION_LEVELS, SALARY_TIER_METADATA, UNKNOWN_EDUCATION
from app.pipelines.pipeline_state import CareerPipelineState

logger = logging.getLogger(__name__)


def _require_metadata(careers: Sequence[Career]) -> None:
    missing = [c.id for c in careers if c.metadata is None]
    if missing:
        raise CareerGameError(f"Careers must be classified before indexing (unclassified ids: {missing[:5]})")


def group_by_cluster(careers: Sequence[Career]) -> Dict[str, Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = {}
    for career in careers:
        cluster = career.metadata.cluster
        if cluster not in groups:
            groups[cluster] = {"metadata": get_cluster_metadata(cluster), "careers": [], "count": 0}
        groups[cluster]["careers"].append(career.id)
        groups[cluster]["count"] += 1
    return groups


def group_by_tier(careers: Sequence[Career]) -> Dict[str, Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = {
        tier: {"metadata": get_tier_metadata(tier), "careers": [], "count": 0, "avg_salary": 0}
        for tier in SALARY_TIER_METADATA
    }
    salaries: Dict[str, List[int]] = {tier: [] for tier in SALARY_TIER_METADATA}

    for career in careers:
        tier = career.metadata.salary_tier
        groups[tier]["careers"].append(career.id)
        groups[tier]["count"] += 1
        salaries[tier].append(career.salary)

    for tier, values in salaries.items():
        if values:
            groups[tier]["avg_salary"] = int(round(sum(values) / len(values)))
    return groups


def group_by_education(careers: Sequence[Career]) -> Dict[str, Dict[str, Any]]:
    levels = [level for level, *_ in EDUCATION_LEVELS] + [UNKNOWN_EDUCATION[0]]
    groups: Dict[str, Dict[str, Any]] = {}
    for level in levels:
        meta = get_education_metadata(level)
        groups[meta["name"]] = {"level": level, "label": meta["label"], "careers": [], "count": 0}

    for career in careers:
        name = get_education_metadata(career.metadata.education_level)["name"]
        groups[name]["careers"].append(career.id)
        groups[name]["count"] += 1
    return groups


def group_by_growth(careers: Sequence[Career]) -> Dict[str, Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = {}
    for career in careers:
        category = career.growth_category or "Unknown"
        groups.setdefault(category, {"careers": [], "count": 0})
        groups[category]["careers"].append(career.id)
        groups[category]["count"] += 1
    return groups


def build_index(careers: Sequence[Career]) -> Dict[str, Any]:
    """
    Build every grouping for a classified career set.
    Deterministic: the same careers always give the same index.
    """
    _require_metadata(careers)
    return {
        "total_careers": len(careers),
        "clusters": group_by_cluster(careers),
        "salary_tiers": group_by_tier(careers),
        "education_levels": group_by_education(careers),
        "growth_categories": group_by_growth(careers),
    }


def step5_build_index(state: CareerPipelineState) -> CareerPipelineState:
    logger.info("-" * 40)
    logger.info("🗂️ [5/7] BUILDING INDEX")

    state.index = build_index(state.careers)

    logger.info(f"   Clusters: {len(state.index['clusters'])}")
    for tier, group in state.index["salary_tiers"].items():
        logger.info(f"   {group['metadata']['label']}: {group['count']} careers (avg ${group['avg_salary']:,})")
    logger.info(f"   Growth categories: {', '.join(sorted(state.index['growth_categories']))}")
    return state
