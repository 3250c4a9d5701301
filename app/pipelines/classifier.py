"""
Career Classification - Step 4 of the career build
app/pipelines/classifier.py

Pure functions that derive a career's metadata from its own fields:
salary tier, industry cluster, education level, keywords and search text.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from app.config import settings
from app.models.career import Career, CareerMetadata
from app.pipelines.keywords import (
    CLUSTER_KEYWORDS,
    CLUSTER_METADATA,
    DEFAULT_CLUSTER,
    EDUCATION_LEVELS,
    SALARY_TIER_METADATA,
    SALARY_TIER_THRESHOLDS,
    STOP_WORDS,
    TOP_SALARY_TIER,
    UNKNOWN_EDUCATION,
)
from app.pipelines.pipeline_state import CareerPipelineState

logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


# =============================================================================
# Salary tier
# =============================================================================

def get_salary_tier(salary: float) -> str:
    for tier, upper in SALARY_TIER_THRESHOLDS:
        if salary < upper:
            return tier
    return TOP_SALARY_TIER


def get_tier_metadata(tier: str) -> Optional[Dict]:
    meta = SALARY_TIER_METADATA.get(tier)
    return {"name": tier, **meta} if meta else None


# =============================================================================
# Cluster detection
# =============================================================================

@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(keyword.lower()) + r"\b", re.IGNORECASE)


def count_keyword(text: str, keyword: str) -> int:
    """Whole-word, case-insensitive occurrences of keyword in text."""
    return len(_keyword_pattern(keyword).findall(text))


def score_clusters(
    text: str,
    table: Sequence[Tuple[str, Sequence[str]]] = CLUSTER_KEYWORDS,
) -> Dict[str, int]:
    """Score every cluster in table order."""
    return {
        cluster: sum(count_keyword(text, kw) for kw in keywords)
        for cluster, keywords in table
    }


def detect_cluster(
    title: str,
    description: str = "",
    table: Sequence[Tuple[str, Sequence[str]]] = CLUSTER_KEYWORDS,
) -> str:
    """
    Pick the cluster whose keywords occur most often in title + description.

    Only a strictly higher score replaces the current best, so ties go to
    the cluster listed first. No hits at all gives "other".
    """
    scores = score_clusters(f"{title or ''} {description or ''}", table)

    best_cluster, best_score = DEFAULT_CLUSTER, 0
    for cluster, score in scores.items():
        if score > best_score:
            best_cluster, best_score = cluster, score
    return best_cluster


def get_cluster_metadata(cluster: str) -> Dict:
    meta = CLUSTER_METADATA.get(cluster, CLUSTER_METADATA[DEFAULT_CLUSTER])
    return {"name": cluster if cluster in CLUSTER_METADATA else DEFAULT_CLUSTER, **meta}


# =============================================================================
# Education level
# =============================================================================

def parse_education_level(education: Optional[str]) -> int:
    """Map an education requirement to 1-6 by first keyword hit; 0 when nothing matches."""
    if not education:
        return UNKNOWN_EDUCATION[0]

    text = education.lower()
    for level, _name, _label, keywords in EDUCATION_LEVELS:
        if any(kw in text for kw in keywords):
            return level
    return UNKNOWN_EDUCATION[0]


def get_education_metadata(level: int) -> Dict:
    for lvl, name, label, _keywords in EDUCATION_LEVELS:
        if lvl == level:
            return {"level": lvl, "name": name, "label": label}
    lvl, name, label = UNKNOWN_EDUCATION
    return {"level": lvl, "name": name, "label": label}


# =============================================================================
# Keywords and search text
# =============================================================================

def extract_keywords(text: Optional[str], max_keywords: Optional[int] = None) -> List[str]:
    """Most frequent words longer than 3 characters, stop words removed."""
    if not text:
        return []
    max_keywords = max_keywords or settings.KEYWORD_COUNT

    words = [
        w for w in _NON_WORD_RE.sub(" ", text.lower()).split()
        if len(w) > 3 and w not in STOP_WORDS
    ]
    # most_common keeps first-seen order among equal counts
    return [word for word, _ in Counter(words).most_common(max_keywords)]


def build_search_text(career: Career) -> str:
    parts = [
        career.title,
        career.title_short,
        career.description,
        career.education,
        career.work_environment,
    ]
    text = " ".join(p for p in parts if p).lower()
    return _WHITESPACE_RE.sub(" ", _NON_WORD_RE.sub(" ", text)).strip()


# =============================================================================
# Career metadata
# =============================================================================

def build_metadata(career: Career) -> CareerMetadata:
    return CareerMetadata(
        salary_tier=get_salary_tier(career.salary),
        cluster=detect_cluster(career.title, career.description),
        education_level=parse_education_level(career.education),
        keywords=extract_keywords(f"{career.title} {career.description} {career.what_they_do}"),
        search_text=build_search_text(career),
    )


def classify_career(career: Career) -> Career:
    """Return a new Career with freshly computed metadata."""
    return career.model_copy(update={"metadata": build_metadata(career)})


def step4_classify_careers(state: CareerPipelineState) -> CareerPipelineState:
    logger.info("-" * 40)
    logger.info("🏷️ [4/7] CLASSIFYING CAREERS")

    state.careers = [classify_career(c) for c in state.careers]

    clusters = Counter(c.metadata.cluster for c in state.careers)
    tiers = Counter(c.metadata.salary_tier for c in state.careers)
    for cluster, count in clusters.most_common():
        meta = get_cluster_metadata(cluster)
        logger.info(f"   {meta['icon']} {meta['label']}: {count}")
    logger.info(f"   Tiers: {', '.join(f'{t}={n}' for t, n in sorted(tiers.items()))}")
    return state
