"""
Career Query Layer
app/services/career_query.py

Read-only filter, search, sort and similarity operations over a loaded
career collection. The module-level functions are pure and take the
collection explicitly; CareerQueryService binds them to the data service.
An empty result is an empty list, never an error.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from app.config import settings
from app.models.career import GameCareer
from app.models.matchup import CareerFilter
from app.services.data_loader import CareerDataService

logger = logging.getLogger(__name__)

Criteria = Union[CareerFilter, Dict[str, Any], None]

SIMILAR_SAME_CLUSTER = 10
SIMILAR_SAME_TIER = 5
SIMILAR_SAME_EDUCATION = 3
# (salary difference below, points)
SIMILAR_SALARY_BANDS = ((10000, 5), (20000, 3), (30000, 1))


def as_filter(criteria: Criteria) -> CareerFilter:
    """Accept a CareerFilter, a plain dict (snake or camel keys) or None."""
    if criteria is None:
        return CareerFilter()
    if isinstance(criteria, CareerFilter):
        return criteria
    return CareerFilter.model_validate(criteria)


def get_field(career: Any, field: str) -> Any:
    """Read a possibly dotted field ("metadata.cluster") from a model or dict."""
    value = career
    for part in field.split("."):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _meta(career: Any, field: str) -> Any:
    return get_field(career, f"metadata.{field}")


# =============================================================================
# Filtering
# =============================================================================

def matches_filter(career: GameCareer, criteria: CareerFilter) -> bool:
    """Conjunction of every set criterion."""
    if criteria.cluster is not None and _meta(career, "cluster") != criteria.cluster:
        return False
    if criteria.salary_min is not None and career.salary < criteria.salary_min:
        return False
    if criteria.salary_max is not None and career.salary > criteria.salary_max:
        return False
    if criteria.education is not None:
        if criteria.education.lower() not in (career.education or "").lower():
            return False
    if criteria.growth_min is not None:
        if career.growth_rate is None or career.growth_rate < criteria.growth_min:
            return False
    if criteria.tier is not None and _meta(career, "salary_tier") != criteria.tier:
        return False
    if criteria.education_level is not None and _meta(career, "education_level") != criteria.education_level:
        return False
    return True


def filter_careers(careers: Sequence[GameCareer], criteria: Criteria = None) -> List[GameCareer]:
    criteria = as_filter(criteria)
    return [c for c in careers if matches_filter(c, criteria)]


# =============================================================================
# Search and sort
# =============================================================================

def search_careers(
    careers: Sequence[GameCareer],
    query: Optional[str],
    fields: Optional[Sequence[str]] = None,
    limit: Optional[int] = None,
    case_sensitive: bool = False,
) -> List[GameCareer]:
    """
    Literal substring search over the given fields and the precomputed
    search text. Results keep dataset order and stop at limit.
    A blank query matches nothing.
    """
    if not query or not query.strip():
        return []

    fields = tuple(fields or settings.SEARCH_FIELDS)
    limit = settings.SEARCH_LIMIT if limit is None else limit
    needle = query.strip() if case_sensitive else query.strip().lower()

    results = []
    for career in careers:
        if len(results) >= limit:
            break
        haystacks = [get_field(career, f) for f in fields]
        haystacks.append(_meta(career, "search_text"))
        for text in haystacks:
            if not isinstance(text, str) or not text:
                continue
            if needle in (text if case_sensitive else text.lower()):
                results.append(career)
                break
    return results


def _sort_key(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def sort_careers(careers: Iterable[GameCareer], field: str = "salary", order: str = "asc") -> List[GameCareer]:
    """
    Stable sort by field; careers with no value go last in either order.
    Strings compare case-insensitively. Raises ValueError when the field's
    values cannot be ordered against each other.
    """
    if order not in ("asc", "desc"):
        raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")

    present, missing = [], []
    for career in careers:
        (missing if get_field(career, field) is None else present).append(career)

    try:
        present.sort(key=lambda c: _sort_key(get_field(c, field)), reverse=(order == "desc"))
    except TypeError:
        raise ValueError(f"Cannot sort by {field!r}")
    return present + missing


def top_careers(
    careers: Sequence[GameCareer],
    count: int = 10,
    field: str = "salary",
    criteria: Criteria = None,
) -> List[GameCareer]:
    return sort_careers(filter_careers(careers, criteria), field, "desc")[:max(count, 0)]


def bottom_careers(
    careers: Sequence[GameCareer],
    count: int = 10,
    field: str = "salary",
    criteria: Criteria = None,
) -> List[GameCareer]:
    return sort_careers(filter_careers(careers, criteria), field, "asc")[:max(count, 0)]


def get_by_salary_range(careers: Sequence[GameCareer], salary_min: int, salary_max: int) -> List[GameCareer]:
    return filter_careers(careers, CareerFilter(salary_min=salary_min, salary_max=salary_max))


def random_careers(
    careers: Sequence[GameCareer],
    count: int = 1,
    criteria: Criteria = None,
    rng: Optional[random.Random] = None,
) -> List[GameCareer]:
    pool = filter_careers(careers, criteria)
    rng = rng or random.Random()
    return rng.sample(pool, min(max(count, 0), len(pool)))


# =============================================================================
# Similarity
# =============================================================================

def similarity_score(career: GameCareer, other: GameCareer) -> int:
    score = 0
    if _meta(career, "cluster") is not None and _meta(career, "cluster") == _meta(other, "cluster"):
        score += SIMILAR_SAME_CLUSTER
    if _meta(career, "salary_tier") is not None and _meta(career, "salary_tier") == _meta(other, "salary_tier"):
        score += SIMILAR_SAME_TIER

    diff = abs(career.salary - other.salary)
    for below, points in SIMILAR_SALARY_BANDS:
        if diff < below:
            score += points
            break

    if _meta(career, "education_level") is not None and _meta(career, "education_level") == _meta(other, "education_level"):
        score += SIMILAR_SAME_EDUCATION
    return score


def similar_careers(careers: Sequence[GameCareer], career: GameCareer, count: int = 5) -> List[GameCareer]:
    """Highest-scoring other careers; equal scores keep dataset order."""
    scored = [(similarity_score(career, other), other) for other in careers if other.id != career.id]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [other for _, other in scored[:max(count, 0)]]


# =============================================================================
# Service
# =============================================================================

class CareerQueryService:
    """Query operations bound to the currently loaded career set (custom careers included)."""

    def __init__(self, data_service: CareerDataService, rng: Optional[random.Random] = None):
        self.data = data_service
        self.rng = rng or random.Random()

    @property
    def careers(self) -> List[GameCareer]:
        return self.data.get_careers()

    def filter(self, criteria: Criteria = None) -> List[GameCareer]:
        return filter_careers(self.careers, criteria)

    def search(self, query: str, fields: Optional[Sequence[str]] = None, limit: Optional[int] = None,
               case_sensitive: bool = False) -> List[GameCareer]:
        return search_careers(self.careers, query, fields, limit, case_sensitive)

    def sort(self, field: str = "salary", order: str = "asc", criteria: Criteria = None) -> List[GameCareer]:
        return sort_careers(self.filter(criteria), field, order)

    def top(self, count: int = 10, field: str = "salary", criteria: Criteria = None) -> List[GameCareer]:
        return top_careers(self.careers, count, field, criteria)

    def bottom(self, count: int = 10, field: str = "salary", criteria: Criteria = None) -> List[GameCareer]:
        return bottom_careers(self.careers, count, field, criteria)

    def by_salary_range(self, salary_min: int, salary_max: int) -> List[GameCareer]:
        return get_by_salary_range(self.careers, salary_min, salary_max)

    def by_cluster(self, cluster: str) -> List[GameCareer]:
        return self.filter(CareerFilter(cluster=cluster))

    def by_tier(self, tier: str) -> List[GameCareer]:
        return self.filter(CareerFilter(tier=tier))

    def by_education(self, education_level: int) -> List[GameCareer]:
        return self.filter(CareerFilter(education_level=education_level))

    def by_ids(self, ids: Iterable[int]) -> List[GameCareer]:
        return self.data.get_by_ids(ids)

    def random(self, count: int = 1, criteria: Criteria = None) -> List[GameCareer]:
        return random_careers(self.careers, count, criteria, self.rng)

    def similar(self, career_id: int, count: int = 5) -> List[GameCareer]:
        career = self.data.get_by_id(career_id)
        if career is None:
            return []
        return similar_careers(self.careers, career, count)
