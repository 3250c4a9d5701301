"""
Matchup Generator
app/services/matchup_generator.py

Selects pairs of careers for a round. A pair is only returned when it is
balanced: the salary gap is large enough to be answerable, the ratio is
small enough to not be obvious, and the two careers are distinct
occupations. Draws are bounded by MatchupRules.max_attempts.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Set

from app.exceptions import InsufficientPoolError, MatchupUnsatisfiableError
from app.models.career import GameCareer
from app.models.matchup import CareerFilter, Matchup, MatchupRules
from app.services.career_query import CareerQueryService, Criteria, as_filter

logger = logging.getLogger(__name__)


# =============================================================================
# Presets and difficulty
# =============================================================================

FILTER_PRESETS: Dict[str, Dict[str, Any]] = {
    "healthcare": {"label": "Healthcare", "criteria": {"cluster": "healthcare"}},
    "technology": {"label": "Technology", "criteria": {"cluster": "technology"}},
    "engineering": {"label": "Engineering", "criteria": {"cluster": "engineering"}},
    "education": {"label": "Education", "criteria": {"cluster": "education"}},
    "business": {"label": "Business", "criteria": {"cluster": "business"}},
    "trades": {"label": "Skilled Trades", "criteria": {"cluster": "trades"}},
    "highSalary": {"label": "High Salary ($100k+)", "criteria": {"salary_min": 100000}},
    "entryLevel": {"label": "Entry Level", "criteria": {"salary_max": 40000}},
    "fastGrowth": {"label": "Fast Growth (10%+)", "criteria": {"growth_min": 10}},
}

RECOMMENDED_CONFIGS: Dict[str, Dict[str, Any]] = {
    "easy": {"tier": "entry"},
    "medium": {},
    "hard": {"salary_min": 50000, "salary_max": 150000},
}
DEFAULT_DIFFICULTY = "medium"


def get_filter_preset(name: str) -> CareerFilter:
    """CareerFilter for a named preset. Raises KeyError for unknown names."""
    return CareerFilter.model_validate(FILTER_PRESETS[name]["criteria"])


def get_recommended_config(difficulty: Optional[str] = DEFAULT_DIFFICULTY) -> Dict[str, Any]:
    """Filter criteria for a difficulty level; unknown levels fall back to medium."""
    return dict(RECOMMENDED_CONFIGS.get(difficulty or DEFAULT_DIFFICULTY, RECOMMENDED_CONFIGS[DEFAULT_DIFFICULTY]))


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check raw matchup criteria without raising.
    Accepts snake_case or camelCase keys; returns {"valid": bool, "errors": [...]}.
    """
    errors = []

    salary_min = config.get("salary_min", config.get("salaryMin"))
    salary_max = config.get("salary_max", config.get("salaryMax"))
    if salary_min is not None and salary_max is not None and salary_min > salary_max:
        errors.append("salaryMin cannot be greater than salaryMax")

    growth = config.get("growth_min", config.get("growthMin", config.get("minGrowth")))
    if growth is not None and (growth < -100 or growth > 100):
        errors.append("minGrowth must be between -100 and 100")

    return {"valid": not errors, "errors": errors}


# =============================================================================
# Generator
# =============================================================================

class MatchupGenerator:
    """Builds balanced matchups from the query layer's career pool."""

    def __init__(
        self,
        query_service: CareerQueryService,
        rules: Optional[MatchupRules] = None,
        rng: Optional[random.Random] = None,
    ):
        self.query = query_service
        self.rules = rules or MatchupRules()
        self.rng = rng or query_service.rng

    def is_balanced(self, career_a: GameCareer, career_b: GameCareer) -> bool:
        rules = self.rules
        if career_a.id == career_b.id:
            return False

        if abs(career_a.salary - career_b.salary) < rules.min_salary_diff:
            return False

        higher = max(career_a.salary, career_b.salary)
        lower = min(career_a.salary, career_b.salary)
        if lower <= 0 or higher / lower > rules.max_salary_ratio:
            return False

        if rules.avoid_same_subfield and career_a.soc == career_b.soc:
            return False
        return True

    def _draw(self, pool: List[GameCareer]) -> Matchup:
        if len(pool) < 2:
            raise InsufficientPoolError(len(pool))

        for attempt in range(1, self.rules.max_attempts + 1):
            career_a, career_b = self.rng.sample(pool, 2)
            if self.is_balanced(career_a, career_b):
                logger.debug(f"Matchup {career_a.id} vs {career_b.id} after {attempt} attempt(s)")
                return Matchup(career_a=career_a, career_b=career_b, attempts=attempt)

        raise MatchupUnsatisfiableError(self.rules.max_attempts, len(pool))

    def generate(self, criteria: Criteria = None) -> Matchup:
        """
        One balanced matchup from the careers matching criteria.

        Raises:
            InsufficientPoolError: fewer than two careers match
            MatchupUnsatisfiableError: no balanced pair within max_attempts
        """
        return self._draw(self.query.filter(as_filter(criteria)))

    def generate_multiple(self, count: int, criteria: Criteria = None) -> List[Matchup]:
        """
        Up to count matchups with no career appearing twice.
        Stops early, returning fewer matchups, once the unused pool runs dry.
        """
        pool = self.query.filter(as_filter(criteria))
        if len(pool) < 2:
            raise InsufficientPoolError(len(pool))

        matchups: List[Matchup] = []
        used: Set[int] = set()
        for _ in range(max(count, 0)):
            available = [c for c in pool if c.id not in used]
            try:
                matchup = self._draw(available)
            except (InsufficientPoolError, MatchupUnsatisfiableError) as e:
                logger.info(f"Stopping after {len(matchups)} of {count} matchups: {e}")
                break
            matchups.append(matchup)
            used.update((matchup.career_a.id, matchup.career_b.id))
        return matchups

    def generate_from_cluster(self, cluster: str) -> Matchup:
        return self.generate(CareerFilter(cluster=cluster))

    def generate_from_salary_range(self, salary_min: int, salary_max: int) -> Matchup:
        return self.generate(CareerFilter(salary_min=salary_min, salary_max=salary_max))

    def generate_from_tier(self, tier: str) -> Matchup:
        return self.generate(CareerFilter(tier=tier))

    def generate_high_growth(self, min_growth: float = 10) -> Matchup:
        return self.generate(CareerFilter(growth_min=min_growth))

    def generate_by_education(self, education: str) -> Matchup:
        return self.generate(CareerFilter(education=education))
