from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.config import settings
from app.models.career import GameCareer, SalaryTier


class CareerFilter(BaseModel):
    """
    Criteria for narrowing the career pool.
    Every field is optional; an unset field places no constraint.

    - cluster: exact cluster key (e.g. "healthcare")
    - salary_min / salary_max: inclusive annual salary bounds
    - education: case-insensitive substring of the education text
    - growth_min: minimum growth rate in percent
    - tier: salary tier key
    - education_level: ordinal level 0-6
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
        use_enum_values=True,
    )

    cluster: Optional[str] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    education: Optional[str] = None
    growth_min: Optional[float] = Field(
        None,
        ge=-100,
        le=100,
        validation_alias=AliasChoices("growth_min", "growthMin", "minGrowth"),
    )
    tier: Optional[SalaryTier] = None
    education_level: Optional[int] = Field(None, ge=0, le=6)

    @model_validator(mode="after")
    def check_salary_bounds(self):
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError("salary_min cannot be greater than salary_max")
        return self


class MatchupRules(BaseModel):
    """Fairness policy for a matchup."""
    model_config = ConfigDict(frozen=True)

    min_salary_diff: int = Field(default_factory=lambda: settings.MATCHUP_MIN_SALARY_DIFF, ge=0)
    max_salary_ratio: float = Field(default_factory=lambda: settings.MATCHUP_MAX_SALARY_RATIO, ge=1)
    avoid_same_subfield: bool = Field(default_factory=lambda: settings.MATCHUP_AVOID_SAME_SUBFIELD)
    max_attempts: int = Field(default_factory=lambda: settings.MATCHUP_MAX_ATTEMPTS, ge=1)


class Matchup(BaseModel):
    """One round's pair of careers. Never persisted."""
    model_config = ConfigDict(frozen=True)

    career_a: GameCareer
    career_b: GameCareer
    attempts: int = Field(1, ge=1)

    @property
    def salary_diff(self) -> int:
        return abs(self.career_a.salary - self.career_b.salary)

    @property
    def higher_paid(self) -> GameCareer:
        return self.career_a if self.career_a.salary >= self.career_b.salary else self.career_b
