from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SalaryTier(str, Enum):
    entry = "entry"
    mid = "mid"
    upper_mid = "upper-mid"
    high = "high"


class SkillsSource(str, Enum):
    onet = "onet"           # Skills table
    synthetic = "synthetic" # Generic fallback list


class CareerMetadata(BaseModel):
    """
    Derived classification for a career.
    Always recomputed from the career's own fields, never hand-edited.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
    )

    salary_tier: SalaryTier
    cluster: str = "other"
    education_level: int = Field(0, ge=0, le=6)
    keywords: List[str] = Field(default_factory=list)
    search_text: str = ""


class Career(BaseModel):
    """
    Canonical enriched career record.
    Serialized with camelCase keys in the full dataset.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
    )

    id: int = Field(..., ge=1)
    soc: str = ""
    title: str = ""
    title_short: str = ""
    description: str = ""

    salary: int = Field(0, ge=0)
    salary_range: str = ""
    salary_hourly: float = Field(0, ge=0)
    salary_estimated: bool = False

    education: str = ""
    work_experience: str = "None"
    on_the_job_training: str = "None"

    demand: str = ""
    growth_rate: Optional[int] = None
    growth_category: str = "Unknown"
    openings_per_year: int = Field(0, ge=0)
    job_count: int = Field(0, ge=0)

    work_environment: str = ""
    what_they_do: str = ""
    how_to_become_one: str = ""
    similar_occupations: List[str] = Field(default_factory=list)
    occupation_code: str = ""
    video_link: str = ""

    skills: List[str] = Field(default_factory=list)
    skills_source: Optional[SkillsSource] = None

    source: str = ""
    last_updated: Optional[datetime] = None

    metadata: Optional[CareerMetadata] = None

    def to_json(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class GameCareerMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    salary_tier: str
    cluster: str = "other"
    education_level: int = Field(0, ge=0, le=6)
    search_text: str = ""


class GameCareer(BaseModel):
    """Runtime view read by the game and the query layer (snake_case keys)."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    soc: str = ""
    title: str
    title_short: str = ""
    description: str = ""
    salary: int = Field(0, ge=0)
    salary_range: str = ""
    salary_hourly: float = 0
    education: str = ""
    work_experience: str = "None"
    demand: str = ""
    growth_rate: Optional[int] = None
    growth_category: str = "Unknown"
    job_count: int = 0
    work_environment: str = ""
    metadata: Optional[GameCareerMetadata] = None
    source: str = ""


class PublicCareer(BaseModel):
    """Minimal view shipped to the browser (camelCase keys)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    soc: str
    title: str
    description: str
    education: str
    demand: str
    salary: int
    work_environment: str
    skills: List[str]
    source: str
