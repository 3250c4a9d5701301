"""
API Request/Response Models
app/models/api.py

Pydantic models for the scrape, save-record and game endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.career import GameCareer


class ScrapeCareerRequest(BaseModel):
    url: Optional[str] = None


class ScrapedCareer(BaseModel):
    """Career fields read from a single handbook page."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    description: str = ""
    education: str = ""
    salary: int = 0
    demand: str = ""
    work_environment: str = ""
    skills: List[str] = Field(default_factory=list)
    source: str = ""


class SaveRecordRequest(BaseModel):
    name: Optional[str] = None
    block: Optional[str] = None
    correct: Optional[int] = 0
    round: Optional[int] = 1
    streak: Optional[int] = 0
    timestamp: Optional[str] = None


class StudentRecord(BaseModel):
    name: str
    block: str
    correct: int = 0
    round: int = 1
    streak: int = 0
    timestamp: str


class SaveRecordResponse(BaseModel):
    success: bool = True
    message: str = "Record saved successfully"
    record: StudentRecord


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str = "Career Skills API is running"


class CareerListResponse(BaseModel):
    total: int
    careers: List[GameCareer] = Field(default_factory=list)


class MatchupResponse(BaseModel):
    career_a: GameCareer
    career_b: GameCareer
    salary_diff: int
    attempts: int


class MatchupBatchResponse(BaseModel):
    requested: int
    generated: int
    difficulty: Optional[str] = None
    matchups: List[MatchupResponse] = Field(default_factory=list)
