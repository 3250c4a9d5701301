"""
Career Pipeline State
app/pipelines/pipeline_state.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.config import settings
from app.models.career import Career, GameCareer, PublicCareer


@dataclass
class CareerPipelineState:
    """State container passed from step to step of the career build."""

    # Inputs
    handbook_path: str = field(default_factory=lambda: settings.HANDBOOK_XML_PATH)
    wage_table_path: str = field(default_factory=lambda: settings.WAGE_TABLE_PATH)
    outlook_table_path: str = field(default_factory=lambda: settings.OUTLOOK_TABLE_PATH)
    skills_table_path: str = field(default_factory=lambda: settings.SKILLS_TABLE_PATH)

    # Careers as they move through the stages
    careers: List[Career] = field(default_factory=list)

    # Stage outputs
    validation_report: Optional[Dict[str, Any]] = None
    index: Optional[Dict[str, Any]] = None
    game_careers: List[GameCareer] = field(default_factory=list)
    public_careers: List[PublicCareer] = field(default_factory=list)

    # Files written by the run (artifact name -> path)
    artifacts: Dict[str, str] = field(default_factory=dict)

    # Summary tracking
    summary: Dict[str, Any] = field(default_factory=lambda: {
        "records_seen": 0,
        "careers_extracted": 0,
        "records_skipped": 0,
        "extraction_errors": 0,
        "salaries_estimated": 0,
        "synthetic_skills": 0,
        "fallbacks_applied": 0,
        "invalid_careers": 0,
        "duplicate_socs": 0,
        "published": False,
        "errors": [],
        "started_at": None,
        "completed_at": None,
    })

    def add_error(self, step: str, record_id: Any, error: str) -> None:
        """Add an error to the summary."""
        self.summary["errors"].append({
            "step": step,
            "record_id": record_id,
            "error": error,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def mark_started(self) -> None:
        """Mark pipeline as started."""
        self.summary["started_at"] = datetime.now(timezone.utc).isoformat()

    def mark_completed(self) -> None:
        """Mark pipeline as completed."""
        self.summary["completed_at"] = datetime.now(timezone.utc).isoformat()
        self.summary["salaries_estimated"] = sum(1 for c in self.careers if c.salary_estimated)
        self.summary["synthetic_skills"] = sum(
            1 for c in self.careers if c.skills_source == "synthetic"
        )
