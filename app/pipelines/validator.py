"""
Career Validation - Step 3 (advisory) and Step 7 (publish check)
app/pipelines/validator.py

Two rule sets are applied to the same careers:
- validate_career / validate_all: advisory. Problems are reported in
  data/processed/validation-report.json and the build carries on.
- check_publishable: strict. Any failure stops the public dataset from
  being written.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from typing import Any, Dict, List, Sequence, Union

from pydantic import BaseModel, Field

from app.config import settings
from app.exceptions import PublishValidationError
from app.models.career import Career, PublicCareer
from app.pipelines.pipeline_state import CareerPipelineState

logger = logging.getLogger(__name__)

SOC_PATTERN = re.compile(r"^[0-9]{2}-[0-9]{4}$")
REQUIRED_FIELDS = ("id", "soc", "title", "description", "salary", "education", "demand")
DESCRIPTION_MIN_LENGTH = 10
TITLE_MIN_LENGTH = 1


class ValidationResult(BaseModel):
    id: int
    soc: str = ""
    title: str = ""
    valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_career(career: Career) -> ValidationResult:
    """Advisory checks for one career."""
    errors: List[str] = []
    warnings: List[str] = []

    for name in REQUIRED_FIELDS:
        if _is_missing(getattr(career, name, None)):
            errors.append(f"Missing required field: {name}")

    if career.soc and not SOC_PATTERN.match(career.soc):
        warnings.append(f"Invalid SOC format: {career.soc} (expected XX-XXXX)")

    if career.title and len(career.title) < TITLE_MIN_LENGTH:
        errors.append("Title is too short")

    if career.description and len(career.description) < DESCRIPTION_MIN_LENGTH:
        errors.append(f"Description is too short ({len(career.description)} chars)")

    if career.salary <= 0:
        errors.append(f"Invalid salary: {career.salary}")
    elif career.salary > settings.SALARY_SANITY_CEILING:
        warnings.append(f"Unusually high salary: ${career.salary:,}")

    if _is_missing(career.work_environment):
        warnings.append("Missing work_environment")

    if career.growth_rate is None:
        warnings.append("Missing growth rate")

    return ValidationResult(
        id=career.id,
        soc=career.soc,
        title=career.title,
        valid=not errors,
        errors=errors,
        warnings=warnings,
    )


def find_duplicate_socs(careers: Sequence[Any]) -> List[Dict[str, Any]]:
    """
    Group careers by SOC code and report every group with more than one member.
    Accepts Career models or plain dicts with id/soc/title keys.
    """
    groups: Dict[str, List[Any]] = defaultdict(list)
    for career in careers:
        soc = _field(career, "soc")
        if soc:
            groups[soc].append(career)

    return [
        {
            "soc": soc,
            "count": len(members),
            "careers": [{"id": _field(c, "id"), "title": _field(c, "title")} for c in members],
        }
        for soc, members in groups.items()
        if len(members) > 1
    ]


def _field(career: Any, name: str) -> Any:
    if isinstance(career, dict):
        return career.get(name)
    return getattr(career, name, None)


def salary_stats(careers: Sequence[Career]) -> Dict[str, int]:
    salaries = [c.salary for c in careers if c.salary > 0]
    if not salaries:
        return {"min": 0, "max": 0, "avg": 0}
    return {
        "min": min(salaries),
        "max": max(salaries),
        "avg": int(round(sum(salaries) / len(salaries))),
    }


def validate_all(careers: Sequence[Career]) -> Dict[str, Any]:
    """Run advisory validation over every career and build the report."""
    results = [validate_career(c) for c in careers]
    duplicates = find_duplicate_socs(careers)

    return {
        "summary": {
            "total_careers": len(results),
            "valid_careers": sum(1 for r in results if r.valid),
            "invalid_careers": sum(1 for r in results if not r.valid),
            "careers_with_warnings": sum(1 for r in results if r.warnings),
            "total_errors": sum(len(r.errors) for r in results),
            "total_warnings": sum(len(r.warnings) for r in results),
            "duplicate_socs": len(duplicates),
        },
        "results": [r.model_dump() for r in results],
        "duplicates": duplicates,
        "salary_stats": salary_stats(careers),
    }


def publish_errors(career: Union[Career, PublicCareer]) -> List[str]:
    """Strict checks every published career must pass, on the full record or its public view."""
    errors = []
    if not career.soc or not SOC_PATTERN.match(career.soc):
        errors.append(f"Invalid SOC code: {career.soc}")
    if not career.title:
        errors.append("Missing title")
    if len(career.description) < DESCRIPTION_MIN_LENGTH:
        errors.append("Description missing or too short")
    if not career.education:
        errors.append("Missing education")
    if not career.demand:
        errors.append("Missing demand")
    if career.salary <= 0:
        errors.append(f"Invalid salary: {career.salary}")
    if not 3 <= len(career.skills) <= 5:
        errors.append(f"Skills must have 3-5 items (has {len(career.skills)})")
    if not career.source:
        errors.append("Missing source")
    return errors


def check_publishable(careers: Sequence[Union[Career, PublicCareer]]) -> None:
    """Raise PublishValidationError listing every career that fails the strict checks."""
    failures = []
    for career in careers:
        errors = publish_errors(career)
        if errors:
            failures.append({"id": career.id, "soc": career.soc, "title": career.title, "errors": errors})

    if failures:
        raise PublishValidationError(failures)


def step3_validate_careers(state: CareerPipelineState) -> CareerPipelineState:
    """Advisory validation; never stops the build."""
    logger.info("-" * 40)
    logger.info("🔍 [3/7] VALIDATING CAREERS")

    report = validate_all(state.careers)
    state.validation_report = report
    state.summary["invalid_careers"] = report["summary"]["invalid_careers"]
    state.summary["duplicate_socs"] = report["summary"]["duplicate_socs"]

    summary = report["summary"]
    logger.info(f"   ✓ Valid careers: {summary['valid_careers']}")
    logger.info(f"   ⚠️ Careers with warnings: {summary['careers_with_warnings']}")
    logger.info(f"   ❌ Invalid careers: {summary['invalid_careers']}")

    for dup in report["duplicates"]:
        titles = ", ".join(f"#{c['id']} {c['title']}" for c in dup["careers"])
        logger.info(f"   Duplicate SOC {dup['soc']} ({dup['count']}): {titles}")

    for result in report["results"]:
        for error in result["errors"]:
            state.add_error("validate", result["id"], error)
    return state
