"""
Career Extraction - Step 1 of the career build
app/pipelines/extractor.py

Turns handbook <occupation> nodes into flat Career records.
Records without a SOC code, a title or a positive salary are skipped;
a node that fails to parse is counted and excluded.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from bs4 import Tag

from app.exceptions import RecordExtractionError
from app.models.career import Career
from app.pipelines.pipeline_state import CareerPipelineState
from app.pipelines.xml_parser import (
    categorize_demand,
    extract_growth_rate,
    format_demand,
    load_occupations,
    parse_number,
    safe_extract,
    safe_extract_all,
    strip_html,
)

logger = logging.getLogger(__name__)


def extract_career(node: Tag, career_id: int) -> Optional[Career]:
    """
    Build a Career from one occupation node.

    Returns None when the node lacks a SOC code, a title or a salary.
    Missing optional fields fall back to their documented defaults.
    """
    soc = safe_extract(node, "soc_coverage.soc_code")
    title = safe_extract(node, "title")
    salary = int(round(parse_number(safe_extract(node, "quick_facts.qf_median_pay_annual.value"))))

    if not soc or not title or salary <= 0:
        return None

    occupation_code = safe_extract(node, "occupation_code")
    outlook_text = safe_extract(node, "quick_facts.qf_employment_outlook.value")
    growth_rate = extract_growth_rate(outlook_text)

    return Career(
        id=career_id,
        soc=soc,
        title=title,
        title_short=safe_extract(node, "occupation_name_short_singular", title),
        description=strip_html(safe_extract(node, "description")),
        salary=salary,
        salary_range=safe_extract(node, "quick_facts.qf_median_pay_annual.range"),
        salary_hourly=parse_number(safe_extract(node, "quick_facts.qf_median_pay_hourly.value")),
        education=safe_extract(node, "quick_facts.qf_entry_level_education.value", "Varies"),
        work_experience=safe_extract(node, "quick_facts.qf_work_experience.value", "None"),
        on_the_job_training=safe_extract(node, "quick_facts.qf_on_the_job_training.value", "None"),
        job_count=int(parse_number(safe_extract(node, "quick_facts.qf_number_of_jobs.value"))),
        growth_rate=growth_rate,
        growth_category=categorize_demand(growth_rate),
        demand=format_demand(growth_rate),
        openings_per_year=int(parse_number(safe_extract(node, "quick_facts.qf_job_openings_per_year.value"))),
        work_environment=strip_html(safe_extract(node, "summary_work_environment")),
        what_they_do=strip_html(safe_extract(node, "what_they_do")),
        how_to_become_one=strip_html(safe_extract(node, "how_to_become_one")),
        similar_occupations=safe_extract_all(
            node, "similar_occupations.similar_occupation.occupation_name"
        ),
        occupation_code=occupation_code,
        video_link=safe_extract(node, "video_link"),
        source=f"BLS OOH {soc or occupation_code}",
        last_updated=datetime.now(timezone.utc),
    )


def step1_extract_careers(state: CareerPipelineState) -> CareerPipelineState:
    """Parse the handbook and keep every occupation that can be played."""
    logger.info("-" * 40)
    logger.info("📄 [1/7] EXTRACTING CAREERS")

    nodes = load_occupations(state.handbook_path)
    logger.info(f"   Occupations in handbook: {len(nodes)}")

    careers = []
    for index, node in enumerate(nodes, start=1):
        state.summary["records_seen"] += 1
        try:
            career = extract_career(node, career_id=len(careers) + 1)
        except Exception as e:
            error = RecordExtractionError(index, str(e))
            logger.warning(f"   ⚠️ {error}")
            state.add_error("extract", index, str(error))
            state.summary["extraction_errors"] += 1
            continue

        if career is None:
            state.summary["records_skipped"] += 1
            continue

        careers.append(career)

    state.careers = careers
    state.summary["careers_extracted"] = len(careers)

    logger.info(f"   ✅ Extracted: {len(careers)}")
    logger.info(f"   Skipped (no SOC/title/salary): {state.summary['records_skipped']}")
    if state.summary["extraction_errors"]:
        logger.info(f"   Errors: {state.summary['extraction_errors']}")
    return state
