"""
Career Enrichment - Step 2 of the career build
app/pipelines/enrichment.py

Joins wage, outlook and skills tables onto each career, then fills any
field that is still missing so every record satisfies the data model.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Tuple

from app.config import settings
from app.models.career import Career, SkillsSource
from app.pipelines.keywords import SYNTHETIC_SKILLS
from app.pipelines.lookups import LookupTables, load_lookup_tables
from app.pipelines.pipeline_state import CareerPipelineState
from app.pipelines.xml_parser import categorize_demand, format_demand

logger = logging.getLogger(__name__)

MAX_SKILLS = 5
MIN_SKILLS = 3

FALLBACK_WORK_ENVIRONMENT = "Various settings including offices, facilities, and remote locations"
FALLBACK_EDUCATION = "Varies by position"
FALLBACK_DEMAND = "Moderate – 3% (2024–34)"
FALLBACK_SKILLS = ("Communication", "Problem-solving", "Teamwork")


def join_lookups(career: Career, tables: LookupTables) -> Career:
    """Return a new Career with salary, growth and skills taken from the lookup tables."""
    updates = {}

    # Salary: table -> same-prefix average -> handbook figure -> default
    salary, estimated = tables.wage_for(career.soc)
    if salary is not None:
        updates["salary"] = salary
        updates["salary_estimated"] = estimated
    elif career.salary > 0:
        updates["salary_estimated"] = False
    else:
        updates["salary"] = settings.DEFAULT_SALARY
        updates["salary_estimated"] = True

    # Growth: table -> handbook figure -> default
    outlook = tables.outlook_for(career.soc)
    if outlook:
        growth_rate = outlook["growth_rate"]
        updates["openings_per_year"] = outlook["openings_per_year"]
    elif career.growth_rate is not None:
        growth_rate = career.growth_rate
    else:
        growth_rate = settings.DEFAULT_GROWTH_RATE
        updates["openings_per_year"] = career.openings_per_year or settings.DEFAULT_OPENINGS_PER_YEAR

    updates["growth_rate"] = growth_rate
    updates["growth_category"] = categorize_demand(growth_rate)
    updates["demand"] = format_demand(growth_rate)

    # Skills: table -> synthetic list
    skills = tables.skills_for(career.soc)
    if skills:
        updates["skills"] = skills[:MAX_SKILLS]
        updates["skills_source"] = SkillsSource.onet.value
    else:
        updates["skills"] = list(SYNTHETIC_SKILLS)
        updates["skills_source"] = SkillsSource.synthetic.value

    return career.model_copy(update=updates)


def apply_fallbacks(career: Career) -> Tuple[Career, List[str]]:
    """
    Fill fields that are still missing or too short.

    Returns the new Career and the names of the fields that were filled.
    """
    updates = {}

    if len(career.description) < 10:
        updates["description"] = (
            f"Professionals in {career.title.lower()} perform specialized tasks "
            f"and contribute to their industry."
        )
    if len(career.work_environment) < 5:
        updates["work_environment"] = FALLBACK_WORK_ENVIRONMENT
    if len(career.education) < 3:
        updates["education"] = FALLBACK_EDUCATION
    if len(career.demand) < 3:
        updates["demand"] = FALLBACK_DEMAND
    if career.salary <= 0:
        updates["salary"] = settings.DEFAULT_SALARY
        updates["salary_estimated"] = True
    if len(career.skills) < MIN_SKILLS:
        updates["skills"] = list(FALLBACK_SKILLS)
        updates["skills_source"] = SkillsSource.synthetic.value
    elif len(career.skills) > MAX_SKILLS:
        updates["skills"] = career.skills[:MAX_SKILLS]
    if not career.title_short:
        updates["title_short"] = career.title
    if not career.source:
        updates["source"] = f"BLS OOH {career.soc}"

    filled = sorted(updates)
    updates["last_updated"] = datetime.now(timezone.utc)
    return career.model_copy(update=updates), filled


def enrich_career(career: Career, tables: LookupTables) -> Tuple[Career, List[str]]:
    return apply_fallbacks(join_lookups(career, tables))


def step2_enrich_careers(state: CareerPipelineState) -> CareerPipelineState:
    """Join lookup tables and apply fallbacks to every career."""
    logger.info("-" * 40)
    logger.info("💰 [2/7] ENRICHING CAREERS")

    tables = load_lookup_tables(
        state.wage_table_path,
        state.outlook_table_path,
        state.skills_table_path,
    )

    enriched = []
    for career in state.careers:
        career, filled = enrich_career(career, tables)
        if filled:
            state.summary["fallbacks_applied"] += 1
            logger.debug(f"   Career {career.id} fallbacks: {', '.join(filled)}")
        enriched.append(career)

    state.careers = enriched

    exact = sum(1 for c in enriched if not c.salary_estimated)
    logger.info(f"   Salaries from wage table or handbook: {exact}")
    logger.info(f"   Salaries estimated: {len(enriched) - exact}")
    logger.info(f"   Synthetic skills: {sum(1 for c in enriched if c.skills_source == 'synthetic')}")
    logger.info(f"   Careers with fallbacks: {state.summary['fallbacks_applied']}")
    return state
