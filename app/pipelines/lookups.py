"""
Lookup Tables - wage, outlook and skills data keyed by SOC code
app/pipelines/lookups.py

    oes_wages.csv     soc,title,median_annual_wage
    ep_outlook.csv    soc,title,growth_rate,openings_per_year
    onet_skills.json  {"29-1141": ["Active Listening", ...], ...}

A missing table is logged and treated as empty so every career falls
back to its default.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class LookupTables:
    wages: Dict[str, int] = field(default_factory=dict)
    outlook: Dict[str, Dict[str, int]] = field(default_factory=dict)
    skills: Dict[str, List[str]] = field(default_factory=dict)

    def wage_for(self, soc: str) -> Tuple[Optional[int], bool]:
        """
        Return (salary, estimated) for a SOC code.

        Exact hits are not estimated. Otherwise the average of codes
        sharing the same 5-character prefix (e.g. "29-11") is used.
        (None, True) when nothing related exists.
        """
        if soc in self.wages:
            return self.wages[soc], False

        prefix = soc[:5]
        related = [wage for code, wage in self.wages.items() if code.startswith(prefix)]
        if related:
            return int(round(sum(related) / len(related))), True
        return None, True

    def outlook_for(self, soc: str) -> Optional[Dict[str, int]]:
        return self.outlook.get(soc)

    def skills_for(self, soc: str) -> List[str]:
        return list(self.skills.get(soc, []))


def load_wage_table(path: str) -> Dict[str, int]:
    path = Path(path)
    if not path.exists():
        logger.warning(f"   ⚠️ Wage table not found: {path} (all salaries will be estimated)")
        return {}

    df = pd.read_csv(path, dtype={"soc": str})
    df = df.dropna(subset=["soc", "median_annual_wage"])
    return {
        str(row.soc).strip(): int(row.median_annual_wage)
        for row in df.itertuples(index=False)
    }


def load_outlook_table(path: str) -> Dict[str, Dict[str, int]]:
    path = Path(path)
    if not path.exists():
        logger.warning(f"   ⚠️ Outlook table not found: {path} (default growth will be used)")
        return {}

    df = pd.read_csv(path, dtype={"soc": str})
    df = df.dropna(subset=["soc", "growth_rate"])
    df["openings_per_year"] = df["openings_per_year"].fillna(0)
    return {
        str(row.soc).strip(): {
            "growth_rate": int(row.growth_rate),
            "openings_per_year": int(row.openings_per_year),
        }
        for row in df.itertuples(index=False)
    }


def load_skills_table(path: str) -> Dict[str, List[str]]:
    path = Path(path)
    if not path.exists():
        logger.warning(f"   ⚠️ Skills table not found: {path} (synthetic skills will be used)")
        return {}

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return {
        str(soc).strip(): [str(s).strip() for s in skills if str(s).strip()]
        for soc, skills in data.items()
    }


def load_lookup_tables(wage_path: str, outlook_path: str, skills_path: str) -> LookupTables:
    tables = LookupTables(
        wages=load_wage_table(wage_path),
        outlook=load_outlook_table(outlook_path),
        skills=load_skills_table(skills_path),
    )
    logger.info(
        f"   Lookup rows: {len(tables.wages)} wages, "
        f"{len(tables.outlook)} outlooks, {len(tables.skills)} skill lists"
    )
    return tables
