#!/usr/bin/env python
"""
Report how much of the built career dataset is real data vs. fallbacks.

Usage:
    python -m app.Scripts.report_coverage
    python -m app.Scripts.report_coverage --input data/processed/careers-full.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import structlog

from app.config import settings

logger = structlog.get_logger()


def load_dataset(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_coverage_report(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Counts and shares for a full (camelCase) career dataset."""
    if not records:
        return {
            "total": 0,
            "clusters": {},
            "tiers": {},
            "estimated_salary_share": 0.0,
            "synthetic_skills_share": 0.0,
            "duplicate_socs": {},
        }

    df = pd.json_normalize(records)
    total = len(df)

    def column(name: str, default: Any) -> pd.Series:
        return df[name] if name in df.columns else pd.Series([default] * total)

    clusters = column("metadata.cluster", "unclassified").fillna("unclassified")
    tiers = column("metadata.salaryTier", "unclassified").fillna("unclassified")
    estimated = column("salaryEstimated", False).fillna(False).astype(bool)
    synthetic = column("skillsSource", None) == "synthetic"

    soc_counts = column("soc", "").value_counts()
    duplicates = soc_counts[soc_counts > 1]

    return {
        "total": total,
        "clusters": {k: int(v) for k, v in clusters.value_counts().sort_index().items()},
        "tiers": {k: int(v) for k, v in tiers.value_counts().sort_index().items()},
        "estimated_salary_share": round(float(estimated.mean()), 3),
        "synthetic_skills_share": round(float(synthetic.mean()), 3),
        "duplicate_socs": {k: int(v) for k, v in duplicates.items()},
    }


def main(path: str) -> Dict[str, Any]:
    """Load the dataset and log the coverage report."""
    if not Path(path).exists():
        logger.error("Dataset not found", path=path, hint="run python -m app.pipelines.runner first")
        return {}

    report = build_coverage_report(load_dataset(path))

    logger.info("Dataset loaded", path=path, careers=report["total"])
    for cluster, count in report["clusters"].items():
        logger.info("Cluster coverage", cluster=cluster, careers=count)
    for tier, count in report["tiers"].items():
        logger.info("Tier coverage", tier=tier, careers=count)
    for soc, count in report["duplicate_socs"].items():
        logger.warning("Duplicate SOC code", soc=soc, count=count)

    logger.info(
        "Coverage complete",
        estimated_salary_share=report["estimated_salary_share"],
        synthetic_skills_share=report["synthetic_skills_share"],
        duplicate_socs=len(report["duplicate_socs"]),
    )
    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Report data coverage of the full career dataset"
    )
    parser.add_argument(
        "--input",
        default=settings.FULL_DATASET_PATH,
        help="Full dataset JSON (default: %(default)s)"
    )
    args = parser.parse_args()

    report = main(args.input)
    sys.exit(0 if report else 1)
