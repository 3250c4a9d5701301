"""
Career Pipeline Runner
app/pipelines/runner.py

Builds the career datasets from the handbook XML and lookup tables:

    1 extract    handbook XML          -> build/01_extracted.json
    2 enrich     01_extracted.json     -> build/02_enriched.json
    3 validate   02_enriched.json      -> data/processed/validation-report.json
    4 classify   02_enriched.json      -> data/processed/careers-full.json
    5 index      careers-full.json     -> data/game/metadata.json
    6 optimize   careers-full.json     -> data/game/careers-game.json
    7 publish    careers-full.json     -> public/careers.min.json

Run everything, or a subset with --steps; the first step selected reads
the artifact written by the step before it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from dotenv import load_dotenv

from app.config import settings
from app.exceptions import MissingInputError, PublishValidationError
from app.models.career import Career
from app.pipelines.classifier import step4_classify_careers
from app.pipelines.enrichment import step2_enrich_careers
from app.pipelines.extractor import step1_extract_careers
from app.pipelines.indexer import step5_build_index
from app.pipelines.optimizer import step6_optimize_for_game, step7_publish
from app.pipelines.pipeline_state import CareerPipelineState
from app.pipelines.validator import step3_validate_careers
from app.services.artifact_storage import ArtifactStorage

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

STEPS = ("extract", "enrich", "validate", "classify", "index", "optimize", "publish")

STEP_FUNCTIONS: Dict[str, Callable[[CareerPipelineState], CareerPipelineState]] = {
    "extract": step1_extract_careers,
    "enrich": step2_enrich_careers,
    "validate": step3_validate_careers,
    "classify": step4_classify_careers,
    "index": step5_build_index,
    "optimize": step6_optimize_for_game,
    "publish": step7_publish,
}

# Artifact each step reads when it is the first step of a run
STEP_INPUTS = {
    "enrich": "EXTRACTED_PATH",
    "validate": "ENRICHED_PATH",
    "classify": "ENRICHED_PATH",
    "index": "FULL_DATASET_PATH",
    "optimize": "FULL_DATASET_PATH",
    "publish": "FULL_DATASET_PATH",
}


def _ordered_steps(steps: Optional[Sequence[str]]) -> List[str]:
    if not steps:
        return list(STEPS)
    unknown = [s for s in steps if s not in STEP_FUNCTIONS]
    if unknown:
        raise ValueError(f"Unknown pipeline step(s): {', '.join(unknown)}")
    return [s for s in STEPS if s in steps]


def _load_step_input(state: CareerPipelineState, step: str, storage: ArtifactStorage) -> None:
    setting_name = STEP_INPUTS.get(step)
    if setting_name is None:
        return
    path = getattr(settings, setting_name)
    state.careers = storage.load_models(path, Career)
    logger.info(f"   Loaded {len(state.careers)} careers from {storage.resolve(path)}")


def _save_step_output(state: CareerPipelineState, step: str, storage: ArtifactStorage) -> None:
    if step == "extract":
        state.artifacts["extracted"] = storage.save_models(settings.EXTRACTED_PATH, state.careers)
    elif step == "enrich":
        state.artifacts["enriched"] = storage.save_models(settings.ENRICHED_PATH, state.careers)
    elif step == "validate":
        state.artifacts["validation_report"] = storage.save_json(
            settings.VALIDATION_REPORT_PATH,
            {**state.validation_report, "generated_at": datetime.now(timezone.utc).isoformat()},
        )
    elif step == "classify":
        state.artifacts["full"] = storage.save_models(settings.FULL_DATASET_PATH, state.careers)
        state.artifacts["merged_debug"] = storage.save_models(settings.MERGED_DEBUG_PATH, state.careers)
    elif step == "index":
        state.artifacts["index"] = storage.save_json(
            settings.GAME_METADATA_PATH,
            {**state.index, "generated_at": datetime.now(timezone.utc).isoformat()},
        )
    elif step == "optimize":
        state.artifacts["game"] = storage.save_models(settings.GAME_DATASET_PATH, state.game_careers)
    elif step == "publish":
        state.artifacts["public"] = storage.save_models(settings.PUBLIC_DATASET_PATH, state.public_careers)


def run_career_pipeline(
    *,
    steps: Optional[Sequence[str]] = None,
    handbook_path: Optional[str] = None,
    wage_table_path: Optional[str] = None,
    outlook_table_path: Optional[str] = None,
    skills_table_path: Optional[str] = None,
    storage: Optional[ArtifactStorage] = None,
) -> CareerPipelineState:
    """
    Run the selected steps in order.

    Raises:
        MissingInputError: the handbook or a required earlier artifact is missing
        PublishValidationError: the publish step rejected the dataset
    """
    storage = storage or ArtifactStorage()
    selected = _ordered_steps(steps)

    state = CareerPipelineState()
    if handbook_path:
        state.handbook_path = handbook_path
    if wage_table_path:
        state.wage_table_path = wage_table_path
    if outlook_table_path:
        state.outlook_table_path = outlook_table_path
    if skills_table_path:
        state.skills_table_path = skills_table_path

    logger.info("=" * 60)
    logger.info(f"🚀 CAREER PIPELINE: {', '.join(selected)}")
    logger.info("=" * 60)

    state.mark_started()
    _load_step_input(state, selected[0], storage)

    for step in selected:
        state = STEP_FUNCTIONS[step](state)
        _save_step_output(state, step, storage)

    state.mark_completed()
    return state


def _print_summary(state: CareerPipelineState) -> None:
    """Print pipeline execution summary."""
    print("\n" + "=" * 60)
    print("Career Pipeline Complete")
    print("=" * 60)
    print(f"Records in handbook: {state.summary['records_seen']}")
    print(f"Careers extracted: {state.summary['careers_extracted']}")
    print(f"Skipped: {state.summary['records_skipped']}")
    print(f"Extraction errors: {state.summary['extraction_errors']}")
    print(f"Estimated salaries: {state.summary['salaries_estimated']}")
    print(f"Synthetic skills: {state.summary['synthetic_skills']}")
    print(f"Duplicate SOC codes: {state.summary['duplicate_socs']}")
    print(f"Published: {'yes' if state.summary['published'] else 'no'}")

    if state.artifacts:
        print("\nArtifacts:")
        for name, path in state.artifacts.items():
            print(f"  {name}: {path}")

    if state.summary.get("errors"):
        print(f"\nErrors ({len(state.summary['errors'])}):")
        for err in state.summary["errors"][:5]:
            print(f"  - [{err.get('step', 'unknown')}] #{err.get('record_id')}: {err.get('error', 'Unknown error')}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for the career pipeline."""
    parser = argparse.ArgumentParser(
        description="Career Pipeline: handbook XML -> game and public datasets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full build from the default handbook file
  python -m app.pipelines.runner

  # Use another handbook dump
  python -m app.pipelines.runner --input data/source/bls-ooh-full.xml

  # Re-run only the publish step from data/processed/careers-full.json
  python -m app.pipelines.runner --steps publish

  # Write every artifact under another directory
  python -m app.pipelines.runner --output-dir /tmp/career-build
        """
    )
    parser.add_argument(
        "--steps",
        nargs="+",
        choices=STEPS,
        default=None,
        help="Steps to run (default: all, in pipeline order)"
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        dest="handbook_path",
        help=f"Handbook XML file (default: {settings.HANDBOOK_XML_PATH})"
    )
    parser.add_argument("--wages", type=str, default=None, dest="wage_table_path", help="Wage table CSV")
    parser.add_argument("--outlook", type=str, default=None, dest="outlook_table_path", help="Outlook table CSV")
    parser.add_argument("--skills", type=str, default=None, dest="skills_table_path", help="Skills table JSON")
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        dest="output_dir",
        help="Base directory for build artifacts (default: current directory)"
    )
    parser.add_argument("--verbose", action="store_true", help="Log per-record details")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)-8s | %(message)s',
        datefmt='%H:%M:%S'
    )

    storage = ArtifactStorage(Path(args.output_dir)) if args.output_dir else ArtifactStorage()

    try:
        state = run_career_pipeline(
            steps=args.steps,
            handbook_path=args.handbook_path,
            wage_table_path=args.wage_table_path,
            outlook_table_path=args.outlook_table_path,
            skills_table_path=args.skills_table_path,
            storage=storage,
        )
    except MissingInputError as e:
        logger.error(f"❌ {e}")
        return 1
    except PublishValidationError as e:
        logger.error(f"❌ {e}. Public dataset NOT written.")
        for failure in e.failures[:10]:
            logger.error(f"   #{failure['id']} {failure['soc']} {failure['title']}: {'; '.join(failure['errors'])}")
        return 1

    _print_summary(state)
    return 0


if __name__ == "__main__":
    sys.exit(main())
