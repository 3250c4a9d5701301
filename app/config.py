"""
Application Settings
app/config.py

All tunables for the career pipeline, query layer and API.
Values can be overridden through environment variables or a .env file.
"""

from typing import Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    APP_NAME: str = "Career Salary Game API"
    APP_VERSION: str = "1.0.0"

    # Build inputs
    HANDBOOK_XML_PATH: str = "data/source/bls-ooh-sample.xml"
    WAGE_TABLE_PATH: str = "data/source/oes_wages.csv"
    OUTLOOK_TABLE_PATH: str = "data/source/ep_outlook.csv"
    SKILLS_TABLE_PATH: str = "data/source/onet_skills.json"

    # Build artifacts
    BUILD_DIR: str = "build"
    EXTRACTED_PATH: str = "build/01_extracted.json"
    ENRICHED_PATH: str = "build/02_enriched.json"
    MERGED_DEBUG_PATH: str = "build/careers_merged.json"
    VALIDATION_REPORT_PATH: str = "data/processed/validation-report.json"
    FULL_DATASET_PATH: str = "data/processed/careers-full.json"
    GAME_DATASET_PATH: str = "data/game/careers-game.json"
    GAME_METADATA_PATH: str = "data/game/metadata.json"
    PUBLIC_DATASET_PATH: str = "public/careers.min.json"

    # Enrichment defaults
    DEFAULT_SALARY: int = 50000
    DEFAULT_GROWTH_RATE: int = 3
    DEFAULT_OPENINGS_PER_YEAR: int = 1000
    PROJECTION_START_YEAR: int = 2024
    PROJECTION_END_YEAR: int = 2034
    SALARY_SANITY_CEILING: int = 500000

    # Text budgets
    GAME_DESCRIPTION_LIMIT: int = 250
    GAME_ENVIRONMENT_LIMIT: int = 200
    PUBLIC_DESCRIPTION_LIMIT: int = 150
    PUBLIC_ENVIRONMENT_LIMIT: int = 150
    KEYWORD_COUNT: int = 8

    # Query layer
    SEARCH_LIMIT: int = 50
    SEARCH_FIELDS: Tuple[str, ...] = ("title", "title_short", "description", "education")

    # Matchup rules
    MATCHUP_MIN_SALARY_DIFF: int = 5000
    MATCHUP_MAX_SALARY_RATIO: float = 3.0
    MATCHUP_AVOID_SAME_SUBFIELD: bool = True
    MATCHUP_MAX_ATTEMPTS: int = 100

    # HTTP boundary
    SCRAPE_TIMEOUT_SECONDS: float = 15.0
    SCRAPE_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    )
    RECORDS_PATH: str = "data/records/records.json"


settings = Settings()
