"""
Services module for the Career Salary Game.
"""

from app.services.artifact_storage import ArtifactStorage
from app.services.data_loader import CareerDataService
from app.services.ooh_scraper import CareerPageScraper, get_career_page_scraper
from app.services.records_storage import RecordsStorage, get_records_storage

__all__ = [
    # Build artifacts
    "ArtifactStorage",

    # Serve-time data (one instance lives on app.state)
    "CareerDataService",

    # HTTP boundary
    "CareerPageScraper",
    "get_career_page_scraper",
    "RecordsStorage",
    "get_records_storage",
]
