"""
Careers Router - Custom career scraping
app/routers/careers.py

Endpoints:
- POST /api/scrape-career - Read one career from a live handbook page
"""

import asyncio
import logging

from fastapi import APIRouter, Depends

from app.models.api import ScrapeCareerRequest, ScrapedCareer
from app.services.ooh_scraper import CareerPageScraper, get_career_page_scraper

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Careers"])


@router.post(
    "/scrape-career",
    response_model=ScrapedCareer,
    response_model_by_alias=True,
    summary="Scrape a career from a BLS handbook page",
    description="URL must be an https://www.bls.gov/ooh/...htm page. Errors are returned as {\"error\": message}.",
)
async def scrape_career(
    request: ScrapeCareerRequest,
    scraper: CareerPageScraper = Depends(get_career_page_scraper),
):
    # The fetch blocks; keep it off the event loop
    return await asyncio.to_thread(scraper.scrape, request.url)
