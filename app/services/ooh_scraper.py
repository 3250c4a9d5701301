"""
Handbook Page Scraper
app/services/ooh_scraper.py

Reads one career from a live Occupational Outlook Handbook page
(https://www.bls.gov/ooh/...htm) for the custom-career feature.

Every failure is raised as a BoundaryError carrying the HTTP status the
API should answer with:
    400  URL missing or not a handbook page (checked before any fetch)
    404  handbook page does not exist
    503  bls.gov refused, rate-limited, timed out or was unreachable
    422  page fetched but no title or salary could be read
    500  anything else
"""

from __future__ import annotations

import logging
import re
import time
from typing import Iterable, List, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, Tag

from app.config import settings
from app.exceptions import BoundaryError
from app.models.api import ScrapedCareer

logger = logging.getLogger(__name__)

ALLOWED_HOST_RE = re.compile(r"^(www\.)?bls\.gov$", re.IGNORECASE)
OOH_PATH_RE = re.compile(r"^/ooh/", re.IGNORECASE)
HTM_PATH_RE = re.compile(r"\.htm/?$", re.IGNORECASE)
SALARY_RE = re.compile(r"\$([0-9,]+)")
TITLE_SUFFIX = " : Occupational Outlook Handbook"

DEFAULT_SKILLS = ["Problem-solving", "Communication", "Technical skills"]
MAX_SKILLS = 5
DESCRIPTION_LIMIT = 300
EDUCATION_LIMIT = 200
SHORT_TEXT_LIMIT = 150

MSG_URL_REQUIRED = "URL is required"
MSG_URL_INVALID = "Invalid URL format. Please provide a valid BLS.gov OOH URL."
MSG_URL_HOST = "URL must be from bls.gov domain"
MSG_URL_PATH = "URL must be a BLS Occupational Outlook Handbook page (path should start with /ooh/)"
MSG_URL_EXTENSION = "URL must be a BLS OOH page ending in .htm"
MSG_NOT_FOUND = "Career page not found. Please check the URL and try again."
MSG_UNAVAILABLE = "BLS.gov is temporarily unavailable. Please try again in a moment."
MSG_NO_TITLE = (
    "Could not read the career title from this page. "
    "The page layout may have changed or this may not be a career page."
)
MSG_NO_SALARY = "Could not read salary information from this page. The page layout may have changed."
MSG_FAILED = "Failed to scrape career data. Please check the URL and try again."


# =============================================================================
# URL validation
# =============================================================================

def normalize_ooh_url(raw_url: Optional[str]) -> str:
    """Validate a handbook URL and return it as https without a trailing slash."""
    if not raw_url or not str(raw_url).strip():
        raise BoundaryError(MSG_URL_REQUIRED, 400)

    try:
        parsed = urlparse(str(raw_url).strip())
        hostname = parsed.hostname or ""
    except ValueError:
        raise BoundaryError(MSG_URL_INVALID, 400)

    if parsed.scheme.lower() not in ("http", "https") or not hostname:
        raise BoundaryError(MSG_URL_INVALID, 400)
    if not ALLOWED_HOST_RE.match(hostname):
        raise BoundaryError(MSG_URL_HOST, 400)
    if not OOH_PATH_RE.match(parsed.path):
        raise BoundaryError(MSG_URL_PATH, 400)
    if not HTM_PATH_RE.search(parsed.path):
        raise BoundaryError(MSG_URL_EXTENSION, 400)

    return f"https://{hostname}{parsed.path.rstrip('/')}"


# =============================================================================
# Page parsing
# =============================================================================

def _text(tag: Optional[Tag]) -> str:
    return tag.get_text(" ", strip=True) if tag is not None else ""


def _first_containing(soup: BeautifulSoup, names: Iterable[str], needle: str) -> Optional[Tag]:
    for tag in soup.find_all(list(names)):
        if needle in tag.get_text():
            return tag
    return None


def _highlight_near(soup: BeautifulSoup, label: str) -> str:
    """Text of the .ooh-highlight next to a quick-facts label paragraph."""
    para = _first_containing(soup, ["p"], label)
    if para is None or para.parent is None:
        return ""
    return _text(para.parent.find(class_="ooh-highlight"))


def _paragraph_after(heading: Optional[Tag]) -> str:
    if heading is None:
        return ""
    sibling = heading.find_next_sibling()
    if sibling is not None and sibling.name == "p":
        text = _text(sibling)
        if text:
            return text
    if heading.parent is not None:
        parent_next = heading.parent.find_next_sibling()
        if parent_next is not None and parent_next.name == "p":
            return _text(parent_next)
    return ""


def _meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find("meta", attrs=attrs)
    return (tag.get("content") or "").strip() if tag is not None else ""


def extract_title(soup: BeautifulSoup) -> str:
    title = _text(soup.find("h1"))
    if not title and soup.title is not None:
        title = soup.title.get_text().replace(TITLE_SUFFIX, "").strip()
    return title


def extract_salary(soup: BeautifulSoup) -> int:
    salary_text = _highlight_near(soup, "Median Pay") or _highlight_near(soup, "Median annual wage")
    if not salary_text:
        for highlight in soup.find_all(class_="ooh-highlight"):
            if "$" in highlight.get_text():
                salary_text = _text(highlight)
                break

    match = SALARY_RE.search(salary_text or "")
    return int(match.group(1).replace(",", "")) if match else 0


def extract_skills(soup: BeautifulSoup) -> List[str]:
    section = _first_containing(soup, ["h2", "h3"], "Important Qualities")
    skills: List[str] = []
    if section is not None and section.parent is not None:
        for item in section.parent.find_all("li")[:MAX_SKILLS]:
            skill = item.get_text().split(".")[0].strip()
            if skill:
                skills.append(skill)
    return skills or list(DEFAULT_SKILLS)


def parse_career_page(html: str, source_url: str) -> ScrapedCareer:
    """Read the career fields from handbook page HTML. Missing fields stay empty."""
    soup = BeautifulSoup(html, "html.parser")

    description = _paragraph_after(_first_containing(soup, ["h2", "h3"], "What"))[:DESCRIPTION_LIMIT]
    if not description:
        description = _meta_content(soup, name="description") or _meta_content(soup, property="og:description")

    education = _paragraph_after(
        _first_containing(soup, ["h3"], "Education") or _first_containing(soup, ["h2"], "How to Become")
    )[:EDUCATION_LIMIT]
    if not education:
        education = _highlight_near(soup, "Entry-level education")

    demand = _highlight_near(soup, "Job Outlook") or _paragraph_after(
        _first_containing(soup, ["h2", "h3"], "Job Outlook")
    )

    work_environment = _paragraph_after(_first_containing(soup, ["h2", "h3"], "Work Environment"))

    return ScrapedCareer(
        title=extract_title(soup),
        description=description,
        education=education,
        salary=extract_salary(soup),
        demand=demand[:SHORT_TEXT_LIMIT],
        work_environment=work_environment[:SHORT_TEXT_LIMIT],
        skills=extract_skills(soup),
        source=source_url,
    )


# =============================================================================
# Scraper
# =============================================================================

class CareerPageScraper:
    """Fetches and parses handbook pages."""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        self.timeout = timeout or settings.SCRAPE_TIMEOUT_SECONDS
        self.headers = {"User-Agent": user_agent or settings.SCRAPE_USER_AGENT}

    def fetch(self, url: str) -> str:
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as e:
            logger.warning(f"⚠️ bls.gov unreachable for {url}: {e}")
            raise BoundaryError(MSG_UNAVAILABLE, 503) from e

        if response.status_code == 404:
            raise BoundaryError(MSG_NOT_FOUND, 404)
        if response.status_code in (403, 429):
            raise BoundaryError(MSG_UNAVAILABLE, 503)
        response.raise_for_status()
        return response.text

    def scrape(self, raw_url: Optional[str]) -> ScrapedCareer:
        url = normalize_ooh_url(raw_url)
        started = time.monotonic()
        logger.info(f"Fetching career data from: {url}")

        try:
            career = parse_career_page(self.fetch(url), url)
        except BoundaryError:
            raise
        except Exception as e:
            logger.error(f"❌ Error scraping {url}: {e}")
            raise BoundaryError(MSG_FAILED, 500) from e

        if not career.title:
            logger.warning(f"Failed to extract title from: {url}")
            raise BoundaryError(MSG_NO_TITLE, 422)
        if career.salary == 0:
            logger.warning(f"Failed to extract salary from: {url}")
            raise BoundaryError(MSG_NO_SALARY, 422)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        logger.info(f"✅ Scraped \"{career.title}\" in {elapsed_ms}ms")
        return career


# Singleton
_scraper: Optional[CareerPageScraper] = None

def get_career_page_scraper() -> CareerPageScraper:
    global _scraper
    if _scraper is None:
        _scraper = CareerPageScraper()
    return _scraper
