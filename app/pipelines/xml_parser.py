"""
Handbook XML Helpers
app/pipelines/xml_parser.py

Reading helpers for the BLS Occupational Outlook Handbook XML dump.
Every accessor returns a default instead of raising on missing nodes.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from app.config import settings
from app.exceptions import MissingInputError

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")
_GROWTH_RE = re.compile(r"(-?\d+)%")
_WHITESPACE_RE = re.compile(r"\s+")


def load_occupations(path: Union[str, Path]) -> List[Tag]:
    """Parse the handbook file and return its <occupation> nodes in source order."""
    path = Path(path)
    if not path.exists():
        raise MissingInputError(str(path), "download the handbook XML into data/source/")

    logger.info(f"   Reading handbook: {path}")
    return parse_occupations(path.read_text(encoding="utf-8"))


def parse_occupations(xml_text: str) -> List[Tag]:
    soup = BeautifulSoup(xml_text, "xml")
    return soup.find_all("occupation")


def strip_html(text: Optional[str]) -> str:
    """Drop markup and collapse whitespace."""
    if not text:
        return ""
    plain = BeautifulSoup(text, "html.parser").get_text(" ")
    return _WHITESPACE_RE.sub(" ", plain).strip()


def safe_extract(node: Optional[Tag], path: str, default: str = "") -> str:
    """
    Walk a dotted path of child element names and return the text found.

    Repeated elements resolve to the first one. A missing level or empty
    text yields `default`.
    """
    current = node
    for part in path.split("."):
        if current is None:
            return default
        current = current.find(part, recursive=False)

    if current is None:
        return default

    text = current.get_text().strip()
    return text if text else default


def safe_extract_all(node: Optional[Tag], path: str) -> List[str]:
    """Like safe_extract, but follows every repeated element and returns all texts."""
    if node is None:
        return []

    nodes = [node]
    for part in path.split("."):
        nodes = [child for n in nodes for child in n.find_all(part, recursive=False)]

    texts = [strip_html(n.get_text()) for n in nodes]
    return [t for t in texts if t]


def parse_number(value: Optional[str]) -> float:
    """'$86,070' -> 86070.0; anything unparseable -> 0."""
    if value is None:
        return 0.0
    cleaned = str(value).replace("$", "").replace(",", "")
    match = _NUMBER_RE.match(cleaned)
    return float(match.group(1)) if match else 0.0


def extract_growth_rate(text: Optional[str]) -> Optional[int]:
    """'6% (Faster than average)' -> 6."""
    if not text:
        return None
    match = _GROWTH_RE.search(str(text))
    return int(match.group(1)) if match else None


def categorize_demand(growth_rate: Optional[float]) -> str:
    if growth_rate is None:
        return "Unknown"
    if growth_rate < 0:
        return "Declining"
    if growth_rate < 2:
        return "Low"
    if growth_rate < 5:
        return "Moderate"
    if growth_rate < 10:
        return "High"
    return "Very High"


def format_demand(
    growth_rate: Optional[int],
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
) -> str:
    """'High – 6% (2024–34)'; empty when there is no growth figure."""
    if growth_rate is None:
        return ""
    start_year = start_year or settings.PROJECTION_START_YEAR
    end_year = end_year or settings.PROJECTION_END_YEAR
    return f"{categorize_demand(growth_rate)} – {growth_rate}% ({start_year}–{str(end_year)[-2:]})"
