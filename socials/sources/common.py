"""
Common utilities for source adapters.
"""
from __future__ import annotations

import calendar
from datetime import datetime, timezone
from typing import List, Optional, Protocol, runtime_checkable

from bs4 import BeautifulSoup
from dateutil import parser as dateparser

from socials.models import RawItem
from socials.utils import normalize_text


@runtime_checkable
class SourceAdapter(Protocol):
    """Anything that can turn a keyword into raw items for one source.

    Implementations may raise; the collector turns failures into empty
    results so one source can never abort a cycle.
    """

    source: str

    async def fetch(self, keyword: str) -> List[RawItem]:
        ...


def parse_utc_datetime(value) -> Optional[datetime]:
    """
    Parse a feed date into an aware UTC datetime.

    Args:
        value: ``time.struct_time`` from feedparser, a datetime, a date
            string in any common format, or None

    Returns:
        UTC datetime, or None if the value is missing or unparseable
    """
    if not value:
        return None
    if hasattr(value, "tm_year"):
        return datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    if isinstance(value, datetime):
        parsed_date = value
    else:
        try:
            parsed_date = dateparser.parse(str(value))
        except (TypeError, ValueError, OverflowError):
            return None
    if parsed_date.tzinfo:
        return parsed_date.astimezone(timezone.utc)
    return parsed_date.replace(tzinfo=timezone.utc)


def clean_text(text: Optional[str]) -> str:
    """
    Clean and normalize text content.

    Args:
        text: Raw text string or None

    Returns:
        Cleaned text string, empty string if input is None
    """
    if not text:
        return ""
    return text.strip()


def html_to_text(html: Optional[str]) -> str:
    """
    Strip markup from an HTML fragment.

    Args:
        html: HTML fragment (feed content, scraped snippet)

    Returns:
        Plain text with whitespace collapsed
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    return normalize_text(soup.get_text(" ", strip=True))
