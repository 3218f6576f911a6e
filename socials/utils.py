"""
Shared utility functions for the keyword monitor.
"""
from __future__ import annotations

import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Optional

import tldextract

from socials.config import settings

# Offline extractor: uses the suffix list bundled with tldextract.
_extract = tldextract.TLDExtract(suffix_list_urls=())


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def normalize_text(text: str | None) -> str:
    """
    Normalize whitespace in text content.

    Args:
        text: Input text string (can be None)

    Returns:
        Normalized text with single spaces and trimmed edges
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def extract_domain_from_url(url: str | None) -> str:
    """
    Extract the registered domain from a URL.

    Args:
        url: Full URL string

    Returns:
        Normalized domain name in lowercase, or "" when there is none
    """
    if not url:
        return ""
    extracted = _extract(url)
    if extracted.suffix:
        return f"{extracted.domain}.{extracted.suffix}".lower()
    return extracted.domain.lower()


def format_age(published_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Describe how long ago something was published ("3 hours ago").

    Args:
        published_at: Publication timestamp, or None when unknown
        now: Reference time (defaults to the current UTC time)

    Returns:
        Human readable relative age, "N/A" for unknown timestamps
    """
    if published_at is None:
        return "N/A"
    now = now or now_utc()
    seconds = max(int((now - published_at).total_seconds()), 0)
    if seconds < 60:
        return "less than a minute ago"
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''} ago"
    return "just now"


def configure_logging(
    level: str | None = None,
    log_file: str | None = None,
    fmt: str | None = None,
) -> logging.Logger:
    """
    Configure the ``socials`` logger once; repeated calls are no-ops.

    Args:
        level: Level name, defaults to the LOG_LEVEL setting
        log_file: Write records to this file instead of stderr
        fmt: Record format, defaults to the LOG_FORMAT setting

    Returns:
        The package logger
    """
    logger = logging.getLogger("socials")
    level_name = (level or settings.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if any(getattr(handler, "_socials_handler", False) for handler in logger.handlers):
        return logger

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or settings.LOG_FORMAT))
    handler._socials_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger
