"""
Fetch coordinator that fans out across every (source, keyword) pair.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Mapping, Sequence

from socials.models import FetchOutcome, RawItem
from socials.sources.common import SourceAdapter
from socials.sources.duckduckgo import DuckDuckGoFetcher
from socials.sources.hackernews import HackerNewsFetcher
from socials.sources.reddit import RedditFetcher

logger = logging.getLogger(__name__)


def default_fetchers() -> Dict[str, SourceAdapter]:
    """One adapter per known source."""
    return {
        "reddit": RedditFetcher(),
        "hn": HackerNewsFetcher(),
        "ddg": DuckDuckGoFetcher(),
    }


def deduplicate_items(items: Iterable[RawItem]) -> List[RawItem]:
    """
    Remove duplicate items based on their link.

    The first occurrence wins. Items without a link cannot be compared and
    are always kept.

    Args:
        items: Iterable of RawItem objects in arrival order

    Returns:
        List of unique RawItem objects, arrival order preserved
    """
    seen_links: set[str] = set()
    unique_items: List[RawItem] = []

    for item in items:
        if item.link:
            if item.link in seen_links:
                continue
            seen_links.add(item.link)
        unique_items.append(item)

    return unique_items


async def _fetch_one(adapter: SourceAdapter, source: str, keyword: str) -> FetchOutcome:
    try:
        items = await adapter.fetch(keyword)
    except Exception as e:
        logger.warning("Error fetching %s for %r: %s", source, keyword, e)
        return FetchOutcome(source=source, keyword=keyword, error=str(e) or type(e).__name__)
    return FetchOutcome(source=source, keyword=keyword, items=list(items or []))


async def _missing_adapter(source: str, keyword: str) -> FetchOutcome:
    logger.warning("No adapter registered for source %s", source)
    return FetchOutcome(source=source, keyword=keyword, error="no adapter registered")


async def collect_raw_items(
    keywords_by_source: Mapping[str, Sequence[str]],
    fetchers: Mapping[str, SourceAdapter],
) -> List[FetchOutcome]:
    """
    Run one adapter call per (source, keyword) pair concurrently.

    Every call resolves to a FetchOutcome, so a failing or slow source never
    aborts the others; this returns only once all calls have settled.

    Args:
        keywords_by_source: Keyword snapshot taken at cycle start
        fetchers: Adapter per source name

    Returns:
        Outcomes in dispatch order (source order, then keyword order)
    """
    tasks = []
    for source, keywords in keywords_by_source.items():
        adapter = fetchers.get(source)
        for keyword in keywords:
            if adapter is None:
                tasks.append(_missing_adapter(source, keyword))
            else:
                tasks.append(_fetch_one(adapter, source, keyword))

    if not tasks:
        return []

    outcomes = await asyncio.gather(*tasks)
    failed = sum(1 for outcome in outcomes if not outcome.ok)
    logger.info("Fetched %d source/keyword pairs (%d failed)", len(outcomes), failed)
    return list(outcomes)
