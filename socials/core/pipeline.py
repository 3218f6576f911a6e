"""
One fetch cycle: fetch, de-duplicate, match, limit and rank.
"""
from __future__ import annotations

import logging
from typing import Mapping

from socials.core.matching import match_items
from socials.core.ranking import limit_and_rank
from socials.models import CycleReport
from socials.settings_store import Configuration
from socials.sources.collector import collect_raw_items, deduplicate_items
from socials.sources.common import SourceAdapter

logger = logging.getLogger(__name__)


async def run_cycle(config: Configuration, fetchers: Mapping[str, SourceAdapter]) -> CycleReport:
    """
    Run the whole pipeline for the keywords tracked right now.

    Keywords and limits are snapshotted up front, so edits made while the
    cycle is in flight only affect the next one.

    Args:
        config: Current configuration
        fetchers: Adapter per source name

    Returns:
        CycleReport with the final ordered items; ``nothing_to_monitor`` is
        set (and no adapter is called) when no keywords are tracked
    """
    snapshot = config.keywords.snapshot()
    limits = dict(config.limits)
    global_limit = config.global_limit
    keyword_union = config.keywords.all()

    if not keyword_union:
        logger.info("No keywords to monitor; skipping fetch")
        return CycleReport(nothing_to_monitor=True)

    outcomes = await collect_raw_items(snapshot, fetchers)
    raw_items = [item for outcome in outcomes for item in outcome.items]
    unique_items = deduplicate_items(raw_items)
    matched = match_items(unique_items, keyword_union)
    final_items = limit_and_rank(matched, limits, global_limit)

    logger.info(
        "Cycle complete: raw=%d unique=%d matched=%d shown=%d",
        len(raw_items),
        len(unique_items),
        len(matched),
        len(final_items),
    )
    return CycleReport(
        items=final_items,
        outcomes=outcomes,
        raw_count=len(raw_items),
        unique_count=len(unique_items),
    )
