"""
Per-source result caps and recency ordering.
"""
from __future__ import annotations

from typing import Dict, List, Mapping

from socials.config import SOURCES
from socials.models import MatchedItem


def effective_limit(source: str, limits: Mapping[str, int], global_limit: int) -> int:
    """
    Result cap for a source.

    Args:
        source: Source name
        limits: Per-source overrides (0 is a valid override)
        global_limit: Fallback cap

    Returns:
        The override when one is set, otherwise the global cap
    """
    override = limits.get(source)
    return global_limit if override is None else override


def apply_source_limits(
    items: List[MatchedItem],
    limits: Mapping[str, int],
    global_limit: int,
) -> List[MatchedItem]:
    """
    Truncate each source's items to its cap.

    Truncation keeps the head of arrival order; it is a noise cap per source,
    not a "most recent N", so it runs before any cross-source sorting.

    Args:
        items: Matched items in arrival order
        limits: Per-source overrides
        global_limit: Fallback cap

    Returns:
        Items grouped in source order, each group truncated
    """
    groups: Dict[str, List[MatchedItem]] = {source: [] for source in SOURCES}
    for matched in items:
        groups.setdefault(matched.source, []).append(matched)

    limited: List[MatchedItem] = []
    for source, group in groups.items():
        limited.extend(group[: max(0, effective_limit(source, limits, global_limit))])
    return limited


def _recency_key(matched: MatchedItem) -> float:
    published_at = matched.item.published_at
    return published_at.timestamp() if published_at else 0.0


def rank_by_recency(items: List[MatchedItem]) -> List[MatchedItem]:
    """Newest first; undated items count as the oldest. Ties keep their order."""
    return sorted(items, key=_recency_key, reverse=True)


def limit_and_rank(
    items: List[MatchedItem],
    limits: Mapping[str, int],
    global_limit: int,
) -> List[MatchedItem]:
    return rank_by_recency(apply_source_limits(items, limits, global_limit))
