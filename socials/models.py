"""
File: socials/models.py
Internal data structures that flow through a fetch cycle.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class RawItem:
    """Unified representation of one result produced by a source adapter.

    ``link`` is the identity used for de-duplication; items without a link
    are never collapsed with anything else.
    """

    source: str  # one of config.SOURCES
    title: str
    link: Optional[str]
    published_at: Optional[datetime]  # aware UTC, None for scraped results
    snippet: str = ""
    raw_body: str = ""


@dataclass
class MatchedItem:
    """A RawItem that matched at least one tracked keyword."""

    item: RawItem
    matched_keywords: List[str]
    highlighted_title: str
    highlighted_snippet: str

    @property
    def source(self) -> str:
        return self.item.source


@dataclass(frozen=True)
class FetchOutcome:
    """Tagged result of a single (source, keyword) adapter call."""

    source: str
    keyword: str
    items: List[RawItem] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CycleReport:
    """Everything one run of the pipeline produced."""

    items: List[MatchedItem] = field(default_factory=list)
    outcomes: List[FetchOutcome] = field(default_factory=list)
    nothing_to_monitor: bool = False
    raw_count: int = 0
    unique_count: int = 0

    @property
    def failed(self) -> List[FetchOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


class CycleState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"


__all__ = [
    "RawItem",
    "MatchedItem",
    "FetchOutcome",
    "CycleReport",
    "CycleState",
]
