"""
Per-source keyword sets.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from socials.config import SOURCES
from socials.errors import UnknownSourceError


def normalize_keyword(keyword: Optional[str]) -> str:
    """Trim surrounding whitespace; returns an empty string for None."""
    if not keyword:
        return ""
    return keyword.strip()


class KeywordStore:
    """Keyword sets for every known source.

    Sets are backed by insertion-ordered dicts so listings stay stable across
    saves. A ``scope`` of ``None`` addresses all sources at once.
    """

    def __init__(self, initial: Optional[Mapping[str, Iterable[str]]] = None):
        self._keywords: Dict[str, Dict[str, None]] = {source: {} for source in SOURCES}
        if initial:
            self.replace(initial)

    def _scoped(self, scope: Optional[str]) -> Tuple[str, ...]:
        if scope is None:
            return SOURCES
        if scope not in self._keywords:
            raise UnknownSourceError(scope)
        return (scope,)

    def add(self, scope: Optional[str], keyword: str) -> bool:
        """Add a keyword; returns True if any source set changed."""
        keyword = normalize_keyword(keyword)
        sources = self._scoped(scope)
        if not keyword:
            return False
        changed = False
        for source in sources:
            if keyword not in self._keywords[source]:
                self._keywords[source][keyword] = None
                changed = True
        return changed

    def remove(self, scope: Optional[str], keyword: str) -> bool:
        """Remove a keyword; missing keywords are ignored."""
        keyword = normalize_keyword(keyword)
        changed = False
        for source in self._scoped(scope):
            if keyword in self._keywords[source]:
                del self._keywords[source][keyword]
                changed = True
        return changed

    def for_source(self, source: str) -> List[str]:
        return list(self._keywords[self._scoped(source)[0]])

    def all(self) -> List[str]:
        """Union of every source's keywords, duplicates collapsed."""
        union: Dict[str, None] = {}
        for source in SOURCES:
            union.update(self._keywords[source])
        return list(union)

    def pairs(self) -> List[Tuple[str, str]]:
        return [(source, kw) for source in SOURCES for kw in self._keywords[source]]

    def snapshot(self) -> Dict[str, List[str]]:
        return {source: list(self._keywords[source]) for source in SOURCES}

    def replace(self, mapping: Mapping[str, Iterable[str]]) -> None:
        fresh: Dict[str, Dict[str, None]] = {source: {} for source in SOURCES}
        for source, keywords in mapping.items():
            if source not in fresh:
                raise UnknownSourceError(source)
            for keyword in keywords:
                keyword = normalize_keyword(keyword)
                if keyword:
                    fresh[source][keyword] = None
        self._keywords = fresh

    def is_empty(self) -> bool:
        return not any(self._keywords[source] for source in SOURCES)

    def __len__(self) -> int:
        return sum(len(self._keywords[source]) for source in SOURCES)
