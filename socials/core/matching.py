"""
Whole-word keyword matching and highlighting.

Matching is literal and case-insensitive. A keyword counts as a whole word
when it is not directly preceded or followed by a word character, which also
gives sensible results for keywords that start or end with punctuation
("c++", ".net").
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Pattern, Tuple

from rich.markup import escape

from socials.models import MatchedItem, RawItem

HIGHLIGHT_OPEN = "[bold]"
HIGHLIGHT_CLOSE = "[/bold]"


@lru_cache(maxsize=1024)
def keyword_pattern(keyword: str) -> Pattern[str]:
    """Compiled whole-word, case-insensitive pattern for a keyword."""
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


def _combined_pattern(keywords: Tuple[str, ...]) -> Pattern[str]:
    # Longest first so "raspberry pi" wins over "pi" at the same position.
    ordered = sorted(keywords, key=len, reverse=True)
    alternation = "|".join(re.escape(keyword) for keyword in ordered)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


def highlight(text: str, keywords: Iterable[str]) -> str:
    """
    Wrap every keyword occurrence in bold markup, escaping everything else.

    Args:
        text: Plain text
        keywords: Keywords to emphasise

    Returns:
        Console markup string
    """
    keywords = tuple(keyword for keyword in keywords if keyword)
    if not text:
        return ""
    if not keywords:
        return escape(text)

    pieces: List[str] = []
    position = 0
    for match in _combined_pattern(keywords).finditer(text):
        pieces.append(escape(text[position:match.start()]))
        pieces.append(f"{HIGHLIGHT_OPEN}{escape(match.group(0))}{HIGHLIGHT_CLOSE}")
        position = match.end()
    pieces.append(escape(text[position:]))
    return "".join(pieces)


def find_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """Keywords occurring in text as whole words, in the order given."""
    found: List[str] = []
    for keyword in keywords:
        if keyword and keyword not in found and keyword_pattern(keyword).search(text):
            found.append(keyword)
    return found


def find_and_highlight_keywords(text: str, keywords: Iterable[str]) -> Tuple[List[str], str]:
    """
    Find matching keywords and produce the highlighted text.

    Args:
        text: Text to scan
        keywords: Full keyword union

    Returns:
        Tuple of (matched keywords in discovery order, highlighted text)
    """
    matched = find_keywords(text, keywords)
    return matched, highlight(text, matched)


def match_item(item: RawItem, keywords: List[str]) -> MatchedItem | None:
    matched = find_keywords(f"{item.title} {item.snippet}", keywords)
    if not matched:
        return None
    return MatchedItem(
        item=item,
        matched_keywords=matched,
        highlighted_title=highlight(item.title, matched),
        highlighted_snippet=highlight(item.snippet, matched),
    )


def match_items(items: Iterable[RawItem], keywords: Iterable[str]) -> List[MatchedItem]:
    """
    Keep the items mentioning at least one tracked keyword.

    Args:
        items: De-duplicated raw items
        keywords: Union of all tracked keywords, not only those that fetched the item

    Returns:
        MatchedItem list in input order; items without a match are dropped
    """
    keywords = list(keywords)
    matched_items: List[MatchedItem] = []
    for item in items:
        matched = match_item(item, keywords)
        if matched is not None:
            matched_items.append(matched)
    return matched_items
