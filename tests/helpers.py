from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from socials.errors import SourceFetchError
from socials.models import MatchedItem, RawItem


def make_item(
    source="hn",
    title="Title",
    link="https://example.com/a",
    snippet="",
    hours_ago=None,
    raw_body="",
):
    published_at = None
    if hours_ago is not None:
        published_at = datetime.now(timezone.utc) - timedelta(hours=hours_ago)
    return RawItem(
        source=source,
        title=title,
        link=link,
        published_at=published_at,
        snippet=snippet,
        raw_body=raw_body,
    )


def make_matched(item, keywords=("kw",)):
    return MatchedItem(
        item=item,
        matched_keywords=list(keywords),
        highlighted_title=item.title,
        highlighted_snippet=item.snippet,
    )


class FakeFetcher:
    """Adapter returning canned items per keyword; can fail or block."""

    def __init__(self, source, results=None, fail=(), gate=None):
        self.source = source
        self.results = results or {}
        self.fail = set(fail)
        self.gate = gate
        self.calls = []

    async def fetch(self, keyword):
        self.calls.append(keyword)
        if self.gate is not None:
            await self.gate.wait()
        if keyword in self.fail:
            raise SourceFetchError(self.source, keyword, "boom")
        return list(self.results.get(keyword, []))


def fake_fetchers(**overrides):
    fetchers = {source: FakeFetcher(source) for source in ("reddit", "hn", "ddg")}
    fetchers.update(overrides)
    return fetchers


def run(coro):
    return asyncio.run(coro)
