"""
Chronological RSS/Atom feed adapter shared by the Reddit and Hacker News sources.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, List, Optional
from urllib.parse import urlencode

import feedparser
import httpx

from socials.config import http_headers, settings
from socials.errors import SourceFetchError
from socials.models import RawItem
from socials.sources.common import clean_text, html_to_text, parse_utc_datetime
from socials.utils import now_utc

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Fetches a keyword search feed and keeps only recent entries.

    Feed sources return a long history, so anything older than the recency
    window (or without any date) is dropped before returning.
    """

    source = ""
    BASE_URL = ""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        recency_days: Optional[int] = None,
    ):
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._recency = timedelta(
            days=recency_days if recency_days is not None else settings.RECENCY_WINDOW_DAYS
        )

    def query_params(self, keyword: str) -> dict:
        raise NotImplementedError

    def build_url(self, keyword: str) -> str:
        return f"{self.BASE_URL}?{urlencode(self.query_params(keyword))}"

    async def fetch(self, keyword: str) -> List[RawItem]:
        """
        Fetch feed entries for a keyword.

        Args:
            keyword: Search term as entered by the user

        Returns:
            List of RawItem objects published inside the recency window

        Raises:
            SourceFetchError: On HTTP errors or an unparseable feed
        """
        url = self.build_url(keyword)
        try:
            async with httpx.AsyncClient(
                headers=http_headers(),
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise SourceFetchError(self.source, keyword, str(e) or type(e).__name__) from e

        feed = feedparser.parse(response.content)
        if feed.bozo and not feed.entries:
            reason = str(feed.get("bozo_exception") or "unparseable feed")
            raise SourceFetchError(self.source, keyword, reason)

        cutoff = now_utc() - self._recency
        items: List[RawItem] = []
        for entry in feed.entries:
            item = self.entry_to_item(entry)
            if item is None or item.published_at is None:
                continue
            if item.published_at <= cutoff:
                continue
            items.append(item)

        logger.debug(
            "%s feed for %r: %d entries, %d recent", self.source, keyword, len(feed.entries), len(items)
        )
        return items

    def entry_to_item(self, entry: Any) -> Optional[RawItem]:
        title = clean_text(entry.get("title"))
        if not title:
            return None
        raw_body = _entry_html(entry)
        snippet = html_to_text(raw_body) or html_to_text(entry.get("summary"))
        return RawItem(
            source=self.source,
            title=title,
            link=clean_text(entry.get("link")) or None,
            published_at=_entry_date(entry),
            snippet=snippet,
            raw_body=raw_body,
        )


def _entry_html(entry: Any) -> str:
    content = entry.get("content") or []
    if content:
        return content[0].get("value", "") or ""
    return entry.get("summary", "") or ""


def _entry_date(entry: Any) -> Optional[datetime]:
    for key in ("published_parsed", "updated_parsed", "published", "updated"):
        parsed = parse_utc_datetime(entry.get(key))
        if parsed is not None:
            return parsed
    return None
