"""
Hacker News search fetcher backed by the Algolia RSS endpoint.
"""
from __future__ import annotations

from socials.sources.feeds import FeedFetcher


class HackerNewsFetcher(FeedFetcher):
    """Fetches Hacker News stories mentioning a keyword."""

    source = "hn"
    BASE_URL = "https://hn.algolia.com/rss"

    def query_params(self, keyword: str) -> dict:
        return {"query": keyword}
