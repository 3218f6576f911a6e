"""
File: socials/sources/reddit.py
Reddit search RSS fetcher (unauthenticated, newest first).
"""

from __future__ import annotations

import re
from typing import Optional

from socials.sources.feeds import FeedFetcher

_SUBREDDIT_RE = re.compile(r"r/(\w+)")


class RedditFetcher(FeedFetcher):
    source = "reddit"
    BASE_URL = "https://www.reddit.com/search.rss"

    def query_params(self, keyword: str) -> dict:
        return {"q": keyword, "sort": "new"}


def subreddit_from_body(raw_body: str) -> Optional[str]:
    # Reddit's entry HTML links the post's subreddit ("submitted to r/python").
    match = _SUBREDDIT_RE.search(raw_body or "")
    return match.group(1) if match else None
