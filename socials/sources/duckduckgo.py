"""
DuckDuckGo HTML results scraper.
"""
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx
from bs4 import BeautifulSoup

from socials.config import http_headers, settings
from socials.errors import SourceFetchError
from socials.models import RawItem
from socials.sources.common import clean_text
from socials.utils import normalize_text

logger = logging.getLogger(__name__)

# Result links are wrapped as //duckduckgo.com/l/?uddg=<encoded target>&rut=...
REDIRECT_PARAM = "uddg"


def unwrap_redirect_link(link: Optional[str]) -> Optional[str]:
    """
    Turn a DuckDuckGo redirect-wrapper URL into the destination URL.

    Args:
        link: href attribute of a result title

    Returns:
        Destination URL with an explicit scheme, or None for empty input
    """
    link = clean_text(link)
    if not link:
        return None
    query = urlsplit(link).query
    if query:
        targets = parse_qs(query).get(REDIRECT_PARAM)
        if targets and targets[0]:
            link = targets[0]
    if link.startswith("//"):
        return "https:" + link
    if not link.startswith(("http://", "https://")):
        return "https://" + link
    return link


def parse_results_page(html: str) -> List[RawItem]:
    """
    Extract results from a DuckDuckGo HTML results page.

    Args:
        html: Page body

    Returns:
        List of RawItem objects without publish dates
    """
    soup = BeautifulSoup(html, "html.parser")
    items: List[RawItem] = []
    for result in soup.select(".result"):
        anchor = result.select_one(".result__title a")
        if anchor is None:
            continue
        title = normalize_text(anchor.get_text(" ", strip=True))
        link = unwrap_redirect_link(anchor.get("href"))
        snippet_node = result.select_one(".result__snippet")
        snippet = normalize_text(snippet_node.get_text(" ", strip=True)) if snippet_node else ""

        if not title or not link:
            continue

        items.append(
            RawItem(
                source=DuckDuckGoFetcher.source,
                title=title,
                link=link,
                published_at=None,
                snippet=snippet,
            )
        )
    return items


class DuckDuckGoFetcher:
    """Scrapes the JavaScript-free DuckDuckGo results page for a keyword."""

    source = "ddg"
    BASE_URL = "https://html.duckduckgo.com/html/"

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS

    async def fetch(self, keyword: str) -> List[RawItem]:
        url = f"{self.BASE_URL}?{urlencode({'q': keyword})}"
        try:
            async with httpx.AsyncClient(
                headers=http_headers(),
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                r = await client.get(url)
                r.raise_for_status()
        except httpx.HTTPError as e:
            raise SourceFetchError(self.source, keyword, str(e) or type(e).__name__) from e

        items = parse_results_page(r.text)
        logger.debug("ddg results for %r: %d", keyword, len(items))
        return items
