"""
RSS feed parser implementation.

This module provides the RSSParser class for fetching RSS/Atom feeds and
normalizing their entries into RawItem dicts.
"""

import logging
import time
from typing import Any, List, Optional

import requests
import feedparser  # type: ignore

from briefly.errors import FeedFetchError
from briefly.models import RawItem
from briefly.parsers.base import FeedParser

logger = logging.getLogger(__name__)

USER_AGENT = "BrieflyDigestBot/1.0"
CHUNK_SIZE = 16 * 1024


def _first_url(candidates: Any, key: str) -> Optional[str]:
    """Returns the first non-empty `key` value from a list of dict-likes."""
    for candidate in candidates or []:
        value = candidate.get(key) if hasattr(candidate, "get") else None
        if value:
            return str(value).strip()
    return None


class RSSParser(FeedParser):
    """Parses standard RSS and Atom feeds."""

    def __init__(self, timeout: float = 10):
        self.timeout = timeout

    def _enclosure_url(self, entry: Any) -> Optional[str]:
        url = _first_url(entry.get("enclosures"), "href")
        if url:
            return url
        links = [link for link in entry.get("links", []) if link.get("rel") == "enclosure"]
        return _first_url(links, "href")

    def _media_url(self, entry: Any) -> Optional[str]:
        return _first_url(entry.get("media_content"), "url") or _first_url(
            entry.get("media_thumbnail"), "url"
        )

    def _html_body(self, entry: Any) -> Optional[str]:
        # content:encoded wins over the summary, which is often truncated
        content = entry.get("content")
        if content and content[0].get("value"):
            return content[0]["value"]
        return entry.get("summary") or entry.get("description") or None

    def _normalize(self, entry: Any) -> Optional[RawItem]:
        title = " ".join((entry.get("title") or "").split())
        link = (entry.get("link") or "").strip()
        # Cards and the editor's note both need a headline.
        if not title:
            return None
        return RawItem(
            title=title,
            link=link or "#",
            enclosure_url=self._enclosure_url(entry),
            media_url=self._media_url(entry),
            html=self._html_body(entry),
            published=entry.get("published") or entry.get("updated"),
        )

    def _download(self, source: str, url: str) -> bytes:
        """Downloads the feed body within `timeout` seconds overall."""
        deadline = time.monotonic() + self.timeout
        chunks = []
        try:
            with requests.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                stream=True,
            ) as resp:
                resp.raise_for_status()
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if time.monotonic() > deadline:
                        raise FeedFetchError(
                            source, f"timed out after {self.timeout}s"
                        )
                    chunks.append(chunk)
        except requests.RequestException as req_err:
            raise FeedFetchError(source, f"network error: {req_err}") from req_err
        return b"".join(chunks)

    def fetch(self, source: str, url: str) -> List[RawItem]:
        """Fetches and parses a single RSS feed."""
        feed = feedparser.parse(self._download(source, url))
        if feed.bozo and not feed.entries:
            raise FeedFetchError(
                source, f"malformed feed: {feed.get('bozo_exception', 'unknown')}"
            )

        items = []
        for entry in feed.entries:
            item = self._normalize(entry)
            if item is not None:
                items.append(item)
        logger.debug("Parsed %d entries from %s.", len(items), source)
        return items
