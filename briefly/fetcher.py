"""
Feed fetcher.

Fetches every registered source once per run, in parallel, and assembles the
read-only FeedSnapshot shared by all subscribers. A failing source only
empties its own category.
"""

import concurrent.futures
import datetime
import logging
from types import MappingProxyType
from typing import Dict, Tuple

from briefly.errors import FeedFetchError
from briefly.models import FeedSnapshot, RawItem
from briefly.parsers.base import FeedParser
from briefly.registry import SourceRegistry

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Builds a FeedSnapshot from a registry using a FeedParser."""

    def __init__(self, parser: FeedParser, top_n: int = 3, max_workers: int = 8):
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        self.parser = parser
        self.top_n = top_n
        self.max_workers = max(1, max_workers)

    def _fetch_one(self, key: str, url: str) -> Tuple[RawItem, ...]:
        return tuple(self.parser.fetch(key, url)[: self.top_n])

    def fetch(self, registry: SourceRegistry) -> FeedSnapshot:
        """Fetches all sources; failed ones map to an empty tuple."""
        logger.info(
            "--- Fetching %d sources for %s ---",
            len(registry),
            datetime.date.today().isoformat(),
        )
        results: Dict[str, Tuple[RawItem, ...]] = {}

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.max_workers
        ) as executor:
            future_to_key = {
                executor.submit(self._fetch_one, source.key, source.url): source.key
                for source in registry
            }
            for future in concurrent.futures.as_completed(future_to_key):
                key = future_to_key[future]
                try:
                    results[key] = future.result()
                except FeedFetchError as e:
                    logger.error("Source %s failed: %s", key, e.reason)
                    results[key] = ()
                except Exception as e:  # pylint: disable=broad-exception-caught
                    logger.error("%s generated an exception: %s", key, e)
                    results[key] = ()

        # Registry order, so the note generator sees declaration order.
        snapshot = {key: results.get(key, ()) for key in registry.keys()}
        filled = sum(1 for items in snapshot.values() if items)
        logger.info("Fetched %d/%d categories with content.", filled, len(snapshot))
        return MappingProxyType(snapshot)
