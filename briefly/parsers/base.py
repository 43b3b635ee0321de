"""
Base classes and interfaces for feed parsers.

This module defines the contract that all feed parsers must follow.
"""

from typing import List, Protocol

from briefly.models import RawItem


class FeedParser(Protocol):
    """
    Protocol for feed parsers.

    Classes implementing this protocol fetch the content behind a URL and
    normalize it into RawItem dicts, freshest first. Failures are raised as
    FeedFetchError; the fetcher decides how to degrade.
    """

    def fetch(self, source: str, url: str) -> List[RawItem]:
        """Fetches and parses a feed."""
