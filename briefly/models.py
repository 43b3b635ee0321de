"""
Data models for the Briefly digest pipeline.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple, TypedDict


class RawItem(TypedDict):
    """One normalized entry from a source feed."""

    title: str
    link: str
    enclosure_url: Optional[str]
    media_url: Optional[str]
    html: Optional[str]
    published: Optional[str]


class Subscriber(TypedDict):
    """A subscriber record as stored by the signup form."""

    email: str
    interests: List[str]


# Category key -> freshest-first items, at most top_n each.
FeedSnapshot = Mapping[str, Tuple[RawItem, ...]]


@dataclass(frozen=True)
class CategoryStyle:
    """Presentation metadata for a category."""

    color: str
    emoji: str
    label: str


@dataclass(frozen=True)
class Source:
    """A content origin registered under a category key."""

    key: str
    url: str


@dataclass(frozen=True)
class EditorsNote:
    """The lead-in sentence for a calendar day."""

    date: str  # ISO date, YYYY-MM-DD
    content: str


@dataclass(frozen=True)
class DigestItem:
    title: str
    link: str
    image_url: Optional[str] = None


@dataclass(frozen=True)
class DigestSection:
    key: str
    style: CategoryStyle
    items: Tuple[DigestItem, ...]


@dataclass
class Digest:
    """A subscriber-specific view over the run's snapshot."""

    email: str
    sections: List[DigestSection] = field(default_factory=list)

    @property
    def has_content(self) -> bool:
        return bool(self.sections)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one delivery attempt."""

    email: str
    sent: bool
    error: Optional[str] = None
