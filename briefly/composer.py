"""
Digest composition.

Filters and orders the shared snapshot by one subscriber's interests. The
snapshot is only read, never modified, so a single snapshot serves every
subscriber in the run.
"""

import logging
from typing import Mapping, Optional

from briefly.extractor import extract_image
from briefly.models import Digest, DigestItem, DigestSection, FeedSnapshot, Subscriber
from briefly.registry import SourceRegistry

logger = logging.getLogger(__name__)


def compose(
    subscriber: Subscriber,
    snapshot: FeedSnapshot,
    registry: SourceRegistry,
    fallbacks: Optional[Mapping[str, str]] = None,
) -> Digest:
    """
    Builds the digest for `subscriber`.

    Interests are walked in declaration order. Unknown keys, categories
    missing from the snapshot and empty categories are skipped. `fallbacks`
    is forwarded to extract_image; pass None for image-less cards.
    """
    digest = Digest(email=subscriber["email"])
    seen = set()

    for key in subscriber.get("interests") or []:
        if key in seen:
            continue
        seen.add(key)

        if key not in registry:
            logger.debug("Ignoring unknown interest '%s' for %s.", key, digest.email)
            continue
        items = snapshot.get(key)
        if not items:
            continue

        digest.sections.append(
            DigestSection(
                key=key,
                style=registry.style_for(key),
                items=tuple(
                    DigestItem(
                        title=item["title"],
                        link=item["link"],
                        image_url=extract_image(item, key, fallbacks),
                    )
                    for item in items
                ),
            )
        )

    return digest
