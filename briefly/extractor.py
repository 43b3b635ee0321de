"""
Best-effort image lookup for a feed item.

Resolution order, first match wins:
  1. enclosure URL
  2. media:content / media:thumbnail URL
  3. first <img src="..."> in the item's HTML (regex, not a real parser)
  4. the category's fallback illustration, then the generic one

Step 4 only runs when the caller passes a fallback table, so callers that
prefer image-less cards simply omit it.
"""

import re
from typing import Mapping, Optional

from briefly.models import RawItem

IMG_SRC_RE = re.compile(r"""<img\b[^>]*?(?<![\w-])src\s*=\s*(["'])(.*?)\1""", re.I)

GENERIC_FALLBACK_KEY = "default"


def find_embedded_image(html: Optional[str]) -> Optional[str]:
    """Returns the src of the first <img> tag in an HTML fragment, if any."""
    if not html:
        return None
    for match in IMG_SRC_RE.finditer(html):
        src = match.group(2).strip()
        if src:
            return src
    return None


def extract_image(
    item: RawItem,
    category: str,
    fallbacks: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Resolves an illustrative image URL for `item`, or None."""
    for url in (item.get("enclosure_url"), item.get("media_url")):
        if url:
            return url

    embedded = find_embedded_image(item.get("html"))
    if embedded:
        return embedded

    if fallbacks is None:
        return None
    return fallbacks.get(category) or fallbacks.get(GENERIC_FALLBACK_KEY) or None
