"""
Editor's note generation.

The note is a single lead-in sentence built from the first category (in
registry order) that has content. It is pure: persistence happens in the
caller via NoteStore.upsert_note.
"""

import datetime
import re
from typing import Optional

from briefly.models import FeedSnapshot
from briefly.registry import format_label

FALLBACK_NOTE = (
    "Your daily briefing is ready. Here is what is happening around the world today."
)
DEFAULT_SUBJECT = "Your Daily Digest ⚡️"

_QUOTED_RE = re.compile(r'"(.+)"')


def generate_note(snapshot: FeedSnapshot, today: datetime.date) -> str:
    """Builds today's editor's note from the snapshot."""
    weekday = today.strftime("%A")
    for key, items in snapshot.items():
        if not items:
            continue
        titles = [(i.get("title") or "").strip() for i in items]
        title = next((t for t in titles if t), None)
        if title is None:
            return f"Happy {weekday}! Today's top story is in {format_label(key)}."
        return (
            f"Happy {weekday}! Today's top story in "
            f'{format_label(key)} is "{title}".'
        )
    return FALLBACK_NOTE


def quoted_title(note: str) -> Optional[str]:
    match = _QUOTED_RE.search(note)
    return match.group(1) if match else None


def subject_from_note(note: str, max_len: int = 28) -> str:
    """Derives a per-run subject line from the quoted story in the note."""
    title = quoted_title(note)
    if not title:
        return DEFAULT_SUBJECT
    if len(title) <= max_len:
        return f"Briefly: {title}"
    return f"Briefly: {title[:max_len].rstrip()}…"
