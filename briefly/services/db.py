"""
Database service for subscribers and editor's notes.

This module provides the FirestoreStore class which interfaces with Google
Firestore to read subscriber records and to persist one editor's note per
calendar day.
"""

import datetime
import logging
from typing import Any, List, Optional, Protocol

from google.cloud import firestore  # type: ignore

from briefly.errors import StoreUnavailableError
from briefly.models import EditorsNote, Subscriber

logger = logging.getLogger(__name__)

SUBSCRIBERS_COLLECTION = "subscribers"
NOTES_COLLECTION = "editors_notes"


class SubscriberStore(Protocol):
    def read_all_subscribers(self) -> List[Subscriber]:
        """Returns every subscriber record; raises StoreUnavailableError."""


class NoteStore(Protocol):
    def upsert_note(self, date: datetime.date, content: str) -> EditorsNote:
        """Creates or replaces the note for `date`."""


def _to_subscriber(doc_id: str, data: Optional[dict]) -> Optional[Subscriber]:
    """Validates a raw document into a Subscriber, or None if unusable."""
    data = data or {}
    email = (data.get("email") or "").strip()
    if not email:
        logger.warning("Skipping subscriber record %s without an email.", doc_id)
        return None

    interests: Any = data.get("interests") or []
    if isinstance(interests, str):
        interests = [interests]
    if not isinstance(interests, list):
        logger.warning("Ignoring malformed interests for %s.", email)
        interests = []

    return Subscriber(
        email=email, interests=[str(i) for i in interests if isinstance(i, str)]
    )


class FirestoreStore(SubscriberStore, NoteStore):
    """Subscriber and note storage backed by Google Firestore."""

    def __init__(self, project_id: str, client: Optional[Any] = None):
        try:
            self.db = client or firestore.Client(project=project_id)
        except Exception as e:  # pylint: disable=broad-exception-caught
            raise StoreUnavailableError(f"Firestore connection failed: {e}") from e
        self.subscribers = self.db.collection(SUBSCRIBERS_COLLECTION)
        self.notes = self.db.collection(NOTES_COLLECTION)
        logger.info("Connected to Firestore project %s.", project_id)

    def read_all_subscribers(self) -> List[Subscriber]:
        """Reads every subscriber document."""
        try:
            snapshots = list(self.subscribers.stream())
        except Exception as e:  # pylint: disable=broad-exception-caught
            raise StoreUnavailableError(f"Could not read subscribers: {e}") from e

        subscribers = []
        for snap in snapshots:
            subscriber = _to_subscriber(snap.id, snap.to_dict())
            if subscriber is not None:
                subscribers.append(subscriber)
        return subscribers

    def upsert_note(self, date: datetime.date, content: str) -> EditorsNote:
        """Writes the note under its ISO date; a rerun overwrites it."""
        note = EditorsNote(date=date.isoformat(), content=content)
        self.notes.document(note.date).set(
            {
                "date": note.date,
                "content": note.content,
                "updated_at": datetime.datetime.now(datetime.timezone.utc),
            }
        )
        logger.info("Saved editor's note for %s.", note.date)
        return note
