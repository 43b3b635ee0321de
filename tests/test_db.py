"""Unit tests for the Firestore-backed store."""

import datetime
import unittest
from unittest.mock import MagicMock, patch

from briefly.errors import StoreUnavailableError
from briefly.services.db import FirestoreStore


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return self._data


class FakeDocument:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    def set(self, data):
        self.collection.docs[self.id] = dict(data)


class FakeCollection:
    def __init__(self):
        self.docs = {}

    def document(self, doc_id):
        return FakeDocument(self, doc_id)

    def stream(self):
        return [FakeSnapshot(k, v) for k, v in self.docs.items()]


class FakeClient:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())


class TestFirestoreStore(unittest.TestCase):
    def setUp(self):
        self.client = FakeClient()
        self.store = FirestoreStore("test-project", client=self.client)

    def test_upsert_note_twice_keeps_one(self):
        day = datetime.date(2024, 6, 3)

        self.store.upsert_note(day, "first")
        note = self.store.upsert_note(day, "second")

        docs = self.client.collection("editors_notes").docs
        self.assertEqual(list(docs.keys()), ["2024-06-03"])
        self.assertEqual(docs["2024-06-03"]["content"], "second")
        self.assertEqual(note.content, "second")

    def test_notes_for_different_days(self):
        self.store.upsert_note(datetime.date(2024, 6, 3), "a")
        self.store.upsert_note(datetime.date(2024, 6, 4), "b")
        self.assertEqual(len(self.client.collection("editors_notes").docs), 2)

    def test_read_all_subscribers(self):
        subs = self.client.collection("subscribers").docs
        subs["1"] = {"email": "a@example.com", "interests": ["tech", "ai"]}
        subs["2"] = {"email": " b@example.com ", "interests": None}
        subs["3"] = {"interests": ["tech"]}
        subs["4"] = {"email": "d@example.com", "interests": "sports"}

        result = self.store.read_all_subscribers()

        self.assertEqual(
            result,
            [
                {"email": "a@example.com", "interests": ["tech", "ai"]},
                {"email": "b@example.com", "interests": []},
                {"email": "d@example.com", "interests": ["sports"]},
            ],
        )

    def test_read_failure_is_store_unavailable(self):
        client = MagicMock()
        client.collection.return_value.stream.side_effect = RuntimeError("unreachable")
        store = FirestoreStore("test-project", client=client)

        with self.assertRaises(StoreUnavailableError):
            store.read_all_subscribers()

    def test_connection_failure_is_store_unavailable(self):
        with patch("briefly.services.db.firestore.Client", side_effect=RuntimeError("no creds")):
            with self.assertRaises(StoreUnavailableError):
                FirestoreStore("test-project")


if __name__ == "__main__":
    unittest.main()
