"""
Tests for session persistence
"""

import json
import shutil
import tempfile
import time
import unittest
from pathlib import Path

from roastpred.params import RoastParameters
from roastpred.sessions import RoastSession, SessionStore, SessionStoreError


class TestSessionStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.store = SessionStore(self.tmpdir / "store")

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_save_assigns_id_and_timestamp(self):
        session_id = self.store.save(RoastSession(name="Kenya"))
        self.assertTrue(session_id)
        sessions = self.store.list()
        self.assertEqual(len(sessions), 1)
        self.assertEqual(sessions[0].id, session_id)
        self.assertEqual(sessions[0].name, "Kenya")
        self.assertIsNotNone(sessions[0].updated_at)
        self.assertTrue((self.tmpdir / "store" / "sessions.db").exists())

    def test_round_trip(self):
        session = RoastSession(
            name="Guji",
            params=RoastParameters(drop_temp=208, total_time=510),
            actuals=[(120, 131.5), (180, 146.0)],
            interval_seconds=60,
            ror_unit="30s",
        )
        session_id = self.store.save(session)
        loaded = self.store.load(session_id)
        self.assertEqual(loaded.params, session.params)
        self.assertEqual(loaded.actuals, [(120.0, 131.5), (180.0, 146.0)])
        self.assertEqual(loaded.interval_seconds, 60)
        self.assertEqual(loaded.ror_unit, "30s")

    def test_upsert_by_id(self):
        session_id = self.store.save(RoastSession(name="first"))
        self.store.save(RoastSession(name="renamed", id=session_id))
        sessions = self.store.list()
        self.assertEqual(len(sessions), 1)
        self.assertEqual(sessions[0].name, "renamed")

    def test_newest_first(self):
        self.store.save(RoastSession(name="old"))
        time.sleep(0.01)
        self.store.save(RoastSession(name="new"))
        self.assertEqual([s.name for s in self.store.list()], ["new", "old"])

    def test_delete_is_idempotent(self):
        session_id = self.store.save(RoastSession(name="gone"))
        self.store.delete(session_id)
        self.store.delete(session_id)
        self.store.delete("never-existed")
        self.assertEqual(self.store.list(), [])
        self.assertIsNone(self.store.load(session_id))

    def test_fallback_to_json(self):
        # A directory where the database file should be makes SQLite unusable
        (self.tmpdir / "store" / "sessions.db").mkdir(parents=True)
        session_id = self.store.save(RoastSession(name="fallback"))

        with open(self.tmpdir / "store" / "sessions.json", encoding="utf-8") as f:
            records = json.load(f)
        self.assertEqual(records[0]["id"], session_id)
        self.assertEqual([s.name for s in self.store.list()], ["fallback"])

        self.store.delete(session_id)
        self.assertEqual(self.store.list(), [])

    def test_both_stores_unavailable(self):
        blocker = self.tmpdir / "blocker"
        blocker.write_text("not a directory")
        store = SessionStore(blocker)
        with self.assertRaises(SessionStoreError):
            store.save(RoastSession(name="nowhere"))


if __name__ == '__main__':
    unittest.main()
