import json
import os
import unittest

import pytest

from adaptive_learning.learner import SessionHistoryEntry
from adaptive_learning.persistence import SessionHistoryStore


@pytest.fixture
def store(tmp_path):
    return SessionHistoryStore(str(tmp_path / "history" / "sessions.json"))


def test_append_persists_to_disk(store):
    store.append(SessionHistoryEntry("Algebra", 80, 240, "2024-01-01T00:00:00Z"))
    store.append({"topic": "Geometry", "score": 40, "duration": 600})

    assert len(store) == 2
    with open(store.json_path, encoding="utf-8") as f:
        saved = json.load(f)
    assert saved[0] == {"topic": "Algebra", "score": 80, "duration": 240, "timestamp": "2024-01-01T00:00:00Z"}
    assert saved[1]["topic"] == "Geometry"


def test_reload_reads_existing_file(store):
    store.append(SessionHistoryEntry("Algebra", 80, 240))

    reopened = SessionHistoryStore(store.json_path)
    entries = reopened.entries()
    assert len(entries) == 1
    assert entries[0].topic == "Algebra"
    assert entries[0].score == 80


def test_clear_removes_file(store):
    store.append(SessionHistoryEntry("Algebra", 80, 240))
    store.clear()

    assert len(store) == 0
    assert not os.path.exists(store.json_path)
    store.clear()


def test_path_from_environment(setup_test_environment):
    assert SessionHistoryStore().json_path == str(setup_test_environment)


class TestCorruptHistory(unittest.TestCase):
    def test_unreadable_file_starts_empty(self):
        path = os.environ["SESSION_HISTORY_PATH"]
        with open(path, "w", encoding="utf-8") as f:
            f.write("{not json")
        self.assertEqual(len(SessionHistoryStore(path)), 0)

    def test_non_list_and_non_dict_entries_are_ignored(self):
        path = os.environ["SESSION_HISTORY_PATH"]
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"topic": "x"}, f)
        self.assertEqual(len(SessionHistoryStore(path)), 0)

        with open(path, "w", encoding="utf-8") as f:
            json.dump([{"topic": "x", "score": 10, "duration": 5}, "junk", 3], f)
        store = SessionHistoryStore(path)
        self.assertEqual(len(store), 1)
        self.assertEqual(store.entries()[0].score, 10)
