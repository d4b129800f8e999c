import json
import os
import tempfile
import unittest
from datetime import datetime

from creativity_league import config
from creativity_league.models import User, WeeklyTask
from creativity_league.storage import JsonFileStore, MemoryStore, Storage


class TestJsonFileStore(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.store = JsonFileStore(os.path.join(self.tmp.name, "save"))

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_get_set_remove(self) -> None:
        self.assertIsNone(self.store.get("user_data"))
        self.store.set("user_data", b'{"a": 1}')
        self.assertEqual(self.store.get("user_data"), b'{"a": 1}')
        self.assertEqual(self.store.keys(), ["user_data"])
        self.store.remove("user_data")
        self.store.remove("user_data")
        self.assertIsNone(self.store.get("user_data"))

    def test_clear_leaves_no_temp_files(self) -> None:
        self.store.set("a", b"1")
        self.store.set("b", b"2")
        self.store.clear()
        self.assertEqual(os.listdir(self.store.directory), [])


class TestStorage(unittest.TestCase):
    def setUp(self) -> None:
        self.storage = Storage(MemoryStore())

    def test_defaults_are_created_and_persisted(self) -> None:
        user = self.storage.load_user()
        self.assertEqual(user, User())
        self.assertIsNotNone(self.storage.store.get(config.USER_KEY))
        comps = self.storage.load_competitors()
        self.assertEqual(len(comps), 19)
        self.assertEqual(comps[0].daily_probability, 0.05)
        self.assertEqual(comps[-1].daily_probability, 0.95)
        raw = json.loads(self.storage.store.get(config.COMPETITORS_KEY))
        self.assertEqual([c["name"] for c in raw], config.COMPETITOR_NAMES)

    def test_malformed_user_falls_back(self) -> None:
        self.storage.store.set(config.USER_KEY, b'{"username": 3}')
        with self.assertLogs("creativity_league.storage", level="WARNING"):
            user = self.storage.load_user()
        self.assertEqual(user.total_points, 0)

    def test_malformed_competitors_fall_back(self) -> None:
        self.storage.store.set(config.COMPETITORS_KEY, b"\xff\xfe")
        with self.assertLogs("creativity_league.storage", level="WARNING"):
            comps = self.storage.load_competitors()
        self.assertEqual(len(comps), 19)

    def test_weekly_task_json_schema(self) -> None:
        task = WeeklyTask(id="1", task_text="Run", points=4,
                          created_date=datetime(2026, 3, 2, 9, 30), week_key="2026-3-2")
        self.storage.save_weekly_task(task)
        raw = json.loads(self.storage.store.get(config.WEEKLY_TASK_KEY))
        self.assertEqual(raw["createdDate"], "2026-03-02T09:30:00")
        self.assertIsNone(raw["completedDate"])
        self.assertEqual(self.storage.load_weekly_task(), task)

    def test_clear_all(self) -> None:
        self.storage.load_user()
        self.storage.save_install_date(datetime(2026, 3, 2))
        self.storage.clear_all()
        self.assertEqual(self.storage.store.keys(), [])


if __name__ == "__main__":
    unittest.main()
