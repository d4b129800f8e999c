import unittest
from datetime import datetime

from creativity_league import config
from creativity_league.rollover import RolloverDetector, Scheduler
from creativity_league.storage import MemoryStore, Storage, default_competitors

from tests.helpers import ScriptedRandom, make_env


class FlakyStore(MemoryStore):
    """Fails competitor writes until ``healthy`` is set."""

    def __init__(self):
        super().__init__()
        self.healthy = False

    def set(self, key, value):
        if key == config.COMPETITORS_KEY and not self.healthy:
            raise OSError("disk full")
        super().set(key, value)


class TestRolloverDetector(unittest.TestCase):
    def setUp(self) -> None:
        # Wednesday
        self.real, self.clock, self.storage = make_env(datetime(2026, 3, 4, 10, 0))
        self.days = []
        self.weeks = []
        self.detector = RolloverDetector(
            self.clock,
            on_day_rollover=lambda: self.days.append(self.clock.now().date()),
            on_week_rollover=lambda: self.weeks.append(self.clock.now().date()),
        )

    def test_first_poll_does_not_fire(self) -> None:
        self.detector.poll()
        self.assertEqual(self.days, [])
        self.assertEqual(self.weeks, [])

    def test_rapid_polling_fires_once(self) -> None:
        self.detector.poll()
        self.real.advance(hours=14)
        for _ in range(10):
            self.detector.poll()
        self.assertEqual(len(self.days), 1)

    def test_skipped_days_fire_once(self) -> None:
        self.detector.poll()
        self.real.advance(days=5)
        self.detector.poll()
        self.assertEqual(len(self.days), 1)
        # crossed into next week too
        self.assertEqual(len(self.weeks), 1)

    def test_sequential_days(self) -> None:
        self.detector.poll()
        for _ in range(3):
            self.real.advance(days=1)
            self.detector.poll()
        self.assertEqual(len(self.days), 3)
        self.assertEqual(self.weeks, [])

    def test_works_with_accelerated_clock(self) -> None:
        self.detector.poll()
        self.clock.enable()
        self.real.advance(seconds=5)
        self.detector.poll()
        self.assertEqual(self.days, [datetime(2026, 3, 5).date()])


class TestScheduler(unittest.TestCase):
    def setUp(self) -> None:
        self.real, self.clock, self.storage = make_env(datetime(2026, 3, 4, 15, 0))
        self.storage.save_install_date(datetime(2026, 2, 1, 9, 0))
        self.competitors = self.storage.load_competitors()
        self.events = []
        self.scheduler = Scheduler(
            self.clock, self.storage, self.competitors,
            on_day_rollover=lambda: self.events.append("day"),
            on_week_rollover=lambda: self.events.append("week"),
            on_competitors_changed=lambda c: self.events.append("competitors"),
            rng=ScriptedRandom(default=0.0),
        )

    def test_first_tick_catches_up(self) -> None:
        self.scheduler.tick()
        self.assertEqual(self.events, ["competitors"])
        self.assertTrue(all(c.points == 3 for c in self.competitors))

    def test_same_day_ticks_do_nothing(self) -> None:
        self.scheduler.tick()
        self.real.advance(hours=2)
        self.scheduler.tick()
        self.assertEqual(self.events, ["competitors"])

    def test_new_day(self) -> None:
        self.scheduler.tick()
        self.real.advance(days=1)
        self.scheduler.tick()
        self.assertEqual(self.events, ["competitors", "competitors", "day"])
        self.assertTrue(all(c.points == 6 for c in self.competitors))

    def test_failed_write_is_retried_next_tick(self) -> None:
        store = FlakyStore()
        storage = Storage(store)
        storage.save_install_date(datetime(2026, 2, 1, 9, 0))
        competitors = default_competitors()
        events = []
        scheduler = Scheduler(
            self.clock, storage, competitors,
            on_competitors_changed=lambda c: events.append("competitors"),
            rng=ScriptedRandom(default=0.0),
        )
        with self.assertRaises(OSError):
            scheduler.tick()
        self.assertIsNone(scheduler.last_catch_up_date)
        self.assertEqual(events, [])
        self.assertTrue(all(c.points == 0 for c in competitors))

        store.healthy = True
        scheduler.tick()
        self.assertEqual(events, ["competitors"])
        self.assertTrue(all(c.points == 3 for c in competitors))
        self.assertTrue(all(c.points == 3 for c in storage.load_competitors()))

    def test_stop(self) -> None:
        self.scheduler.stop()
        self.scheduler.tick()
        self.assertEqual(self.events, [])

    def test_clear_all_data(self) -> None:
        self.clock.enable()
        self.scheduler.tick()
        self.scheduler.clear_all_data()
        self.assertFalse(self.clock.is_enabled)
        self.assertIsNone(self.storage.load_install_date())
        self.assertTrue(all(c.points == 0 for c in self.competitors))
        self.assertIsNone(self.scheduler.detector.last_checked_date)


if __name__ == "__main__":
    unittest.main()
