import logging
from datetime import date
from typing import Any, Callable, List, Optional

from .clock import VirtualClock, date_only, week_key
from .competitors import process_catch_up
from .models import Competitor
from .storage import Storage

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


def _noop():
    pass


class RolloverDetector:
    """Fires day/week callbacks once per observed transition.

    The first poll only records the current day and week. Skipping several
    days between polls still produces a single day rollover.
    """

    def __init__(self, clock: VirtualClock, on_day_rollover: Callback = _noop,
                 on_week_rollover: Callback = _noop):
        self.clock = clock
        self.on_day_rollover = on_day_rollover
        self.on_week_rollover = on_week_rollover
        self.last_checked_date: Optional[date] = None
        self.last_checked_week_key: Optional[str] = None

    def poll(self):
        now = self.clock.now()
        today = date_only(now)
        current_week = week_key(now)

        if self.last_checked_date is None:
            self.last_checked_date = today
        elif today > self.last_checked_date:
            self.last_checked_date = today
            logger.info("Day rollover: %s", today.isoformat())
            self.on_day_rollover()

        if self.last_checked_week_key is None:
            self.last_checked_week_key = current_week
        elif current_week != self.last_checked_week_key:
            self.last_checked_week_key = current_week
            logger.info("Week rollover: %s", current_week)
            self.on_week_rollover()

    def reset(self):
        self.last_checked_date = None
        self.last_checked_week_key = None


class Scheduler:
    """Master tick: competitor catch-up followed by rollover detection.

    Meant to be called on a fixed cadence from a single event loop; calls
    must not overlap.
    """

    def __init__(self, clock: VirtualClock, storage: Storage, competitors: List[Competitor],
                 on_day_rollover: Callback = _noop, on_week_rollover: Callback = _noop,
                 on_competitors_changed: Callable[[List[Competitor]], None] = lambda c: None,
                 rng: Optional[Any] = None):
        self.clock = clock
        self.storage = storage
        self.competitors = competitors
        self.on_competitors_changed = on_competitors_changed
        self.rng = rng
        self.detector = RolloverDetector(clock, on_day_rollover, on_week_rollover)
        self.last_catch_up_date: Optional[date] = None
        self.stopped = False

    def tick(self):
        if self.stopped:
            return
        today = date_only(self.clock.now())
        if self.last_catch_up_date is None or today > self.last_catch_up_date:
            result = process_catch_up(self.competitors, self.clock, self.storage, self.rng)
            self.last_catch_up_date = today
            if result.updated:
                self.on_competitors_changed(self.competitors)
        self.detector.poll()

    def stop(self):
        self.stopped = True

    def clear_all_data(self):
        """Wipe storage and forget all clock and rollover history."""
        self.storage.clear_all()
        self.clock.reset()
        self.detector.reset()
        self.last_catch_up_date = None
        self.competitors[:] = self.storage.load_competitors()
        self.on_competitors_changed(self.competitors)
