"""Virtual clock and calendar helpers.

All datetimes are naive local time; day and week boundaries are local
midnight and local Monday 00:00.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

from . import config


@dataclass
class VirtualClockState:
    enabled: bool = False
    wall_clock_anchor: Optional[datetime] = None
    virtual_anchor: Optional[datetime] = None
    last_virtual_time: Optional[datetime] = None


class VirtualClock:
    """Produces "now", optionally running faster than real time.

    While enabled, virtual time advances ``speed_multiplier`` times faster
    than the real clock. Disabling freezes virtual time at the value
    reached, and enabling again resumes from there.
    """

    def __init__(self, real_now: Callable[[], datetime] = datetime.now,
                 speed_multiplier: float = config.SPEED_MULTIPLIER):
        self._real_now = real_now
        self.speed_multiplier = speed_multiplier
        self.state = VirtualClockState()

    @property
    def is_enabled(self) -> bool:
        return self.state.enabled

    def _virtual_at(self, real: datetime) -> datetime:
        s = self.state
        elapsed = real - s.wall_clock_anchor
        micros = elapsed / timedelta(microseconds=1) * self.speed_multiplier
        return s.virtual_anchor + timedelta(microseconds=round(micros))

    def now(self) -> datetime:
        s = self.state
        if not s.enabled or s.wall_clock_anchor is None or s.virtual_anchor is None:
            return s.last_virtual_time or self._real_now()
        return self._virtual_at(self._real_now())

    def enable(self):
        s = self.state
        real = self._real_now()
        if s.enabled and s.wall_clock_anchor is not None and s.virtual_anchor is not None:
            # re-anchor at the current virtual value so nothing jumps
            s.virtual_anchor = self._virtual_at(real)
        else:
            s.virtual_anchor = s.last_virtual_time or real
        s.wall_clock_anchor = real
        s.enabled = True

    def disable(self):
        s = self.state
        if not s.enabled:
            return
        s.last_virtual_time = self.now()
        s.enabled = False
        s.wall_clock_anchor = None
        s.virtual_anchor = None

    def reset(self):
        self.state = VirtualClockState()


# -----------------------------
# Calendar helpers
# -----------------------------

DateLike = Union[date, datetime]


def date_only(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def day_key(value: DateLike) -> str:
    d = date_only(value)
    return f"{d.year}-{d.month}-{d.day}"


def week_start(value: DateLike) -> date:
    d = date_only(value)
    return d - timedelta(days=(d.isoweekday() - 1) % 7)


def week_key(value: DateLike) -> str:
    """Monday-anchored week id, e.g. ``2026-10-19``.

    Unpadded so it matches keys already written by older installs.
    """
    monday = week_start(value)
    return f"{monday.year}-{monday.month}-{monday.day}"


def until_midnight(now: datetime) -> timedelta:
    nxt = datetime.combine(now.date() + timedelta(days=1), datetime.min.time())
    return max(timedelta(0), nxt - now)


def until_next_week(now: datetime) -> timedelta:
    days = (8 - now.isoweekday()) % 7 or 7
    nxt = datetime.combine(now.date() + timedelta(days=days), datetime.min.time())
    return max(timedelta(0), nxt - now)


def format_countdown(remaining: timedelta) -> str:
    total = max(0, int(remaining.total_seconds()))
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    if days > 0:
        return f"{days}d {hours}h {minutes}m {seconds}s"
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
