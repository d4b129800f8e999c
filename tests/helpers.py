from datetime import datetime, timedelta

from creativity_league.clock import VirtualClock
from creativity_league.storage import MemoryStore, Storage


class FakeRealTime:
    """Settable stand-in for ``datetime.now``."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


class ScriptedRandom:
    """Returns queued values from ``random()``, then ``default``."""

    def __init__(self, values=(), default: float = 0.99):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


def make_env(start: datetime):
    real = FakeRealTime(start)
    clock = VirtualClock(real_now=real)
    storage = Storage(MemoryStore())
    return real, clock, storage
