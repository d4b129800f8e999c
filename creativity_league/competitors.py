"""Bot competitors: day-by-day catch-up scoring and the leaderboard."""
import copy
import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from . import config
from .clock import VirtualClock, date_only
from .models import Competitor, User
from .storage import Storage

logger = logging.getLogger(__name__)


@dataclass
class CatchUpResult:
    updated: bool
    days_walked: int = 0
    points_awarded: int = 0


def ensure_install_date(storage: Storage, now: datetime) -> datetime:
    installed = storage.load_install_date()
    if installed is None:
        installed = now
        storage.save_install_date(installed)
        logger.info("Install date recorded: %s", installed.isoformat())
    return installed


def suppress_today(installed: datetime, now: datetime) -> bool:
    """True when ``now`` is on the install date and before noon.

    Only the literal install date is special-cased.
    """
    return date_only(installed) == date_only(now) and now.hour < config.SUPPRESS_BEFORE_HOUR


def _walk(competitor: Competitor, today: date, now: datetime, suppress: bool, rng) -> int:
    if competitor.last_update is None:
        last_processed = today - timedelta(days=1)
    else:
        last_processed = date_only(competitor.last_update)
    if last_processed >= today:
        return 0

    days = 0
    cursor = last_processed + timedelta(days=1)
    while cursor <= today:
        if not (cursor == today and suppress):
            if rng.random() < competitor.daily_probability:
                competitor.points += config.CATCH_UP_REWARD
        cursor += timedelta(days=1)
        days += 1
    competitor.last_update = now
    return days


def process_catch_up(competitors: List[Competitor], clock: VirtualClock, storage: Storage,
                     rng: Optional[Any] = None) -> CatchUpResult:
    """Replay every missed calendar day for each competitor and persist.

    ``competitors`` is updated in place only after the whole list has been
    written, so a failed save leaves both storage and memory untouched.
    ``rng`` needs a single ``random()`` method returning a float in [0, 1).
    """
    rng = rng or random.Random()
    now = clock.now()
    today = date_only(now)
    suppress = suppress_today(ensure_install_date(storage, now), now)

    working = copy.deepcopy(competitors)
    before = sum(c.points for c in working)
    days = 0
    for competitor in working:
        days += _walk(competitor, today, now, suppress, rng)

    if not days:
        return CatchUpResult(updated=False)

    storage.save_competitors(working)
    competitors[:] = working
    awarded = sum(c.points for c in working) - before
    logger.info("Catch-up to %s: %d competitor-days, +%d points", today.isoformat(), days, awarded)
    return CatchUpResult(updated=True, days_walked=days, points_awarded=awarded)


# -----------------------------
# Leaderboard
# -----------------------------

def build_leaderboard(user: User, competitors: List[Competitor]) -> List[Dict[str, Any]]:
    rows = [{"name": user.username, "avatar": user.avatar_ref, "points": user.total_points,
             "is_user": True, "competitor": None}]
    for c in competitors:
        rows.append({"name": c.name, "avatar": c.avatar_ref, "points": c.points,
                     "is_user": False, "competitor": c})
    # stable sort keeps the user ahead on ties
    rows.sort(key=lambda r: r["points"], reverse=True)
    for rank, row in enumerate(rows, start=1):
        row["rank"] = rank
    return rows


def edit_competitor(competitors: List[Competitor], index: int, storage: Storage,
                    name: str, avatar_ref: Optional[str] = None):
    competitor = competitors[index]
    competitor.name = name.strip() or competitor.name
    if avatar_ref is not None:
        competitor.avatar_ref = avatar_ref
    storage.save_competitors(competitors)
