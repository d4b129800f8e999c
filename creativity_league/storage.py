"""Key-value persistence for the league.

Every piece of state lives under one key as a UTF-8 JSON blob. Read and
write errors from the underlying store propagate; blobs that fail to
decode are logged and treated as missing so callers fall back to defaults.
"""
import json
import logging
import os
import tempfile
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from . import config
from .models import Competitor, DailyPromptState, User, WeeklyTask

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore:
    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def set(self, key: str, value: bytes):
        raise NotImplementedError

    def remove(self, key: str):
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError

    def clear(self):
        for key in self.keys():
            self.remove(key)


class MemoryStore(KeyValueStore):
    def __init__(self, data: Optional[Dict[str, bytes]] = None):
        self.data: Dict[str, bytes] = dict(data or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes):
        self.data[key] = bytes(value)

    def remove(self, key: str):
        self.data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self.data)


class JsonFileStore(KeyValueStore):
    """One ``<key>.json`` file per key inside ``directory``."""

    SUFFIX = ".json"

    def __init__(self, directory: str = config.SAVE_DIR):
        self.directory = directory

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, key + self.SUFFIX)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "rb") as f:
            return f.read()

    def set(self, key: str, value: bytes):
        os.makedirs(self.directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp, self._path(key))
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def remove(self, key: str):
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)

    def keys(self) -> List[str]:
        if not os.path.isdir(self.directory):
            return []
        return [
            name[:-len(self.SUFFIX)]
            for name in sorted(os.listdir(self.directory))
            if name.endswith(self.SUFFIX) and not name.startswith(".")
        ]


def default_competitors() -> List[Competitor]:
    # competitor i rolls with probability (i + 1) * 5%
    return [
        Competitor(name=name, points=0, daily_probability=round((i + 1) * config.PROBABILITY_STEP, 2))
        for i, name in enumerate(config.COMPETITOR_NAMES)
    ]


class Storage:
    """Typed load/save on top of a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    # -- raw JSON --

    def read_json(self, key: str) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            logger.warning("Discarding malformed %s: %s", key, e)
            return None

    def write_json(self, key: str, data: Any):
        self.store.set(key, json.dumps(data, ensure_ascii=False).encode("utf-8"))

    def _decode(self, key: str, parse: Callable[[Any], T]) -> Optional[T]:
        data = self.read_json(key)
        if data is None:
            return None
        try:
            return parse(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Discarding malformed %s: %r", key, e)
            return None

    # -- user --

    def load_user(self) -> User:
        user = self._decode(config.USER_KEY, User.from_dict)
        if user is None:
            user = User()
            self.save_user(user)
        return user

    def save_user(self, user: User):
        self.write_json(config.USER_KEY, user.to_dict())

    # -- competitors --

    def load_competitors(self) -> List[Competitor]:
        competitors = self._decode(
            config.COMPETITORS_KEY, lambda data: [Competitor.from_dict(c) for c in data]
        )
        if not competitors:
            competitors = default_competitors()
            self.save_competitors(competitors)
        return competitors

    def save_competitors(self, competitors: List[Competitor]):
        self.write_json(config.COMPETITORS_KEY, [c.to_dict() for c in competitors])

    # -- daily prompts --

    def load_daily_prompts(self) -> Optional[DailyPromptState]:
        return self._decode(config.DAILY_PROMPTS_KEY, DailyPromptState.from_dict)

    def save_daily_prompts(self, state: DailyPromptState):
        self.write_json(config.DAILY_PROMPTS_KEY, state.to_dict())

    # -- weekly task --

    def load_weekly_task(self) -> Optional[WeeklyTask]:
        """Stored task regardless of week; see ``weekly.load_current_task``."""
        return self._decode(config.WEEKLY_TASK_KEY, WeeklyTask.from_dict)

    def save_weekly_task(self, task: WeeklyTask):
        self.write_json(config.WEEKLY_TASK_KEY, task.to_dict())

    def delete_weekly_task(self):
        self.store.remove(config.WEEKLY_TASK_KEY)

    # -- install record --

    def load_install_date(self) -> Optional[datetime]:
        return self._decode(config.INSTALL_DATE_KEY, datetime.fromisoformat)

    def save_install_date(self, when: datetime):
        self.write_json(config.INSTALL_DATE_KEY, when.isoformat())

    def clear_all(self):
        for key in config.ALL_KEYS:
            self.store.remove(key)
