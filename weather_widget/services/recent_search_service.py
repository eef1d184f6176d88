"""Recent-search persistence: a bounded, de-duplicated list under one key."""

import json
from pathlib import Path
from typing import Iterable, Optional, Protocol

import redis
import structlog

from weather_widget.config import Settings, get_settings
from weather_widget.models.weather import CURRENT_LOCATION_LABEL

logger = structlog.get_logger(__name__)

MAX_RECENT_SEARCHES = 5


def add_recent_search(searches: Iterable[str], query: str) -> tuple[str, ...]:
    """Return the list with ``query`` moved to the front.

    Case-insensitive duplicates are dropped (the new casing wins) and the
    result is capped at ``MAX_RECENT_SEARCHES``. Empty queries and the
    current-location label leave the list unchanged.
    """
    searches = tuple(searches)
    if not query or query == CURRENT_LOCATION_LABEL:
        return searches
    folded = query.lower()
    kept = [s for s in searches if s.lower() != folded]
    return tuple([query, *kept][:MAX_RECENT_SEARCHES])


class KeyValueStorage(Protocol):
    """Synchronous string storage keyed by name."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Process-local storage, lost on restart."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStorage:
    """One JSON object file on local disk mapping keys to string values."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")


class RedisStorage:
    """Redis-backed storage for widgets served from several processes.

    Calls are blocking and run on the event loop thread; the socket timeout
    bounds how long one read or write can stall it.
    """

    def __init__(self, url: str, socket_timeout: float = 2.0):
        self._client = redis.Redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        self._client.set(key, value)


def build_storage(settings: Settings) -> KeyValueStorage:
    """Create the storage backend named by ``recent_searches_backend``."""
    if settings.recent_searches_backend == "redis":
        return RedisStorage(settings.redis_url, settings.redis_socket_timeout)
    if settings.recent_searches_backend == "memory":
        return MemoryStorage()
    return FileStorage(settings.recent_searches_path)


class RecentSearchService:
    """Load and persist the recent-search list.

    Storage problems never reach the caller: reads fall back to an empty list
    and failed writes are logged and dropped.
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None, key: Optional[str] = None):
        settings = get_settings()
        self.storage = storage if storage is not None else build_storage(settings)
        self.key = key or settings.recent_searches_key

    def load(self) -> tuple[str, ...]:
        """Read the persisted list.

        Returns:
            Stored queries, most recent first; empty if missing or unreadable
        """
        try:
            stored = self.storage.get(self.key)
            if not stored:
                return ()
            searches = json.loads(stored)
            if not isinstance(searches, list) or not all(isinstance(s, str) for s in searches):
                raise ValueError("recent searches must be a list of strings")
            return tuple(searches)
        except Exception as e:
            logger.error(
                "recent_searches_load_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return ()

    def save(self, searches: Iterable[str]) -> bool:
        """Persist the list.

        Returns:
            True if written, False if the storage rejected it
        """
        try:
            self.storage.set(self.key, json.dumps(list(searches)))
            return True
        except Exception as e:
            logger.error(
                "recent_searches_save_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def record(self, query: str) -> tuple[str, ...]:
        """Move ``query`` to the front of the stored list and persist it.

        Returns:
            The updated list (unchanged for empty or current-location queries)
        """
        current = self.load()
        updated = add_recent_search(current, query)
        if updated != current:
            self.save(updated)
        return updated
