"""
TTL caches for remote location suggestions.

Keys are lower-cased queries; values are the Remote-origin suggestions the
geocoding provider returned for that query (possibly an empty list). The
local dataset tier is never cached since it is free to recompute.
"""
from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
import time
from collections import OrderedDict
from typing import Callable, List, Optional, Sequence, Tuple

from domain.models import Suggestion, SuggestionOrigin

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
DATA_DIR = os.path.join(BASE_DIR, "data")
LOCATION_CACHE_DB_FILENAME = "location_cache.sqlite"
DEFAULT_TTL_SECONDS = 60 * 60

logger = logging.getLogger(__name__)


def _cache_key(query: str) -> str:
    return query.lower()


def _ensure_remote_only(value: Sequence[Suggestion]) -> None:
    for item in value:
        if item.origin != SuggestionOrigin.REMOTE:
            raise ValueError(f"Only remote suggestions can be cached, got {item.origin.value}: {item.name}")


class LocationCache:
    """In-process TTL cache, optionally capped with LRU eviction.

    An entry is served only while `now - fetched_at < ttl_seconds`. Expired
    entries are dropped on read and reported as a miss.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries or None
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, List[Suggestion]]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, query: str) -> Optional[List[Suggestion]]:
        key = _cache_key(query)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            fetched_at, value = entry
            if self._clock() - fetched_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug("[LOCATIONS] cache expired %r", key)
                return None
            self._entries.move_to_end(key)
            return list(value)

    def put(self, query: str, value: Sequence[Suggestion]) -> None:
        _ensure_remote_only(value)
        key = _cache_key(query)
        with self._lock:
            self._entries[key] = (self._clock(), list(value))
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("[LOCATIONS] cache evicted %r", evicted)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        """Number of stored keys. Expired entries count until a `get` evicts them."""
        with self._lock:
            return len(self._entries)


class SqliteLocationCache:
    """SQLite-backed variant so several API workers share fetched results.

    Same get/put contract as LocationCache. Storage errors are logged and
    behave as a miss (get) or a no-op (put).
    """

    def __init__(
        self,
        db_path: Optional[str] = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.db_path = db_path or os.path.join(DATA_DIR, LOCATION_CACHE_DB_FILENAME)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._lock = threading.Lock()
        self._init_schema()

    def _init_schema(self) -> None:
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS location_cache (
                    query_key TEXT PRIMARY KEY,
                    response_json TEXT NOT NULL,
                    fetched_at REAL NOT NULL
                )
                """
            )
            self._conn.commit()

    def get(self, query: str) -> Optional[List[Suggestion]]:
        key = _cache_key(query)
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT response_json, fetched_at FROM location_cache WHERE query_key=?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.warning("[LOCATIONS] cache read failed for %r: %s", key, exc)
            return None
        if not row:
            return None
        response_json, fetched_at = row
        if self._clock() - fetched_at >= self.ttl_seconds:
            logger.debug("[LOCATIONS] cache expired %r", key)
            return None
        try:
            payload = json.loads(response_json)
            return [Suggestion.from_dict(item) for item in payload or []]
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("[LOCATIONS] cache payload unreadable for %r: %s", key, exc)
            return None

    def put(self, query: str, value: Sequence[Suggestion]) -> None:
        _ensure_remote_only(value)
        key = _cache_key(query)
        payload = json.dumps([item.to_dict() for item in value])
        try:
            with self._lock:
                self._conn.execute(
                    "INSERT OR REPLACE INTO location_cache (query_key, response_json, fetched_at) VALUES (?, ?, ?)",
                    (key, payload, self._clock()),
                )
                self._conn.commit()
        except sqlite3.Error as exc:
            logger.warning("[LOCATIONS] cache write failed for %r: %s", key, exc)

    def clear(self) -> None:
        with self._lock:
            self._conn.execute("DELETE FROM location_cache")
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def build_location_cache(settings) -> LocationCache | SqliteLocationCache:
    """Pick the cache backend configured in settings."""
    if settings.LOCATION_CACHE_BACKEND == "sqlite":
        return SqliteLocationCache(
            db_path=settings.LOCATION_CACHE_PATH,
            ttl_seconds=settings.LOCATION_CACHE_TTL_SECONDS,
        )
    if settings.LOCATION_CACHE_BACKEND != "memory":
        logger.warning(
            "Unknown LOCATION_CACHE_BACKEND=%r; falling back to in-memory cache",
            settings.LOCATION_CACHE_BACKEND,
        )
    return LocationCache(
        ttl_seconds=settings.LOCATION_CACHE_TTL_SECONDS,
        max_entries=settings.LOCATION_CACHE_MAX_ENTRIES or None,
    )
