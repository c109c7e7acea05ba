"""Key-value cache contract the engine is written against.

The production store (database-backed, shared between processes) lives outside
this package. The engine relies on three operations only:

    get(key)                 -> fresh value or None
    get_with_stale(key)      -> CachedValue (fresh or expired) or None
    set(key, value, ttl, t)  -> store with a TTL in seconds and a type tag

Values handed to the store are JSON-compatible (dicts, lists, strings).
InMemoryCache is a process-local implementation of the same contract, used by
the CLI and the test-suite.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Protocol

from tusur_timetable.logging import get_logger

log = get_logger(__name__)

# Bump when the cached schedule shape changes; old entries are simply never read
SCHEDULE_CACHE_VERSION = "v2"
FACULTIES_CACHE_KEY = "faculties"
LOGOS_CACHE_KEY = "logos"
PHOTOS_CACHE_KEY = "photos"


class CacheType(str, Enum):
    """Type tag stored next to each entry (used for bulk invalidation)."""

    FACULTIES = "faculties"
    COURSES = "courses"
    SCHEDULE = "schedule"
    LOGOS = "logos"
    PHOTOS = "photos"
    RESOURCES = "resources"


@dataclass(frozen=True)
class CachedValue:
    """A cache hit that may be past its expiry."""

    value: Any
    is_stale: bool = False


class CacheStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def get_with_stale(self, key: str) -> CachedValue | None: ...

    async def set(
        self, key: str, value: Any, ttl_seconds: int, cache_type: str
    ) -> None: ...


def schedule_key(faculty_slug: str, group_slug: str, week_start: date) -> str:
    return (
        f"schedule:{SCHEDULE_CACHE_VERSION}:{faculty_slug}:{group_slug}:"
        f"{week_start.isoformat()}"
    )


def courses_key(faculty_slug: str) -> str:
    return f"courses:{faculty_slug}"


def resources_key(url: str) -> str:
    return f"resources:{url}"


@dataclass
class _Entry:
    value: Any
    expires_at: float
    cache_type: str


class InMemoryCache:
    """Process-local CacheStore.

    Expired entries are kept so get_with_stale() can still serve them;
    cleanup_expired() drops them explicitly.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._entries: dict[str, _Entry] = {}
        self._clock = clock

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None or entry.expires_at <= self._clock():
            return None
        return entry.value

    async def get_with_stale(self, key: str) -> CachedValue | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return CachedValue(entry.value, is_stale=entry.expires_at <= self._clock())

    async def set(
        self, key: str, value: Any, ttl_seconds: int, cache_type: str
    ) -> None:
        self._entries[key] = _Entry(
            value=value,
            expires_at=self._clock() + ttl_seconds,
            cache_type=str(getattr(cache_type, "value", cache_type)),
        )
        log.debug("cache_set", key=key, ttl_seconds=ttl_seconds)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def cleanup_expired(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in expired:
            del self._entries[key]
        if expired:
            log.info("cache_cleanup", removed=len(expired))
        return len(expired)

    async def delete_by_type(self, cache_type: str) -> int:
        tag = str(getattr(cache_type, "value", cache_type))
        doomed = [k for k, e in self._entries.items() if e.cache_type == tag]
        for key in doomed:
            del self._entries[key]
        return len(doomed)
