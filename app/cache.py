from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable

from pydantic import BaseModel, ConfigDict

log = logging.getLogger(__name__)


class CacheEntry(BaseModel):
    """One upstream response and the monotonic time it was fetched."""

    model_config = ConfigDict(frozen=True)

    value: Any = None
    fetched_at: float


class ReadWriteLock:
    """asyncio reader/writer lock: many readers or a single writer.

    New readers queue behind a waiting writer so writers cannot starve.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and not self._writers_waiting)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and not self._readers)
            finally:
                self._writers_waiting -= 1
                # readers held back by this writer must re-check
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class CacheStore:
    """In-memory response cache shared by every request handler.

    Holds at most one ``CacheEntry`` per key.  Entries are replaced whole
    on re-fetch and never removed; staleness is checked by the caller via
    ``is_stale`` so an expired entry stays readable until it is replaced.
    The store knows nothing about fetching, see ``read_through``.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._lock = ReadWriteLock()
        self._clock = clock

    async def get(self, key: str) -> CacheEntry | None:
        async with self._lock.read():
            return self._store.get(key)

    def is_stale(self, entry: CacheEntry, ttl_seconds: int, now: float | None = None) -> bool:
        """True once ``ttl_seconds`` whole seconds have elapsed since the fetch."""
        if now is None:
            now = self._clock()
        return int(now - entry.fetched_at) >= ttl_seconds

    async def put(self, key: str, value: Any, now: float | None = None) -> CacheEntry:
        entry = CacheEntry(value=value, fetched_at=self._clock() if now is None else now)
        async with self._lock.write():
            self._store[key] = entry
        return entry

    async def ages(self, now: float | None = None) -> dict[str, float]:
        """Return {key: seconds since fetch} for every cached key."""
        if now is None:
            now = self._clock()
        async with self._lock.read():
            return {k: round(now - v.fetched_at, 1) for k, v in self._store.items()}

    def keys(self) -> list[str]:
        return list(self._store.keys())

    def __len__(self) -> int:
        return len(self._store)


async def read_through(
    store: CacheStore,
    key: str,
    ttl_seconds: int,
    fetcher: Callable[[], Awaitable[Any]],
) -> Any:
    """Serve *key* from *store*, calling *fetcher* on a miss or stale entry.

    No lock is held while *fetcher* runs, so two concurrent misses on the
    same key both fetch and the later ``put`` wins.  A failed fetch
    propagates and leaves the store untouched.
    """
    entry = await store.get(key)
    if entry is not None and not store.is_stale(entry, ttl_seconds):
        log.debug("Cache hit %s", key)
        return entry.value

    log.info("Fetching %s from upstream", key)
    value = await fetcher()
    await store.put(key, value)
    return value
