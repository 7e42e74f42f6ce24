"""In-process key → value cache with expiry, a size bound and single-flight loads.

Used for the hosted datasets (bulk phonetics, letter shards), for per-word
phonetic resolutions and, through ``ResponseCache``, for finished responses.
Each instance is independent; nothing is shared between caches.

Concurrency model: asyncio, single event loop. ``get``/``set`` never await,
so they are atomic with respect to other coroutines. ``get_or_load`` keeps at
most one load task per key; callers arriving while it runs await the same
task and receive the same value or the same exception.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING: Any = object()


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    fingerprint: str | None
    stored_at: float          # wall clock, seconds since epoch
    expires_at: float | None  # cache clock; None = never


@dataclass
class _Flight:
    task: asyncio.Task
    started_at: float


class DatasetCache:
    """Expiring, size-bounded cache with per-key load deduplication.

    *default_ttl* and per-call *ttl* are in seconds; ``None`` or ``0`` means
    the entry never expires. When more than *max_entries* values are held,
    the least recently **set** entry is dropped (reads do not refresh it).
    An in-flight load older than *inflight_timeout* is no longer joined, so
    a hung upstream cannot wedge its key forever.
    """

    def __init__(
        self,
        name: str,
        *,
        default_ttl: float | None = None,
        max_entries: int = 1000,
        inflight_timeout: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.name = name
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self.inflight_timeout = inflight_timeout
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._inflight: dict[str, _Flight] = {}

    # ── Plain access ────────────────────────────────────────

    def get_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry

    def get(self, key: str, default: Any = None) -> Any:
        entry = self.get_entry(key)
        return default if entry is None else entry.value

    def set(
        self,
        key: str,
        value: Any,
        ttl: float | None = MISSING,
        *,
        fingerprint: str | None = None,
    ) -> CacheEntry:
        entry = self._make_entry(value, ttl, fingerprint)
        self._entries.pop(key, None)
        self._entries[key] = entry
        self._evict()
        return entry

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def invalidate(self, key: str) -> None:
        """Drop *key* and detach any running load so the next call refetches.

        A detached load still completes for its own waiters but never stores
        its value.
        """
        self._entries.pop(key, None)
        self._inflight.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get_entry(key) is not None

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)

    # ── Single-flight loading ───────────────────────────────

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl: float | None = MISSING,
        *,
        fingerprint: Callable[[Any], str | None] | None = None,
    ) -> Any:
        """Return the cached value for *key*, loading it at most once.

        *loader* is only called when no fresh entry exists and no load is
        running. Exceptions from the loader are raised to every caller that
        joined the load and nothing is cached.
        """
        entry = await self.get_or_load_entry(key, loader, ttl, fingerprint=fingerprint)
        return entry.value

    async def get_or_load_entry(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl: float | None = MISSING,
        *,
        fingerprint: Callable[[Any], str | None] | None = None,
    ) -> CacheEntry:
        entry = self.get_entry(key)
        if entry is not None:
            return entry

        flight = self._inflight.get(key)
        if flight is not None and self._clock() - flight.started_at > self.inflight_timeout:
            logger.warning(
                "%s: load for %r exceeded %.0fs, starting a new one",
                self.name, key, self.inflight_timeout,
            )
            del self._inflight[key]
            flight = None

        if flight is None:
            task = asyncio.ensure_future(self._load(key, loader, ttl, fingerprint))
            task.add_done_callback(_consume_exception)
            flight = _Flight(task, self._clock())
            self._inflight[key] = flight
        else:
            logger.debug("%s: joining in-flight load for %r", self.name, key)

        # Shield so one cancelled caller does not cancel the shared load.
        return await asyncio.shield(flight.task)

    def is_loading(self, key: str) -> bool:
        return key in self._inflight

    async def _load(self, key, loader, ttl, fingerprint) -> CacheEntry:
        me = asyncio.current_task()
        try:
            value = await loader()
            fp = fingerprint(value) if fingerprint is not None else None
            current = self._inflight.get(key)
            if current is None or current.task is not me:
                logger.debug("%s: load for %r was superseded, not storing", self.name, key)
                return self._make_entry(value, ttl, fp)
            return self.set(key, value, ttl, fingerprint=fp)
        except Exception:
            logger.warning("%s: load for %r failed", self.name, key, exc_info=True)
            raise
        finally:
            current = self._inflight.get(key)
            if current is not None and current.task is me:
                del self._inflight[key]

    # ── Housekeeping ────────────────────────────────────────

    def _make_entry(self, value, ttl, fingerprint) -> CacheEntry:
        if ttl is MISSING:
            ttl = self.default_ttl
        expires_at = self._clock() + ttl if ttl else None
        return CacheEntry(value, fingerprint, time.time(), expires_at)

    def _evict(self) -> None:
        if len(self._entries) <= self.max_entries:
            return
        self._purge_expired()
        while len(self._entries) > self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug("%s: evicted %r", self.name, key)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [
            k for k, e in self._entries.items()
            if e.expires_at is not None and e.expires_at <= now
        ]
        for k in expired:
            del self._entries[k]


def _consume_exception(task: asyncio.Task) -> None:
    # Waiters may all be gone (cancelled); keep asyncio from logging the
    # error as "never retrieved".
    if not task.cancelled():
        task.exception()
