"""Finished pronunciation responses keyed by (word, accent, gender, speed)."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from app.domain import PronunciationRequest
from app.models import ResponseDocument
from app.services.dataset_cache import DatasetCache
from app.services.etag import etag_matches, make_etag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedResponse:
    document: ResponseDocument
    etag: str
    stored_at: float


@dataclass(frozen=True)
class Lookup:
    """Outcome of a response-cache consultation."""

    response: CachedResponse | None
    not_modified: bool = False

    @property
    def hit(self) -> bool:
        return self.response is not None


class ResponseCache:
    def __init__(self, cache: DatasetCache):
        self._cache = cache

    @staticmethod
    def fingerprint(request: PronunciationRequest) -> str:
        # Audio is deterministic for identical inputs, so the identity is enough.
        return make_etag(request.identity)

    def lookup(self, request: PronunciationRequest, if_none_match: str | None = None) -> Lookup:
        entry = self._cache.get_entry(request.cache_key)
        if entry is None:
            return Lookup(None)
        cached = CachedResponse(entry.value, entry.fingerprint, entry.stored_at)
        if etag_matches(if_none_match, cached.etag):
            return Lookup(cached, not_modified=True)
        return Lookup(cached)

    async def get_or_build(
        self,
        request: PronunciationRequest,
        build: Callable[[], Awaitable[ResponseDocument]],
    ) -> CachedResponse:
        """Return the cached response or build it once, however many callers wait."""
        entry = await self._cache.get_or_load_entry(
            request.cache_key,
            build,
            fingerprint=lambda _: self.fingerprint(request),
        )
        return CachedResponse(entry.value, entry.fingerprint, entry.stored_at)

    def __len__(self) -> int:
        return len(self._cache)
