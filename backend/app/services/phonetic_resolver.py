"""Phonetic transcription and curated examples for a word.

Sources, in order of precedence:
  1. the bulk phonetic table (regional form chosen by accent)
  2. the letter shard for the word's first letter
The dictionary API phonetic is the orchestrator's last resort, not ours.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from app.domain import PhoneticEntry, PhoneticResolution
from app.errors import DatasetLoadError
from app.services.dataset_cache import DatasetCache
from app.services.datasets import LETTERS, DatasetStore, regional_form, string_list
from app.services.fallback import FallbackChain
from app.services.voices import region_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Lookup:
    word: str
    regions: tuple[str, ...]
    bulk: PhoneticEntry | None
    shard: dict[str, Any] | None


class PhoneticResolver:
    def __init__(self, store: DatasetStore, cache: DatasetCache, ttl: float | None = None):
        self._store = store
        self._cache = cache
        self._ttl = ttl if ttl is not None else cache.default_ttl
        self._phonetics = FallbackChain([
            ("bulk", self._bulk_phonetic),
            ("shard", self._shard_phonetic),
        ])
        self._examples = FallbackChain([
            ("bulk", self._bulk_examples),
            ("shard", self._shard_examples),
        ])

    async def resolve(self, word: str, accent: str) -> PhoneticResolution:
        """Resolve *word* (already normalised) for *accent*.

        Never raises for missing data or dataset failures; a resolution built
        while a dataset was unavailable is returned but not cached.
        """
        key = f"{word}:{accent}"
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        resolution = await self._resolve(word, accent)
        if resolution.complete:
            self._cache.set(key, resolution, self._ttl)
        return resolution

    def forget(self) -> None:
        """Drop every cached resolution (after a dataset reload)."""
        self._cache.clear()

    async def _resolve(self, word: str, accent: str) -> PhoneticResolution:
        (bulk, bulk_ok), (shard, shard_ok) = await asyncio.gather(
            self._bulk_entry(word), self._shard_record(word)
        )
        lookup = _Lookup(word, region_order(accent), bulk, shard)

        phonetic = await self._phonetics.first(lookup)
        examples = await self._examples.first(lookup)
        shard = shard or {}

        if phonetic is None:
            logger.debug("No dataset phonetic for %r (%s)", word, accent)
        return PhoneticResolution(
            phonetic=phonetic.value if phonetic else None,
            source=phonetic.source if phonetic else None,
            examples=examples.value if examples else (),
            meanings=string_list(shard.get("meanings")),
            synonyms=string_list(shard.get("synonyms")),
            antonyms=string_list(shard.get("antonyms")),
            complete=bulk_ok and shard_ok,
        )

    # ── Source loading ──────────────────────────────────────

    async def _bulk_entry(self, word: str) -> tuple[PhoneticEntry | None, bool]:
        try:
            table = await self._store.phonetics()
        except DatasetLoadError as exc:
            logger.warning("Phonetic dataset unavailable: %s", exc)
            return None, False
        return table.get(word), True

    async def _shard_record(self, word: str) -> tuple[dict[str, Any] | None, bool]:
        letter = word[:1]
        if letter not in LETTERS:
            return None, True
        try:
            shard = await self._store.shard(letter)
        except DatasetLoadError as exc:
            logger.warning("Letter shard unavailable: %s", exc)
            return None, False
        return shard.entries.get(word), True

    # ── Strategies ──────────────────────────────────────────

    async def _bulk_phonetic(self, lookup: _Lookup) -> str | None:
        if lookup.bulk is None:
            return None
        forms = lookup.bulk.regional_forms
        return next((forms[r] for r in lookup.regions if forms.get(r)), None)

    async def _shard_phonetic(self, lookup: _Lookup) -> str | None:
        if lookup.shard is None:
            return None
        return next(
            (form for form in (regional_form(lookup.shard, r) for r in lookup.regions) if form),
            None,
        )

    async def _bulk_examples(self, lookup: _Lookup) -> tuple[str, ...]:
        return lookup.bulk.curated_examples if lookup.bulk else ()

    async def _shard_examples(self, lookup: _Lookup) -> tuple[str, ...]:
        return string_list(lookup.shard.get("examples")) if lookup.shard else ()
