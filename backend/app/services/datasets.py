"""Hosted dataset access: the bulk phonetic table and per-letter dictionary shards.

Both live as JSON files under ``settings.DATA_BASE_URL`` (``phonetics.json``,
``a.json`` … ``z.json``). Raw bytes are fetched with httpx, parsed once, and
kept in a ``DatasetCache`` so cold starts hit the network a single time.
"""

import json
import logging
import string
from typing import Any, Protocol

import httpx

from app.domain import LetterShard, PhoneticEntry
from app.errors import DatasetLoadError
from app.services.dataset_cache import DatasetCache
from app.services.etag import make_etag
from app.services.voices import UK, US

logger = logging.getLogger(__name__)

LETTERS = frozenset(string.ascii_lowercase)

# Field names seen in the hosted files for each region.
REGION_FIELDS = {
    US: ("US", "us", "us_ipa"),
    UK: ("UK", "uk", "uk_ipa"),
}


class DatasetFetcher(Protocol):
    async def fetch(self, key: str) -> bytes: ...


class HttpDatasetFetcher:
    """``FetchDataset(key)`` over HTTP: GET ``<base_url><key>.json``."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, timeout: float = 5.0):
        self._client = client
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout

    async def fetch(self, key: str) -> bytes:
        url = f"{self._base_url}{key}.json"
        try:
            response = await self._client.get(url, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DatasetLoadError(key, str(exc) or type(exc).__name__) from exc
        logger.info("Fetched dataset %s (%d bytes)", key, len(response.content))
        return response.content


# ── Parsing ─────────────────────────────────────────────────

def first_alternative(value: Any) -> str | None:
    """Reduce a possibly multi-valued transcription to its first form."""
    if isinstance(value, (list, tuple)):
        value = next((v for v in value if isinstance(v, str) and v.strip()), None)
    if not isinstance(value, str):
        return None
    first = value.split(",")[0].strip()
    return first or None


def regional_form(record: dict[str, Any], region: str) -> str | None:
    for field_name in REGION_FIELDS[region]:
        form = first_alternative(record.get(field_name))
        if form:
            return form
    return None


def string_list(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return ()
    return tuple(v.strip() for v in value if isinstance(v, str) and v.strip())


def parse_phonetics(raw: bytes) -> dict[str, PhoneticEntry]:
    """Parse the bulk phonetic table.

    Accepts either ``{"word": {"US": ..., "UK": ..., "examples": [...]}}`` or
    a list of records carrying a ``word`` field. Keys are case-folded; the
    first record for a word wins.
    """
    data = json.loads(raw)
    if isinstance(data, dict):
        records = [
            {**record, "word": word}
            for word, record in data.items()
            if isinstance(record, dict)
        ]
    elif isinstance(data, list):
        records = [r for r in data if isinstance(r, dict)]
    else:
        raise ValueError(f"unexpected phonetic dataset root: {type(data).__name__}")

    table: dict[str, PhoneticEntry] = {}
    for record in records:
        word = str(record.get("word") or "").strip().casefold()
        if not word or word in table:
            continue
        table[word] = PhoneticEntry(
            word=word,
            regional_forms={region: regional_form(record, region) for region in REGION_FIELDS},
            curated_examples=string_list(record.get("examples")),
        )
    return table


def parse_shard(letter: str, raw: bytes) -> LetterShard:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"shard {letter!r} is not a JSON object")
    entries = {
        str(word).strip().casefold(): record
        for word, record in data.items()
        if isinstance(record, dict)
    }
    return LetterShard(letter=letter, entries=entries, raw=raw)


# ── Store ───────────────────────────────────────────────────

class DatasetStore:
    """Typed accessors over a shared ``DatasetCache``.

    Load failures surface as ``DatasetLoadError``; they are never cached, so
    the next caller retries.
    """

    def __init__(
        self,
        fetcher: DatasetFetcher,
        cache: DatasetCache,
        *,
        phonetics_key: str = "phonetics",
        phonetics_ttl: float | None = 604800,
        shard_ttl: float | None = 86400,
    ):
        self._fetcher = fetcher
        self.cache = cache
        self.phonetics_key = phonetics_key
        self._phonetics_ttl = phonetics_ttl
        self._shard_ttl = shard_ttl

    async def phonetics(self) -> dict[str, PhoneticEntry]:
        return await self.cache.get_or_load(
            self.phonetics_key, self._load_phonetics, self._phonetics_ttl
        )

    async def shard(self, letter: str) -> LetterShard:
        """Return the shard for *letter* (must be a–z)."""
        entry = await self.shard_entry(letter)
        return entry.value

    async def shard_entry(self, letter: str):
        """Cache entry for *letter*'s shard; its fingerprint is the ETag."""
        if letter not in LETTERS:
            raise ValueError(f"not a shard letter: {letter!r}")
        return await self.cache.get_or_load_entry(
            f"shard:{letter}",
            lambda: self._load_shard(letter),
            self._shard_ttl,
            fingerprint=lambda shard: make_etag(shard.raw),
        )

    async def reload_phonetics(self) -> dict[str, PhoneticEntry]:
        """Drop the cached phonetic table and load it again."""
        self.cache.invalidate(self.phonetics_key)
        logger.info("Reloading phonetic dataset %s", self.phonetics_key)
        return await self.phonetics()

    async def _load_phonetics(self) -> dict[str, PhoneticEntry]:
        raw = await self._fetcher.fetch(self.phonetics_key)
        try:
            table = parse_phonetics(raw)
        except ValueError as exc:
            raise DatasetLoadError(self.phonetics_key, f"unparseable: {exc}") from exc
        logger.info("Loaded %d phonetic entries", len(table))
        return table

    async def _load_shard(self, letter: str) -> LetterShard:
        raw = await self._fetcher.fetch(letter)
        try:
            return parse_shard(letter, raw)
        except ValueError as exc:
            raise DatasetLoadError(letter, f"unparseable: {exc}") from exc
