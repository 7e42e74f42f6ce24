"""Definitions and example sentences from the Free Dictionary API.

``DefinitionAggregator.fetch()`` never raises: timeouts, HTTP errors and
empty payloads all turn into an empty result carrying a diagnostic meaning.
"""

import asyncio
import logging
from itertools import chain
from typing import Any, Iterator, Protocol
from urllib.parse import quote

import httpx

from app.domain import DefinitionResult, Example
from app.errors import DefinitionLookupError

logger = logging.getLogger(__name__)

MAX_MEANINGS = 3
MAX_EXAMPLES = 3
MAX_RELATED = 5

UNAVAILABLE_MESSAGE = "Definition not available at the moment."
NOT_FOUND_MESSAGE = "No definition found for this word."


class DefinitionProvider(Protocol):
    async def lookup_word(self, word: str) -> Any: ...


class DictionaryApiClient:
    """``LookupWord(word)`` against dictionaryapi.dev (or a compatible API)."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, timeout: float = 3.0):
        # Redirect limit comes from the client (httpx.AsyncClient(max_redirects=...)).
        self._client = client
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout

    async def lookup_word(self, word: str) -> Any:
        url = f"{self._base_url}{quote(word)}"
        try:
            response = await self._client.get(url, timeout=self._timeout, follow_redirects=True)
            if response.status_code == 404:
                return []
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise DefinitionLookupError(f"lookup of {word!r} failed: {exc}") from exc


def _senses(payload: Any) -> tuple[list[dict], list[dict]]:
    """Split the provider's senses into (adjectives, everything else)."""
    adjectives: list[dict] = []
    others: list[dict] = []
    for entry in payload if isinstance(payload, list) else []:
        if not isinstance(entry, dict):
            continue
        for meaning in entry.get("meanings") or []:
            if not isinstance(meaning, dict):
                continue
            if _text(meaning.get("partOfSpeech")).lower() == "adjective":
                adjectives.append(meaning)
            else:
                others.append(meaning)
    return adjectives, others


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _definition_slots(senses: list[dict]) -> Iterator[tuple[str, dict]]:
    for sense in senses:
        pos = _text(sense.get("partOfSpeech"))
        for slot in sense.get("definitions") or []:
            if isinstance(slot, dict):
                yield pos, slot


def _payload_phonetic(payload: Any) -> str | None:
    for entry in payload if isinstance(payload, list) else []:
        if not isinstance(entry, dict):
            continue
        if isinstance(entry.get("phonetic"), str) and entry["phonetic"].strip():
            return entry["phonetic"].strip()
        for phonetic in entry.get("phonetics") or []:
            text = phonetic.get("text") if isinstance(phonetic, dict) else None
            if isinstance(text, str) and text.strip():
                return text.strip()
    return None


def _related(senses: list[dict], field_name: str) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for sense in senses:
        words = chain(
            sense.get(field_name) or [],
            *((slot.get(field_name) or []) for slot in sense.get("definitions") or [] if isinstance(slot, dict)),
        )
        for word in words:
            if isinstance(word, str) and word.strip():
                seen.setdefault(word.strip(), None)
                if len(seen) >= MAX_RELATED:
                    return tuple(seen)
    return tuple(seen)


def select_definitions(payload: Any) -> DefinitionResult:
    """Pick up to three meanings and three examples, adjectives first.

    Walks the senses in order and stops as soon as both quotas are full.
    """
    adjectives, others = _senses(payload)
    ordered = adjectives + others

    meanings: list[str] = []
    examples: list[Example] = []
    for pos, slot in _definition_slots(ordered):
        definition = _text(slot.get("definition"))
        if definition and len(meanings) < MAX_MEANINGS and definition not in meanings:
            meanings.append(definition)
        example = _text(slot.get("example"))
        if example and len(examples) < MAX_EXAMPLES:
            examples.append(Example(text=example, part_of_speech=pos))
        if len(meanings) >= MAX_MEANINGS and len(examples) >= MAX_EXAMPLES:
            break

    return DefinitionResult(
        phonetic=_payload_phonetic(payload),
        meanings=tuple(meanings),
        examples=tuple(examples),
        synonyms=_related(ordered, "synonyms"),
        antonyms=_related(ordered, "antonyms"),
    )


class DefinitionAggregator:
    def __init__(self, provider: DefinitionProvider, timeout: float = 3.0):
        self._provider = provider
        self._timeout = timeout

    async def fetch(self, word: str) -> DefinitionResult:
        try:
            payload = await asyncio.wait_for(self._provider.lookup_word(word), self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Definition lookup for %r timed out after %.1fs", word, self._timeout)
            return _degraded(UNAVAILABLE_MESSAGE)
        except DefinitionLookupError as exc:
            logger.warning("%s", exc)
            return _degraded(UNAVAILABLE_MESSAGE)
        except Exception:
            logger.exception("Definition lookup for %r failed", word)
            return _degraded(UNAVAILABLE_MESSAGE)

        if not payload:
            return _degraded(NOT_FOUND_MESSAGE)
        result = select_definitions(payload)
        if not result.meanings and not result.examples and result.phonetic is None:
            return _degraded(NOT_FOUND_MESSAGE)
        return result


def _degraded(message: str) -> DefinitionResult:
    return DefinitionResult(meanings=(message,), diagnostic=message)
