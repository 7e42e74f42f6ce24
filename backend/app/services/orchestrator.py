"""Assemble a pronunciation response from cache or from the three upstreams.

Pipeline for a cache miss:
  1. Synthesize audio, resolve phonetics, fetch definitions (concurrently)
  2. Merge text fields by source precedence
  3. Store the document in the response cache with its ETag
"""

import asyncio
import base64
import logging
from dataclasses import dataclass

from app.domain import DefinitionResult, Example, PhoneticResolution, PronunciationRequest
from app.models import AudioMetadata, ExampleOut, ResponseDocument
from app.services.definitions import MAX_EXAMPLES, MAX_MEANINGS, DefinitionAggregator
from app.services.fallback import first_present
from app.services.phonetic_resolver import PhoneticResolver
from app.services.response_cache import CachedResponse, ResponseCache
from app.services.synthesizer import Synthesizer
from app.services.voices import voice_for

logger = logging.getLogger(__name__)

PHONETIC_PLACEHOLDER = "Phonetic transcription not available."


@dataclass(frozen=True)
class PronunciationOutcome:
    response: CachedResponse | None
    cache_hit: bool = False
    not_modified: bool = False


class PronunciationOrchestrator:
    def __init__(
        self,
        response_cache: ResponseCache,
        resolver: PhoneticResolver,
        definitions: DefinitionAggregator,
        synthesizer: Synthesizer,
    ):
        self._responses = response_cache
        self._resolver = resolver
        self._definitions = definitions
        self._synthesizer = synthesizer

    async def pronounce(
        self, request: PronunciationRequest, if_none_match: str | None = None
    ) -> PronunciationOutcome:
        """Serve *request* from cache if possible, otherwise build it.

        Raises ``SynthesisError`` when no audio could be produced; every
        other upstream problem degrades to placeholder text.
        """
        lookup = self._responses.lookup(request, if_none_match)
        if lookup.not_modified:
            return PronunciationOutcome(lookup.response, cache_hit=True, not_modified=True)
        if lookup.hit:
            logger.debug("Response cache hit for %s", request.cache_key)
            return PronunciationOutcome(lookup.response, cache_hit=True)

        response = await self._responses.get_or_build(request, lambda: self._build(request))
        return PronunciationOutcome(response)

    async def _build(self, request: PronunciationRequest) -> ResponseDocument:
        voice = voice_for(request.accent, request.gender, request.speed)
        audio, resolution, definition = await asyncio.gather(
            self._synthesizer.synthesize(request.word, voice),
            self._resolve(request),
            self._define(request.word),
        )
        logger.info(
            "Built response for %s (phonetic from %s)",
            request.cache_key, resolution.source or ("api" if definition.phonetic else "none"),
        )
        return merge(request, voice.name, voice.audio_format, audio, resolution, definition)

    async def _resolve(self, request: PronunciationRequest) -> PhoneticResolution:
        try:
            return await self._resolver.resolve(request.word, request.accent)
        except Exception:
            logger.exception("Phonetic resolution failed for %r", request.word)
            return PhoneticResolution(complete=False)

    async def _define(self, word: str) -> DefinitionResult:
        try:
            return await self._definitions.fetch(word)
        except Exception:
            logger.exception("Definition fetch failed for %r", word)
            return DefinitionResult()


def merge(
    request: PronunciationRequest,
    voice_id: str,
    audio_format: str,
    audio: bytes,
    resolution: PhoneticResolution,
    definition: DefinitionResult,
) -> ResponseDocument:
    """Combine branch results; datasets take precedence over the API."""
    api_meanings = () if definition.degraded else definition.meanings
    meanings = first_present(resolution.meanings, api_meanings, definition.meanings, default=())

    examples = [Example(text) for text in resolution.examples]
    examples += definition.examples

    return ResponseDocument(
        audio_content=base64.b64encode(audio).decode("ascii"),
        phonetic=first_present(resolution.phonetic, definition.phonetic, default=PHONETIC_PLACEHOLDER),
        meanings=list(meanings[:MAX_MEANINGS]),
        examples=[
            ExampleOut(text=ex.text, part_of_speech=ex.part_of_speech)
            for ex in examples[:MAX_EXAMPLES]
        ],
        synonyms=list(first_present(resolution.synonyms, definition.synonyms, default=())),
        antonyms=list(first_present(resolution.antonyms, definition.antonyms, default=())),
        audio_metadata=AudioMetadata(
            format=audio_format,
            accent=request.accent,
            voice_id=voice_id,
            speed=request.speed,
        ),
    )
