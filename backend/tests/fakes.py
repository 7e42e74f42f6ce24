"""In-memory stand-ins for the upstreams and sample datasets."""

import asyncio
import json
from typing import Any

from app.errors import DatasetLoadError, DefinitionLookupError, SynthesisError


PHONETICS = {
    "color": {"US": "ˈkʌlər", "UK": "ˈkʌlə", "examples": ["What color is the sky?"]},
    "echo": {"US": "ˈɛkoʊ, ˈekoʊ"},
    "schedule": {"UK": "ˈʃɛdjuːl"},
}

SHARDS = {
    "c": {
        "cat": {
            "us_ipa": "kæt",
            "uk_ipa": "kat",
            "meanings": ["A small domesticated carnivorous mammal."],
            "examples": ["The cat sat on the mat."],
            "synonyms": ["feline"],
            "antonyms": [],
        },
        "color": {"us": "ˈkʌlɚ", "examples": ["Pick a color."]},
    },
    "e": {
        "echo": {"meanings": ["A reflected sound."], "examples": ["We heard an echo."]},
    },
    "h": {},
    "s": {},
}

HAPPY_PAYLOAD = [
    {
        "word": "happy",
        "phonetic": "/ˈhæpi/",
        "meanings": [
            {
                "partOfSpeech": "noun",
                "definitions": [{"definition": "A happy event.", "example": "The happies of life."}],
            },
            {
                "partOfSpeech": "adjective",
                "definitions": [
                    {"definition": "Having a feeling of joy.", "example": "A happy child."},
                    {"definition": "Fortunate; lucky."},
                ],
                "synonyms": ["glad", "joyful"],
                "antonyms": ["sad"],
            },
        ],
    }
]


class FakeFetcher:
    """In-memory ``FetchDataset`` that counts calls per key."""

    def __init__(self, datasets: dict[str, Any] | None = None, delay: float = 0.0):
        self.datasets = {
            key: value if isinstance(value, bytes) else json.dumps(value).encode("utf-8")
            for key, value in (datasets or {}).items()
        }
        self.delay = delay
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def count(self, key: str) -> int:
        return self.calls.count(key)

    async def fetch(self, key: str) -> bytes:
        self.calls.append(key)
        if self.delay:
            await asyncio.sleep(self.delay)
        if key in self.failing or key not in self.datasets:
            raise DatasetLoadError(key, "upstream unavailable")
        return self.datasets[key]


class FakeDictionary:
    def __init__(self, payloads: dict[str, Any] | None = None, delay: float = 0.0):
        self.payloads = payloads or {}
        self.delay = delay
        self.fail = False
        self.calls: list[str] = []

    async def lookup_word(self, word: str) -> Any:
        self.calls.append(word)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise DefinitionLookupError("dictionary down")
        return self.payloads.get(word, [])


class FakeSynthesizer:
    def __init__(self):
        self.fail = False
        self.calls: list[tuple[str, str, float]] = []

    async def synthesize(self, text, voice) -> bytes:
        self.calls.append((text, voice.name, voice.speaking_rate))
        if self.fail:
            raise SynthesisError("tts offline")
        return f"mp3:{text}:{voice.name}".encode("utf-8")


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


