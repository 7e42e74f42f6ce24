"""Internal value types passed between services.

Everything here is immutable once built: caches replace whole values and
never patch them in place.
"""

from dataclasses import dataclass
from typing import Any

from app.errors import ValidationError
from app.services.voices import SPEAKING_RATES, VOICE_PROFILES

DEFAULT_ACCENT = "en-US"
DEFAULT_SPEED = "normal"


@dataclass(frozen=True)
class PronunciationRequest:
    word: str
    accent: str = DEFAULT_ACCENT
    gender: str = "male"
    speed: str = DEFAULT_SPEED

    @classmethod
    def build(
        cls,
        word: str | None,
        accent: str | None = DEFAULT_ACCENT,
        is_male: bool = True,
        speed: str | None = DEFAULT_SPEED,
    ) -> "PronunciationRequest":
        """Normalise raw request fields, rejecting what cannot be served.

        Unknown speeds fall back to ``normal``; unknown accents are an error.
        """
        normalized = (word or "").strip().casefold()
        if not normalized:
            raise ValidationError("Word is required.")
        accent = accent or DEFAULT_ACCENT
        if accent not in VOICE_PROFILES:
            raise ValidationError("Invalid accent selected")
        if speed not in SPEAKING_RATES:
            speed = DEFAULT_SPEED
        return cls(
            word=normalized,
            accent=accent,
            gender="male" if is_male else "female",
            speed=speed,
        )

    @property
    def cache_key(self) -> str:
        return f"{self.word}_{self.accent}_{self.gender}_{self.speed}"

    @property
    def identity(self) -> str:
        """String the response validator is derived from."""
        return f"{self.word}{self.accent}{self.gender[0]}{self.speed}"


@dataclass(frozen=True)
class PhoneticEntry:
    word: str
    regional_forms: dict[str, str | None]
    curated_examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class LetterShard:
    letter: str
    entries: dict[str, dict[str, Any]]
    raw: bytes = b""


@dataclass(frozen=True)
class PhoneticResolution:
    phonetic: str | None = None
    source: str | None = None
    examples: tuple[str, ...] = ()
    meanings: tuple[str, ...] = ()
    synonyms: tuple[str, ...] = ()
    antonyms: tuple[str, ...] = ()
    complete: bool = True


@dataclass(frozen=True)
class Example:
    text: str
    part_of_speech: str = ""


@dataclass(frozen=True)
class DefinitionResult:
    phonetic: str | None = None
    meanings: tuple[str, ...] = ()
    examples: tuple[Example, ...] = ()
    synonyms: tuple[str, ...] = ()
    antonyms: tuple[str, ...] = ()
    diagnostic: str | None = None

    @property
    def degraded(self) -> bool:
        return self.diagnostic is not None

