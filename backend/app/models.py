"""Pydantic models for API request/response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ── Pronunciation ───────────────────────────────────────────

class PronunciationIn(_CamelModel):
    word: str | None = ""
    accent: str | None = "en-US"
    is_male: bool = Field(True, alias="isMale")
    speed: str | None = "normal"


class ExampleOut(_CamelModel):
    text: str
    part_of_speech: str = Field("", alias="partOfSpeech")


class AudioMetadata(_CamelModel):
    format: str = "mp3"
    accent: str
    voice_id: str = Field(alias="voiceId")
    speed: str


class ResponseDocument(_CamelModel):
    """The unit stored in the response cache and returned to clients."""

    audio_content: str = Field(alias="audioContent")   # base64
    phonetic: str
    meanings: list[str] = []
    examples: list[ExampleOut] = []
    synonyms: list[str] = []
    antonyms: list[str] = []
    audio_metadata: AudioMetadata = Field(alias="audioMetadata")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


# ── Errors & status ─────────────────────────────────────────

class ErrorOut(BaseModel):
    error: str
    suggestion: str | None = None
    word: str | None = None


class HealthOut(BaseModel):
    status: str = "ok"
    timestamp: int


class ReloadOut(BaseModel):
    status: str
    entries: int | None = None
