"""Speech synthesis through Google Cloud Text-to-Speech.

The client is built on first use so the app (and tests) can start without
credentials. ``GOOGLE_APPLICATION_CREDENTIALS`` may hold either the service
account JSON itself or, as usual for Google libraries, a path to it.
"""

import json
import logging
from typing import Protocol

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import texttospeech
from google.oauth2 import service_account

from app.errors import SynthesisError
from app.services.voices import VoiceSelection

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


class Synthesizer(Protocol):
    async def synthesize(self, text: str, voice: VoiceSelection) -> bytes: ...


class GoogleCloudSynthesizer:
    def __init__(self, credentials: str | None = None, timeout: float = 10.0):
        self._credentials = credentials
        self._timeout = timeout
        self._client: texttospeech.TextToSpeechAsyncClient | None = None

    def _get_client(self) -> texttospeech.TextToSpeechAsyncClient:
        if self._client is None:
            raw = (self._credentials or "").strip()
            if raw.startswith("{"):
                info = json.loads(raw)
                creds = service_account.Credentials.from_service_account_info(
                    info, scopes=[CLOUD_PLATFORM_SCOPE]
                )
                self._client = texttospeech.TextToSpeechAsyncClient(credentials=creds)
            else:
                # Application default credentials (file path or metadata server)
                self._client = texttospeech.TextToSpeechAsyncClient()
        return self._client

    async def synthesize(self, text: str, voice: VoiceSelection) -> bytes:
        try:
            client = self._get_client()
            response = await client.synthesize_speech(
                input=texttospeech.SynthesisInput(text=text),
                voice=texttospeech.VoiceSelectionParams(
                    language_code=voice.language_code,
                    name=voice.name,
                ),
                audio_config=texttospeech.AudioConfig(
                    audio_encoding=texttospeech.AudioEncoding.MP3,
                    speaking_rate=voice.speaking_rate,
                    pitch=0,
                    volume_gain_db=1,
                ),
                timeout=self._timeout,
            )
        except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError, ValueError) as exc:
            raise SynthesisError(f"synthesis of {text!r} with {voice.name} failed: {exc}") from exc

        if not response.audio_content:
            raise SynthesisError(f"synthesis of {text!r} returned no audio")
        logger.debug("Synthesized %r with %s (%d bytes)", text, voice.name, len(response.audio_content))
        return response.audio_content
