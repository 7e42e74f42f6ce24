"""Static voice table, speaking rates and accent → phonetic region mapping."""

from dataclasses import dataclass
from types import MappingProxyType

# ── Voices (Google Cloud WaveNet) ───────────────────────────

VOICE_PROFILES = MappingProxyType({
    "en-US": {"male": "en-US-Wavenet-D", "female": "en-US-Wavenet-F"},
    "en-GB": {"male": "en-GB-Wavenet-D", "female": "en-GB-Wavenet-F"},
    "en-AU": {"male": "en-AU-Wavenet-B", "female": "en-AU-Wavenet-C"},
    "en-IN": {"male": "en-IN-Wavenet-C", "female": "en-IN-Wavenet-D"},
})

SPEAKING_RATES = MappingProxyType({
    "slow": 0.6,
    "normal": 0.9,
    "fast": 1.2,
})

# ── Phonetic regions ────────────────────────────────────────
# Which regional transcription each accent prefers. The other region is only
# used when the preferred one is missing.

US = "US"
UK = "UK"
REGIONS = (US, UK)

ACCENT_REGIONS = MappingProxyType({
    "en-US": US,
    "en-GB": UK,
    "en-AU": US,
    "en-IN": UK,
})


@dataclass(frozen=True)
class VoiceSelection:
    language_code: str
    name: str
    speaking_rate: float
    audio_format: str = "mp3"


def voice_for(accent: str, gender: str, speed: str) -> VoiceSelection:
    """Pick the synthesis voice for an already validated request."""
    return VoiceSelection(
        language_code=accent,
        name=VOICE_PROFILES[accent][gender],
        speaking_rate=SPEAKING_RATES.get(speed, SPEAKING_RATES["normal"]),
    )


def region_order(accent: str) -> tuple[str, ...]:
    """Regions to try for *accent*, preferred first."""
    preferred = ACCENT_REGIONS.get(accent, US)
    return (preferred,) + tuple(r for r in REGIONS if r != preferred)
