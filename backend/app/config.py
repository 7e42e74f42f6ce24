"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the backend directory
_backend_dir = Path(__file__).resolve().parent.parent
load_dotenv(_backend_dir / ".env")


class Settings:
    # ── Upstreams ───────────────────────────────────────────
    DATA_BASE_URL: str = os.getenv("DATA_BASE_URL", "https://dictionary-gamma-tan.vercel.app/data/")
    PHONETICS_DATASET_KEY: str = os.getenv("PHONETICS_DATASET_KEY", "phonetics")
    DICTIONARY_API_URL: str = os.getenv(
        "DICTIONARY_API_URL", "https://api.dictionaryapi.dev/api/v2/entries/en/"
    )
    GOOGLE_APPLICATION_CREDENTIALS: str | None = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

    # ── Timeouts (seconds) ──────────────────────────────────
    DATASET_TIMEOUT_S: float = float(os.getenv("DATASET_TIMEOUT_S", "5"))
    DEFINITION_TIMEOUT_S: float = float(os.getenv("DEFINITION_TIMEOUT_S", "3"))
    DEFINITION_MAX_REDIRECTS: int = int(os.getenv("DEFINITION_MAX_REDIRECTS", "2"))
    SYNTHESIS_TIMEOUT_S: float = float(os.getenv("SYNTHESIS_TIMEOUT_S", "10"))

    # ── Caches ──────────────────────────────────────────────
    RESPONSE_CACHE_TTL_S: int = int(os.getenv("RESPONSE_CACHE_TTL_S", "604800"))     # 7 days
    RESPONSE_CACHE_MAX_KEYS: int = int(os.getenv("RESPONSE_CACHE_MAX_KEYS", "10000"))
    SHARD_TTL_S: int = int(os.getenv("SHARD_TTL_S", "86400"))                         # 24 hours
    PHONETICS_TTL_S: int = int(os.getenv("PHONETICS_TTL_S", "604800"))
    DATASET_CACHE_MAX_KEYS: int = int(os.getenv("DATASET_CACHE_MAX_KEYS", "64"))
    RESOLUTION_TTL_S: int = int(os.getenv("RESOLUTION_TTL_S", "604800"))
    RESOLUTION_CACHE_MAX_KEYS: int = int(os.getenv("RESOLUTION_CACHE_MAX_KEYS", "10000"))
    INFLIGHT_TIMEOUT_S: float = float(os.getenv("INFLIGHT_TIMEOUT_S", "300"))

    # ── HTTP server ─────────────────────────────────────────
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "*").split(",")
        if o.strip()
    ]
    STATIC_DIR: Path = Path(os.getenv("STATIC_DIR", str(_backend_dir.parent / "public")))
    SLOW_REQUEST_MS: int = int(os.getenv("SLOW_REQUEST_MS", "500"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))


settings = Settings()
