"""
config.py
---------
Central configuration for the family trip recommendation backend.
All secrets loaded from environment variables: never hard-coded.

Every provider key is optional. A missing key, or one that still holds a
template placeholder (e.g. "your_google_places_api_key"), switches that one
capability into demo mode instead of failing the request.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists).
# Won't override vars already set in the shell.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Provider keys ─────────────────────────────────────────────────────────────
# Obtain at: https://console.cloud.google.com/apis/credentials
# Enable:  Places API + Geocoding API + Distance Matrix API
GOOGLE_PLACES_API_KEY: str    = os.getenv("GOOGLE_PLACES_API_KEY", "")
GOOGLE_MAPS_API_KEY: str      = os.getenv("GOOGLE_MAPS_API_KEY", "")
GOOGLE_GEOCODING_API_KEY: str = os.getenv("GOOGLE_GEOCODING_API_KEY", "")
# https://home.openweathermap.org/api_keys
OPENWEATHER_API_KEY: str      = os.getenv("OPENWEATHER_API_KEY", "")

# Substrings that mark a key copied verbatim from .env.example
PLACEHOLDER_MARKERS: tuple[str, ...] = ("your_", "placeholder", "changeme")


def is_configured(api_key: str | None) -> bool:
    """True when *api_key* looks like a real credential."""
    if not api_key or not api_key.strip():
        return False
    lowered = api_key.lower()
    return not any(marker in lowered for marker in PLACEHOLDER_MARKERS)


# ── Upstream endpoints ────────────────────────────────────────────────────────
GOOGLE_MAPS_BASE_URL: str = os.getenv("GOOGLE_MAPS_BASE_URL", "https://maps.googleapis.com/maps/api")
OPENWEATHER_BASE_URL: str = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")

# Timeouts in seconds
HTTP_TIMEOUT_S: float    = float(os.getenv("HTTP_TIMEOUT_S", "10"))
WEATHER_TIMEOUT_S: float = float(os.getenv("WEATHER_TIMEOUT_S", "5"))

# ── Pipeline ──────────────────────────────────────────────────────────────────
# Appended to the city name for geocoding and weather lookups
GEOCODE_REGION: str       = os.getenv("GEOCODE_REGION", "CA, USA")
WEATHER_COUNTRY_SUFFIX: str = os.getenv("WEATHER_COUNTRY_SUFFIX", "CA,US")

# San Francisco: used whenever geocoding is unavailable or fails
DEFAULT_LAT: float = float(os.getenv("DEFAULT_LAT", "37.7749"))
DEFAULT_LNG: float = float(os.getenv("DEFAULT_LNG", "-122.4194"))

# Packs returned per request (6–10)
MAX_PACKS: int = max(6, min(10, int(os.getenv("MAX_PACKS", "6"))))

# Pause between consecutive place-details calls (rate limiting)
DETAIL_REQUEST_DELAY_S: float = float(os.getenv("DETAIL_REQUEST_DELAY_S", "0.1"))

# Used by the ETA estimate (straight-line km → minutes)
AVERAGE_DRIVE_SPEED_KMH: float = float(os.getenv("AVERAGE_DRIVE_SPEED_KMH", "40"))

# Comma-separated subset of: details, insights, nearby, weather
PIPELINE_STAGES: str = os.getenv("PIPELINE_STAGES", "details,insights,nearby,weather")

# ── Response cache ────────────────────────────────────────────────────────────
# "memory" | "redis" | "none"
RESPONSE_CACHE_BACKEND: str = os.getenv("RESPONSE_CACHE_BACKEND", "memory")

# TTLs (seconds) per upstream endpoint
CACHE_TTL_NEARBY: int       = int(os.getenv("CACHE_TTL_NEARBY",       "1800"))   # 30 min
CACHE_TTL_TEXT_SEARCH: int  = int(os.getenv("CACHE_TTL_TEXT_SEARCH",  "1800"))   # 30 min
CACHE_TTL_DETAILS: int      = int(os.getenv("CACHE_TTL_DETAILS",      "86400"))  # 24 h
CACHE_TTL_GEOCODE: int      = int(os.getenv("CACHE_TTL_GEOCODE",      "86400"))  # 24 h
CACHE_TTL_AUTOCOMPLETE: int = int(os.getenv("CACHE_TTL_AUTOCOMPLETE", "3600"))   # 1 h
CACHE_TTL_DISTANCE: int     = int(os.getenv("CACHE_TTL_DISTANCE",     "3600"))   # 1 h
CACHE_TTL_WEATHER: int      = int(os.getenv("CACHE_TTL_WEATHER",      "600"))    # 10 min

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_HOST: str     = os.getenv("REDIS_HOST",     "localhost")
REDIS_PORT: int     = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB: int       = int(os.getenv("REDIS_DB",   "0"))
REDIS_PASSWORD: str = os.getenv("REDIS_PASSWORD", "")
REDIS_KEY_PREFIX: str = os.getenv("REDIS_KEY_PREFIX", "famtrip:cache:")

# ── Feedback store ────────────────────────────────────────────────────────────
# "memory" (demo, lost on restart) | "postgres"
FEEDBACK_BACKEND: str = os.getenv("FEEDBACK_BACKEND", "memory")

# ── PostgreSQL (FEEDBACK_BACKEND=postgres) ────────────────────────────────────
# Apply schema with: python scripts/run_migrations.py
POSTGRES_HOST: str     = os.getenv("POSTGRES_HOST",     "localhost")
POSTGRES_PORT: int     = int(os.getenv("POSTGRES_PORT", "5432"))
POSTGRES_DB: str       = os.getenv("POSTGRES_DB",       "famtrip")
POSTGRES_USER: str     = os.getenv("POSTGRES_USER",     "famtrip_user")
POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "famtrip_pass")
POSTGRES_MIN_CONN: int = int(os.getenv("POSTGRES_MIN_CONN", "1"))
POSTGRES_MAX_CONN: int = int(os.getenv("POSTGRES_MAX_CONN", "10"))

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# Per-request JSONL pipeline events under REQUEST_LOG_DIR
REQUEST_LOG_ENABLED: bool = _flag("REQUEST_LOG_ENABLED", "false")
REQUEST_LOG_DIR: str      = os.getenv("REQUEST_LOG_DIR", str(Path(__file__).parent / "logs"))

# ── Server ────────────────────────────────────────────────────────────────────
PORT: int = int(os.getenv("PORT", "5002"))
