"""Runtime configuration, read from environment variables.

Values are loaded from ``.env`` once at import, then read on every call so
tests and long-running processes pick up changes without a restart.

Nothing here holds secrets in code; every key comes from the environment.
"""

from __future__ import annotations

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash-latest"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_DOCUMATE_API_URL = "https://api.documate.org/v1/generate"
DEFAULT_DATABASE_URL = "sqlite:///./idea_validator.db"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]


def _env_str(key: str, default: str = "") -> str:
    return os.getenv(key, default).strip()


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_bool(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(key: str) -> Optional[List[str]]:
    """Comma-separated list, or None when unset/blank."""
    raw = os.getenv(key, "")
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or None


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------
def get_gemini_key() -> str:
    return _env_str("GEMINI_API_KEY")


def is_gemini_available() -> bool:
    """Return True if a Gemini API key is configured."""
    return bool(get_gemini_key())


def get_gemini_model() -> str:
    return _env_str("GEMINI_MODEL", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL


def get_gemini_base_url() -> str:
    return (_env_str("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL) or DEFAULT_GEMINI_BASE_URL).rstrip("/")


def get_gemini_temperature() -> float:
    return _env_float("GEMINI_TEMPERATURE", 0.7)


def get_gemini_max_output_tokens() -> int:
    return _env_int("GEMINI_MAX_OUTPUT_TOKENS", 4000)


def get_gemini_timeout() -> float:
    return _env_float("GEMINI_REQUEST_TIMEOUT", 30.0)


def get_max_attempts() -> int:
    return max(1, _env_int("GEMINI_MAX_ATTEMPTS", 4))


def get_retry_base_delay() -> float:
    return max(0.0, _env_float("GEMINI_RETRY_BASE_DELAY", 2.0))


def get_retry_max_jitter() -> float:
    return max(0.0, _env_float("GEMINI_RETRY_MAX_JITTER", 1.0))


def get_tool_call_delay() -> float:
    return max(0.0, _env_float("TOOL_CALL_DELAY_SECONDS", 1.0))


def get_enabled_tools() -> Optional[List[str]]:
    """Tool ids enabled for validation, or None for the whole catalog."""
    return _env_list("ENABLED_TOOLS")


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
def get_documate_key() -> str:
    return _env_str("DOCUMATE_API_KEY")


def get_documate_url() -> str:
    return _env_str("DOCUMATE_API_URL", DEFAULT_DOCUMATE_API_URL) or DEFAULT_DOCUMATE_API_URL


# ---------------------------------------------------------------------------
# Storage, auth, HTTP surface
# ---------------------------------------------------------------------------
def get_database_url() -> str:
    return _env_str("DATABASE_URL", DEFAULT_DATABASE_URL) or DEFAULT_DATABASE_URL


def get_jwt_secret() -> str:
    return _env_str("AUTH_JWT_SECRET", "idea-validator-dev-secret-change-in-production")


def get_jwt_audience() -> Optional[str]:
    return _env_str("AUTH_JWT_AUDIENCE") or None


def get_cors_origins() -> List[str]:
    return _env_list("CORS_ORIGINS") or list(DEFAULT_CORS_ORIGINS)


def get_log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper() or "INFO"


def is_debug() -> bool:
    return _env_bool("DEBUG", False)
