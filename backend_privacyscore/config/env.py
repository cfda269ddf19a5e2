"""
Environment variable loading for PrivacyScore.

- HELIUS_API_KEY: Helius key for the enhanced-transactions endpoint
- HELIUS_BASE_URL: Helius REST base (default https://api.helius.xyz)
- REPORT_LLM_API_KEY / REPORT_LLM_URL / REPORT_LLM_MODEL: optional report text generator
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# config is backend_privacyscore/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_HELIUS_BASE_URL = "https://api.helius.xyz"
DEFAULT_REPORT_LLM_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_REPORT_LLM_MODEL = "gpt-4o-mini"


def load_privacy_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides set variables."""
    from dotenv import load_dotenv

    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def _env(name: str, default: str = "") -> str:
    load_privacy_env()
    return (os.getenv(name) or default).strip()


def get_helius_api_key() -> str:
    """Return HELIUS_API_KEY or empty string when unset."""
    return _env("HELIUS_API_KEY")


def get_helius_base_url() -> str:
    return (_env("HELIUS_BASE_URL") or DEFAULT_HELIUS_BASE_URL).rstrip("/")


def get_report_llm_api_key() -> str:
    """Return REPORT_LLM_API_KEY; empty means the deterministic report is always used."""
    return _env("REPORT_LLM_API_KEY")


def get_report_llm_url() -> str:
    return _env("REPORT_LLM_URL") or DEFAULT_REPORT_LLM_URL


def get_report_llm_model() -> str:
    return _env("REPORT_LLM_MODEL") or DEFAULT_REPORT_LLM_MODEL


def get_env_float(name: str, default: float) -> float:
    """Read a float env var; malformed or non-positive values fall back to default."""
    raw = _env(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_env_int(name: str, default: int) -> int:
    """Read an int env var; malformed or non-positive values fall back to default."""
    raw = _env(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default
