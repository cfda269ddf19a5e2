"""
Application settings and environment configuration.

Typed, immutable settings for the transaction source, report generator,
rate limiter and API server. Built fresh from the environment on every
get_settings() call so tests can monkeypatch variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from backend_privacyscore.config.env import (
    get_env_float,
    get_env_int,
    get_helius_api_key,
    get_helius_base_url,
    get_report_llm_api_key,
    get_report_llm_model,
    get_report_llm_url,
    load_privacy_env,
)

# Helius enhanced-transactions endpoint returns at most 100 records per request
MAX_TRANSACTION_PAGE_SIZE = 100

DEFAULT_REPORT_LLM_TIMEOUT_SEC = 15.0
DEFAULT_HELIUS_TIMEOUT_SEC = 30.0
DEFAULT_RATE_LIMIT_MAX_REQUESTS = 10
DEFAULT_RATE_LIMIT_WINDOW_MINUTES = 60


@dataclass(frozen=True)
class Settings:
    """Service configuration; see config.env for the variable names."""

    helius_api_key: str
    helius_base_url: str
    helius_timeout_sec: float
    transaction_page_size: int
    report_llm_api_key: str
    report_llm_url: str
    report_llm_model: str
    report_llm_timeout_sec: float
    rate_limit_max_requests: int
    rate_limit_window_minutes: int
    api_host: str
    api_port: int
    log_level: str
    log_format: str
    cors_allow_origins: tuple[str, ...]

    @property
    def rate_limit_window_sec(self) -> int:
        return self.rate_limit_window_minutes * 60

    @property
    def report_llm_enabled(self) -> bool:
        return bool(self.report_llm_api_key)


def _origins(raw: str) -> tuple[str, ...]:
    items = tuple(o.strip() for o in raw.split(",") if o.strip())
    return items or ("*",)


def get_settings() -> Settings:
    """
    Return the current application settings.

    Numeric values that are missing, malformed or non-positive fall back to
    defaults; the page size is capped at MAX_TRANSACTION_PAGE_SIZE.
    """
    load_privacy_env()
    page_size = min(
        get_env_int("TRANSACTION_PAGE_SIZE", MAX_TRANSACTION_PAGE_SIZE),
        MAX_TRANSACTION_PAGE_SIZE,
    )
    return Settings(
        helius_api_key=get_helius_api_key(),
        helius_base_url=get_helius_base_url(),
        helius_timeout_sec=get_env_float("HELIUS_TIMEOUT_SEC", DEFAULT_HELIUS_TIMEOUT_SEC),
        transaction_page_size=page_size,
        report_llm_api_key=get_report_llm_api_key(),
        report_llm_url=get_report_llm_url(),
        report_llm_model=get_report_llm_model(),
        report_llm_timeout_sec=get_env_float("REPORT_LLM_TIMEOUT_SEC", DEFAULT_REPORT_LLM_TIMEOUT_SEC),
        rate_limit_max_requests=get_env_int("RATE_LIMIT_MAX_REQUESTS", DEFAULT_RATE_LIMIT_MAX_REQUESTS),
        rate_limit_window_minutes=get_env_int("RATE_LIMIT_WINDOW_MINUTES", DEFAULT_RATE_LIMIT_WINDOW_MINUTES),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=get_env_int("API_PORT", 8000),
        log_level=(os.getenv("LOG_LEVEL") or "info").strip().lower(),
        log_format=(os.getenv("LOG_FORMAT") or "json").strip().lower(),
        cors_allow_origins=_origins(os.getenv("CORS_ALLOW_ORIGINS") or "*"),
    )
