"""
Structured logging for the privacy service.

Every record carries timestamp, level, logger, event_type and, inside an
analysis, a masked wallet_id. Rendering is JSON (LOG_FORMAT=json, default)
or console. A wallet analyzer must not become a leak itself, so a redaction
step runs before rendering: full addresses under the `wallet` key are masked
and payload-like keys (memo contents, raw transactions, API keys) are
replaced by a marker.

The only package import is the dependency-free wallet masking helper, to
avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

from backend_privacyscore.utils.wallet_utils import mask_wallet

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

REDACTED = "[redacted]"
REDACTED_KEYS = frozenset({"memo_content", "raw_transaction", "transactions", "api_key", "authorization"})

EventDict = dict[str, Any]


def _utc_timestamp(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _normalize_event(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog's positional 'event' becomes event_type; message mirrors it when unset."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def _redact(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    if isinstance(event_dict.get("wallet"), str):
        event_dict["wallet"] = mask_wallet(event_dict["wallet"])
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def build_processors(log_format: str = LOG_FORMAT) -> list[Any]:
    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _utc_timestamp,
        _redact,
        _normalize_event,
        renderer,
    ]


def configure_logging(level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> None:
    """(Re)configure structlog; called once at import with the env values."""
    structlog.configure(
        processors=build_processors(log_format),
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Structured logger for a module:

        logger = get_logger(__name__)
        logger.info("privacy_score_computed", wallet_id="9QCfNuQu...Urka", score=62)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_wallet(wallet: str, name: str = "backend_privacyscore") -> structlog.BoundLogger:
    """Logger with the masked wallet bound as wallet_id."""
    return get_logger(name).bind(wallet_id=mask_wallet(wallet))
