"""
Configuration management for Backend PrivacyScore.

Loads settings from environment variables and an optional .env file, and
holds the static program registry (known-program labels, memo program ids).
"""

from backend_privacyscore.config.programs import (  # noqa: F401
    DEFAULT_PROGRAM_REGISTRY,
    ProgramRegistry,
)
from backend_privacyscore.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["DEFAULT_PROGRAM_REGISTRY", "ProgramRegistry", "Settings", "get_settings"]
