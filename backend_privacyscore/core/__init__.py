"""
Core cross-cutting pieces: the application exception taxonomy.
"""

from backend_privacyscore.core.exceptions import (  # noqa: F401
    ConfigurationError,
    InvalidWalletAddress,
    NoTransactionsFound,
    PrivacyScoreError,
    RateLimitExceeded,
    ReportGenerationError,
    UpstreamFetchError,
)

__all__ = [
    "ConfigurationError",
    "InvalidWalletAddress",
    "NoTransactionsFound",
    "PrivacyScoreError",
    "RateLimitExceeded",
    "ReportGenerationError",
    "UpstreamFetchError",
]
