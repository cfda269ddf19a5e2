"""
Application-level exceptions.

Each exception carries a stable code so the API layer can map it to an HTTP
status without string matching. The metrics engine, scorer and fallback report
never raise; these cover input rejection, the no-data condition and failures
of external collaborators.
"""

from __future__ import annotations


class PrivacyScoreError(Exception):
    """Base class for all PrivacyScore errors."""

    code = "PRIVACY_SCORE_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidWalletAddress(PrivacyScoreError):
    """Wallet address is empty, not base58, or does not decode to a 32-byte public key."""

    code = "INVALID_WALLET"


class NoTransactionsFound(PrivacyScoreError):
    """The transaction source returned no records for the wallet."""

    code = "NO_DATA"

    def __init__(self, wallet: str) -> None:
        super().__init__("No transactions found for this wallet")
        self.wallet = wallet


class UpstreamFetchError(PrivacyScoreError):
    """Transaction source failed (transport error, non-2xx status, unexpected body)."""

    code = "UPSTREAM_ERROR"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(PrivacyScoreError):
    """A required setting (e.g. HELIUS_API_KEY) is missing."""

    code = "CONFIG_ERROR"


class RateLimitExceeded(PrivacyScoreError):
    code = "RATE_LIMITED"

    def __init__(self, retry_after_sec: int) -> None:
        super().__init__("Rate limit exceeded. Please try again later.")
        self.retry_after_sec = retry_after_sec


class ReportGenerationError(PrivacyScoreError):
    """
    External report generator failed or returned an unusable reply.

    Only raised inside ai_engine.report_generator; assemble_report always
    catches it and falls back to the deterministic report.
    """

    code = "REPORT_GENERATION_ERROR"
