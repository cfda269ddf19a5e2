"""
Structured logging for Backend PrivacyScore.

JSON logs with timestamp, event_type and wallet_id (masked).
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_privacyscore.privacy_logging.logger import bind_wallet, get_logger

__all__ = ["bind_wallet", "get_logger"]
