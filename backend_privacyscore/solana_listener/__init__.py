"""
Solana transaction input package.

Fetches a page of raw transactions from the indexing provider and
normalizes each record into TransactionFacts for the analysis engine.
"""

from backend_privacyscore.solana_listener.helius_client import (
    HeliusTransactionSource,
    TransactionSource,
)
from backend_privacyscore.solana_listener.models import TransactionFacts
from backend_privacyscore.solana_listener.normalizer import (
    normalize_transaction,
    normalize_transactions,
)

__all__ = [
    "HeliusTransactionSource",
    "TransactionFacts",
    "TransactionSource",
    "normalize_transaction",
    "normalize_transactions",
]
