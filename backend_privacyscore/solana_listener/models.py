"""
Data models for normalized transaction input.

TransactionFacts is the uniform per-transaction shape consumed by the
metrics engine, whatever schema the upstream provider returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TransactionFacts:
    """
    Privacy-relevant facts of one transaction, derived from that record alone.

    signers, programs and counterparties have set semantics (no duplicates,
    order carries no meaning for scoring); they are tuples in first-seen order
    so program ranking tie-breaks are reproducible.
    """

    fee_payer: str
    signers: tuple[str, ...]
    programs: tuple[str, ...]
    counterparties: tuple[str, ...]
    has_memo: bool
    timestamp: int
    """Unix seconds; 0 when unknown."""
    memo_content: str | None = None
    """Raw payload of the first memo instruction; kept for surfacing, never scored."""
    signature: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fee_payer": self.fee_payer,
            "signers": list(self.signers),
            "programs": list(self.programs),
            "counterparties": list(self.counterparties),
            "has_memo": self.has_memo,
            "memo_content": self.memo_content,
            "timestamp": self.timestamp,
            "signature": self.signature,
        }
