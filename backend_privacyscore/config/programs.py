"""
Static program registry: display labels for well-known Solana programs and
the memo program ids.

Used for labeling and memo detection only; labels never influence scoring.
Registries are immutable and injected into the normalizer, metrics engine
and pipeline, so tests can substitute their own tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

MEMO_PROGRAM_ID = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"
LEGACY_MEMO_PROGRAM_ID = "Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo"

KNOWN_PROGRAMS: Mapping[str, str] = MappingProxyType({
    "11111111111111111111111111111111": "System Program",
    "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA": "Token Program",
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL": "Associated Token",
    "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4": "Jupiter",
    "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc": "Orca Whirlpool",
    "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8": "Raydium AMM",
    "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin": "Serum DEX",
    "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s": "Metaplex",
    "GovER5Lthms3bLBqWub97yVrMmEogzX7xNjdXpPPCVZw": "Governance",
})

# Unknown ids are shown as their first 8 characters plus this marker
UNKNOWN_LABEL_PREFIX_LEN = 8
ELLIPSIS = "..."


@dataclass(frozen=True)
class ProgramRegistry:
    """Known-program labels plus the set of memo program ids."""

    labels: Mapping[str, str] = field(default_factory=lambda: KNOWN_PROGRAMS)
    memo_program_ids: frozenset[str] = frozenset({MEMO_PROGRAM_ID, LEGACY_MEMO_PROGRAM_ID})

    def __post_init__(self) -> None:
        # Freeze caller-supplied dicts so a registry can never change after construction
        if not isinstance(self.labels, MappingProxyType):
            object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))
        object.__setattr__(self, "memo_program_ids", frozenset(self.memo_program_ids))

    def label_for(self, program_id: str) -> str:
        """Display label for a program id; truncated id when unknown."""
        label = self.labels.get(program_id)
        if label:
            return label
        return f"{program_id[:UNKNOWN_LABEL_PREFIX_LEN]}{ELLIPSIS}"

    def is_memo(self, program_id: str) -> bool:
        return program_id in self.memo_program_ids


DEFAULT_PROGRAM_REGISTRY = ProgramRegistry()
