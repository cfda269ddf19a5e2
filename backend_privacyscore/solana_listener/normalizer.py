"""
Transaction normalizer: raw provider records to TransactionFacts.

Reads the Helius enhanced-transaction shape (feePayer, signers,
instructions[].programId/data, accountData[].account, timestamp, signature).
Missing or wrong-typed fields become empty values: one malformed record must
not abort the batch. Output order equals input order; temporal metrics depend
on it.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

from backend_privacyscore.config.programs import DEFAULT_PROGRAM_REGISTRY, ProgramRegistry
from backend_privacyscore.privacy_logging import get_logger
from backend_privacyscore.solana_listener.models import TransactionFacts
from backend_privacyscore.utils.wallet_utils import mask_wallet

logger = get_logger(__name__)


def _str_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _unique_strings(values: Iterable[Any], *, exclude: str | None = None) -> tuple[str, ...]:
    """Non-empty strings, first occurrence kept."""
    seen: dict[str, None] = {}
    for v in values:
        if isinstance(v, str) and v and v != exclude:
            seen.setdefault(v, None)
    return tuple(seen)


def _list_of_dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _timestamp(value: Any) -> int:
    # bool is an int subclass; never a timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    ts = int(value)
    return ts if ts > 0 else 0


def normalize_transaction(
    raw: Any,
    wallet: str,
    registry: ProgramRegistry = DEFAULT_PROGRAM_REGISTRY,
) -> TransactionFacts:
    """
    Build TransactionFacts from one raw record.

    Program ids are collected per transaction (presence, not instruction count).
    Counterparties are accountData accounts other than the analyzed wallet.
    """
    tx = raw if isinstance(raw, dict) else {}
    instructions = _list_of_dicts(tx.get("instructions"))

    programs = _unique_strings(ix.get("programId") for ix in instructions)

    memo_ix = next(
        (ix for ix in instructions if registry.is_memo(_str_or_empty(ix.get("programId")))),
        None,
    )
    memo_content: str | None = None
    if memo_ix is not None:
        data = memo_ix.get("data")
        memo_content = data if isinstance(data, str) and data else None

    signers_raw = tx.get("signers")
    signers = _unique_strings(signers_raw if isinstance(signers_raw, list) else [])

    counterparties = _unique_strings(
        (acc.get("account") for acc in _list_of_dicts(tx.get("accountData"))),
        exclude=wallet,
    )

    signature = tx.get("signature")
    return TransactionFacts(
        fee_payer=_str_or_empty(tx.get("feePayer")),
        signers=signers,
        programs=programs,
        counterparties=counterparties,
        has_memo=memo_ix is not None,
        timestamp=_timestamp(tx.get("timestamp")),
        memo_content=memo_content,
        signature=signature if isinstance(signature, str) and signature else None,
    )


def normalize_transactions(
    raws: Iterable[Any],
    wallet: str,
    registry: ProgramRegistry = DEFAULT_PROGRAM_REGISTRY,
) -> list[TransactionFacts]:
    """Normalize a batch, preserving the upstream order exactly."""
    facts = [normalize_transaction(raw, wallet, registry) for raw in raws]
    logger.debug(
        "normalizer_done",
        wallet_id=mask_wallet(wallet),
        tx_count=len(facts),
        memo_tx_count=sum(1 for f in facts if f.has_memo),
        untimed_tx_count=sum(1 for f in facts if f.timestamp == 0),
    )
    return facts
