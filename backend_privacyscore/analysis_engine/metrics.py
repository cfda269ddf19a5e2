"""
Privacy metrics engine.

Folds an ordered list of TransactionFacts into PrivacyMetrics. Each metric
is computed independently:

- fee payer reuse: top fee payer's transaction count / transaction count
- signer concentration: top signer's appearances / all signer appearances
- program entropy: normalized entropy of per-transaction program presence
- counterparty concentration: top counterparty's appearances / all appearances
- memo detected: any transaction touched a memo program
- temporal entropy: normalized entropy of the 24-bucket UTC hour histogram

Appearance events are counted per transaction set, so an address that is
both signer and counterparty in one transaction counts once in each metric.
No scoring logic here; see scorer.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from backend_privacyscore.analysis_engine.models import PrivacyMetrics, ProgramUsage
from backend_privacyscore.analysis_engine.signals import (
    hour_of_day_histogram,
    max_share,
    normalized_entropy,
)
from backend_privacyscore.config.programs import DEFAULT_PROGRAM_REGISTRY, ProgramRegistry
from backend_privacyscore.privacy_logging import get_logger
from backend_privacyscore.solana_listener.models import TransactionFacts

logger = get_logger(__name__)

TOP_PROGRAMS_LIMIT = 5

# No data is scored as maximally private, never as risky
EMPTY_METRICS = PrivacyMetrics(
    fee_payer_reuse_ratio=0.0,
    signer_concentration=0.0,
    program_entropy=1.0,
    counterparty_concentration=0.0,
    memo_detected=False,
    temporal_entropy=1.0,
    transaction_count=0,
    unique_fee_payers=0,
    unique_signers=0,
    unique_programs=0,
    top_programs=(),
)


def rank_top_programs(
    program_counts: Counter[str],
    registry: ProgramRegistry = DEFAULT_PROGRAM_REGISTRY,
    limit: int = TOP_PROGRAMS_LIMIT,
) -> tuple[ProgramUsage, ...]:
    """
    Most-used programs by descending count.

    Counter keeps insertion (first-seen) order and sorted() is stable, so
    ties stay in first-seen order.
    """
    ranked = sorted(program_counts.items(), key=lambda item: item[1], reverse=True)
    return tuple(
        ProgramUsage(name=registry.label_for(program_id), count=count)
        for program_id, count in ranked[:limit]
    )


def compute_metrics(
    facts: Sequence[TransactionFacts],
    registry: ProgramRegistry = DEFAULT_PROGRAM_REGISTRY,
) -> PrivacyMetrics:
    """
    Compute PrivacyMetrics for an ordered transaction list.

    Total over its input: an empty list returns EMPTY_METRICS. Upstream order
    is consumed as given.
    """
    tx_count = len(facts)
    if tx_count == 0:
        return EMPTY_METRICS

    fee_payer_counts: Counter[str] = Counter()
    signer_counts: Counter[str] = Counter()
    program_counts: Counter[str] = Counter()
    counterparty_counts: Counter[str] = Counter()
    memo_detected = False

    for tx in facts:
        fee_payer_counts[tx.fee_payer] += 1
        # facts sets are already unique per transaction
        signer_counts.update(tx.signers)
        program_counts.update(tx.programs)
        counterparty_counts.update(tx.counterparties)
        memo_detected = memo_detected or tx.has_memo

    metrics = PrivacyMetrics(
        fee_payer_reuse_ratio=max(fee_payer_counts.values()) / tx_count,
        signer_concentration=max_share(signer_counts),
        program_entropy=normalized_entropy(program_counts.values()),
        counterparty_concentration=max_share(counterparty_counts),
        memo_detected=memo_detected,
        temporal_entropy=normalized_entropy(hour_of_day_histogram(tx.timestamp for tx in facts)),
        transaction_count=tx_count,
        unique_fee_payers=len(fee_payer_counts),
        unique_signers=len(signer_counts),
        unique_programs=len(program_counts),
        top_programs=rank_top_programs(program_counts, registry),
    )
    logger.debug(
        "metrics_computed",
        tx_count=tx_count,
        unique_fee_payers=metrics.unique_fee_payers,
        unique_programs=metrics.unique_programs,
        memo_detected=memo_detected,
    )
    return metrics
