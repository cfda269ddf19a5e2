"""
Analytics pipeline: normalize -> metrics -> score -> report.

run_privacy_analysis is the stateless core over raw records already in hand.
analyze_wallet adds the service policy around it: validate the wallet, fetch
one page from the transaction source, and refuse to score an empty history.
"""

from __future__ import annotations

from typing import Any, Sequence

from backend_privacyscore.ai_engine.report_generator import ReportGenerator, assemble_report
from backend_privacyscore.analysis_engine.metrics import compute_metrics
from backend_privacyscore.analysis_engine.models import AnalysisResult
from backend_privacyscore.analysis_engine.scorer import compute_privacy_score
from backend_privacyscore.config.programs import DEFAULT_PROGRAM_REGISTRY, ProgramRegistry
from backend_privacyscore.config.settings import MAX_TRANSACTION_PAGE_SIZE
from backend_privacyscore.core.exceptions import NoTransactionsFound
from backend_privacyscore.privacy_logging import bind_wallet
from backend_privacyscore.solana_listener.helius_client import TransactionSource
from backend_privacyscore.solana_listener.normalizer import normalize_transactions
from backend_privacyscore.utils.wallet_utils import validate_wallet


def run_privacy_analysis(
    wallet: str,
    transactions: Sequence[Any],
    *,
    registry: ProgramRegistry = DEFAULT_PROGRAM_REGISTRY,
    generator: ReportGenerator | None = None,
) -> AnalysisResult:
    """
    Run the full pipeline for one wallet over raw transaction records.

    Assumes a pre-validated wallet. Defined for an empty list (sentinel
    metrics); the service layer rejects that case before calling.
    """
    log = bind_wallet(wallet, __name__)
    facts = normalize_transactions(transactions, wallet, registry)
    metrics = compute_metrics(facts, registry)
    score = compute_privacy_score(metrics)
    log.info(
        "privacy_score_computed",
        score=score,
        tx_count=metrics.transaction_count,
        memo_detected=metrics.memo_detected,
    )
    report = assemble_report(wallet, metrics, score, generator)
    return AnalysisResult(wallet=wallet, score=score, metrics=metrics, report=report)


def analyze_wallet(
    wallet: Any,
    source: TransactionSource,
    *,
    limit: int = MAX_TRANSACTION_PAGE_SIZE,
    registry: ProgramRegistry = DEFAULT_PROGRAM_REGISTRY,
    generator: ReportGenerator | None = None,
) -> AnalysisResult:
    """
    Validate, fetch one page (at most 100 records) and analyze.

    Raises InvalidWalletAddress, NoTransactionsFound, or whatever the source
    raises (UpstreamFetchError, ConfigurationError); never returns a partial
    result.
    """
    address = validate_wallet(wallet)
    log = bind_wallet(address, __name__)
    log.info("analysis_start", limit=min(limit, MAX_TRANSACTION_PAGE_SIZE))

    transactions = source.fetch_transactions(address, min(limit, MAX_TRANSACTION_PAGE_SIZE))
    if not transactions:
        log.info("analysis_no_data")
        raise NoTransactionsFound(address)

    result = run_privacy_analysis(address, transactions, registry=registry, generator=generator)
    log.info("analysis_done", score=result.score, tx_count=result.metrics.transaction_count)
    return result
