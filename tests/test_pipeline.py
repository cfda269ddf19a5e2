"""
Tests for the analytics pipeline and the analyze_wallet service policy.
"""

from __future__ import annotations

import json

import pytest

from backend_privacyscore.analysis_engine.models import AnalysisResult
from backend_privacyscore.analytics.analytics_pipeline import analyze_wallet, run_privacy_analysis
from backend_privacyscore.core.exceptions import (
    InvalidWalletAddress,
    NoTransactionsFound,
    UpstreamFetchError,
)

WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"


def test_run_privacy_analysis(helius_history):
    result = run_privacy_analysis(WALLET, helius_history)
    assert isinstance(result, AnalysisResult)
    assert result.wallet == WALLET
    assert 10 <= result.score <= 95
    assert result.metrics.transaction_count == 10
    assert result.metrics.memo_detected is True
    assert any("Memo fields detected" in leak for leak in result.report.leaks)


def test_run_privacy_analysis_empty_list_is_defined():
    result = run_privacy_analysis(WALLET, [])
    assert result.score == 95
    assert result.metrics.transaction_count == 0


def test_pipeline_is_deterministic(helius_history):
    first = run_privacy_analysis(WALLET, helius_history).to_dict()
    second = run_privacy_analysis(WALLET, helius_history).to_dict()
    assert first == second


def test_result_dict_shape(helius_history):
    data = run_privacy_analysis(WALLET, helius_history).to_dict()
    assert set(data) == {"wallet", "score", "metrics", "report", "meta"}
    assert set(data["metrics"]) == {
        "feePayerReuseRatio",
        "signerConcentration",
        "programEntropy",
        "counterpartyConcentration",
        "memoDetected",
        "temporalEntropy",
    }
    assert set(data["meta"]) == {"transactionCount", "uniqueFeePayers", "uniqueSigners", "uniquePrograms", "topPrograms"}
    assert AnalysisResult.from_dict(json.loads(json.dumps(data))).to_dict() == data


def test_analyze_wallet_fetches_one_page(fake_source, helius_history):
    source = fake_source(helius_history)
    result = analyze_wallet(f" {WALLET} ", source, limit=500)
    assert source.calls == [(WALLET, 100)]
    assert result.wallet == WALLET


def test_analyze_wallet_rejects_invalid_before_fetch(fake_source):
    source = fake_source([{"feePayer": WALLET}])
    with pytest.raises(InvalidWalletAddress):
        analyze_wallet("bogus", source)
    assert source.calls == []


def test_analyze_wallet_no_transactions(fake_source):
    with pytest.raises(NoTransactionsFound) as exc:
        analyze_wallet(WALLET, fake_source([]))
    assert exc.value.message == "No transactions found for this wallet"


def test_analyze_wallet_propagates_upstream_error(fake_source):
    with pytest.raises(UpstreamFetchError):
        analyze_wallet(WALLET, fake_source(error=UpstreamFetchError("Helius API error: 503", 503)))


def test_malformed_timestamp_does_not_fail_analysis():
    raws = json.loads('[{"feePayer": "A", "timestamp": NaN}, {"feePayer": "B", "timestamp": 1704067200}]')
    result = run_privacy_analysis(WALLET, raws)
    assert result.metrics.transaction_count == 2
    assert result.metrics.temporal_entropy == 0.0
