"""
API tests: /analyze-wallet, /report-hash and /health through TestClient with
the transaction source, rate limiter and report generator overridden.
"""

from __future__ import annotations

import dataclasses
import json

from backend_privacyscore.api_server.middleware import SlidingWindowRateLimiter
from backend_privacyscore.core.exceptions import ConfigurationError, UpstreamFetchError

WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"


def test_health(api):
    resp = api.client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_analyze_wallet_success(api, fake_source, helius_history):
    api.state.source = fake_source(helius_history)
    resp = api.client.post("/analyze-wallet", json={"wallet": WALLET})
    assert resp.status_code == 200
    data = resp.json()
    assert data["wallet"] == WALLET
    assert 10 <= data["score"] <= 95
    assert set(data["metrics"]) == {
        "feePayerReuseRatio",
        "signerConcentration",
        "programEntropy",
        "counterpartyConcentration",
        "memoDetected",
        "temporalEntropy",
    }
    assert data["metrics"]["feePayerReuseRatio"] == 0.7
    assert data["metrics"]["memoDetected"] is True
    assert data["meta"]["transactionCount"] == 10
    assert data["meta"]["topPrograms"][0] == {"name": "Token Program", "count": 10}
    assert len(data["report"]["mitigations"]) == 6
    assert api.state.source.calls == [(WALLET, 100)]


def test_analyze_wallet_uses_configured_page_size(api, fake_source, helius_history):
    api.state.source = fake_source(helius_history)
    api.state.settings = dataclasses.replace(api.state.settings, transaction_page_size=5)
    resp = api.client.post("/analyze-wallet", json={"wallet": WALLET})
    assert resp.status_code == 200
    assert resp.json()["meta"]["transactionCount"] == 5


def test_analyze_wallet_invalid_address(api, fake_source):
    api.state.source = fake_source([{"feePayer": WALLET}])
    for body in ({"wallet": "not-a-wallet"}, {"wallet": ""}, {"wallet": 12345}, {}):
        resp = api.client.post("/analyze-wallet", json=body)
        assert resp.status_code == 400, body
        assert "Invalid" in resp.json()["detail"]
    # rejected before any fetch
    assert api.state.source.calls == []


def test_analyze_wallet_no_transactions(api, fake_source):
    api.state.source = fake_source([])
    resp = api.client.post("/analyze-wallet", json={"wallet": WALLET})
    assert resp.status_code == 404
    assert resp.json() == {"detail": "No transactions found for this wallet"}


def test_analyze_wallet_upstream_error_is_opaque(api, fake_source):
    api.state.source = fake_source(error=UpstreamFetchError("Helius API error: 401 secret-detail", 401))
    resp = api.client.post("/analyze-wallet", json={"wallet": WALLET})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Analysis failed"}


def test_analyze_wallet_missing_api_key(api, fake_source):
    api.state.source = fake_source(error=ConfigurationError("Helius API key not configured"))
    resp = api.client.post("/analyze-wallet", json={"wallet": WALLET})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Server configuration error"}


def test_analyze_wallet_unexpected_error(api, fake_source):
    api.state.source = fake_source(error=RuntimeError("boom"))
    resp = api.client.post("/analyze-wallet", json={"wallet": WALLET})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Analysis failed"}


def test_analyze_wallet_rate_limited(api, fake_source, helius_history):
    api.state.source = fake_source(helius_history)
    api.state.limiter = SlidingWindowRateLimiter(2, 3600)
    headers = {"x-forwarded-for": "203.0.113.7"}
    for _ in range(2):
        assert api.client.post("/analyze-wallet", json={"wallet": WALLET}, headers=headers).status_code == 200
    resp = api.client.post("/analyze-wallet", json={"wallet": WALLET}, headers=headers)
    assert resp.status_code == 429
    assert resp.headers["retry-after"] == "3600"
    assert resp.json()["retryAfter"] == 3600
    # a different client is unaffected
    other = api.client.post("/analyze-wallet", json={"wallet": WALLET}, headers={"x-forwarded-for": "198.51.100.1"})
    assert other.status_code == 200


def test_rate_limit_counts_rejected_wallets(api):
    api.state.limiter = SlidingWindowRateLimiter(1, 60)
    headers = {"x-forwarded-for": "203.0.113.8"}
    assert api.client.post("/analyze-wallet", json={"wallet": "bad"}, headers=headers).status_code == 400
    assert api.client.post("/analyze-wallet", json={"wallet": WALLET}, headers=headers).status_code == 429


def test_generator_report_served(api, fake_source, helius_history):
    class StaticGenerator:
        def generate(self, wallet, metrics, score):
            return {"summary": "LLM summary", "leaks": ["x"], "mitigations": ["y"], "checklist": ["z"]}

    api.state.source = fake_source(helius_history)
    api.state.generator = StaticGenerator()
    report = api.client.post("/analyze-wallet", json={"wallet": WALLET}).json()["report"]
    assert report == {"summary": "LLM summary", "leaks": ["x"], "mitigations": ["y"], "checklist": ["z"]}


def test_report_hash_endpoint(api, fake_source, helius_history):
    api.state.source = fake_source(helius_history)
    analysis = api.client.post("/analyze-wallet", json={"wallet": WALLET}).json()
    body = {"result": analysis, "analysisTimestamp": 1704067200000}
    first = api.client.post("/report-hash", json=body)
    second = api.client.post("/report-hash", json=body)
    assert first.status_code == 200
    data = first.json()
    assert data == second.json()
    assert len(data["hashHex"]) == 64
    assert data["payload"]["walletAddress"] == WALLET
    assert data["payload"]["scoringVersion"] == "1.0.0"
    assert data["payload"]["analysisTimestamp"] == 1704067200000
    assert json.loads(data["payload"]["metricsJson"])["score"] == analysis["score"]


def test_report_hash_rejects_malformed_result(api):
    resp = api.client.post("/report-hash", json={"result": {"wallet": WALLET, "score": 500}})
    assert resp.status_code == 422


def test_report_hash_body_without_timestamp(api, fake_source, helius_history):
    """The body wraps the analysis under result; analysisTimestamp is optional."""
    api.state.source = fake_source(helius_history)
    analysis = api.client.post("/analyze-wallet", json={"wallet": WALLET}).json()
    resp = api.client.post("/report-hash", json={"result": analysis})
    assert resp.status_code == 200
    assert resp.json()["payload"]["analysisTimestamp"] > 0
    # a bare analysis is not a valid body
    assert api.client.post("/report-hash", json=analysis).status_code == 422
