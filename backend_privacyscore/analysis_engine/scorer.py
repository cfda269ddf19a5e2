"""
Privacy score computation: fixed weighted penalties.

score = 100 - sum(penalties), rounded half-up and clamped to [10, 95]. The
clamp keeps heuristic signals from claiming a perfect or hopeless wallet.
Pure and deterministic: identical metrics always give the identical score.
"""

from __future__ import annotations

import math

from backend_privacyscore.analysis_engine.models import PrivacyMetrics

BASE_SCORE = 100
SCORE_MIN = 10
SCORE_MAX = 95

# Max total penalty is 90
PENALTY_WEIGHTS = {
    "fee_payer_reuse": 20.0,
    "signer_concentration": 15.0,
    "program_fingerprint": 15.0,
    "counterparty_concentration": 15.0,
    "memo_leakage": 15.0,
    "temporal_pattern": 10.0,
}

TIER_MODERATE = "moderate"
TIER_ELEVATED = "elevated"
TIER_SIGNIFICANT = "significant"


def _unit(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, value))


def score_penalties(metrics: PrivacyMetrics) -> dict[str, float]:
    """Per-signal penalty (each >= 0), keyed like PENALTY_WEIGHTS."""
    w = PENALTY_WEIGHTS
    return {
        "fee_payer_reuse": _unit(metrics.fee_payer_reuse_ratio) * w["fee_payer_reuse"],
        "signer_concentration": _unit(metrics.signer_concentration) * w["signer_concentration"],
        "program_fingerprint": (1.0 - _unit(metrics.program_entropy)) * w["program_fingerprint"],
        "counterparty_concentration": _unit(metrics.counterparty_concentration) * w["counterparty_concentration"],
        "memo_leakage": w["memo_leakage"] if metrics.memo_detected else 0.0,
        "temporal_pattern": (1.0 - _unit(metrics.temporal_entropy)) * w["temporal_pattern"],
    }


def compute_privacy_score(metrics: PrivacyMetrics) -> int:
    """Integer privacy score in [SCORE_MIN, SCORE_MAX]; higher is more private."""
    raw = BASE_SCORE - sum(score_penalties(metrics).values())
    clamped = max(float(SCORE_MIN), min(float(SCORE_MAX), raw))
    # round half up; builtin round() would round 62.5 to 62
    return int(math.floor(clamped + 0.5))


def risk_tier(score: int) -> str:
    """Wording band for report prose only; never feeds back into the score."""
    if score >= 80:
        return TIER_MODERATE
    if score >= 60:
        return TIER_ELEVATED
    return TIER_SIGNIFICANT
