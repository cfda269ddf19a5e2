"""
Analysis engine package: privacy metrics and score.

Consumes normalized TransactionFacts, folds them into six privacy metrics
and combines those into a clamped composite score.
"""

from backend_privacyscore.analysis_engine.metrics import EMPTY_METRICS, compute_metrics
from backend_privacyscore.analysis_engine.models import (
    AnalysisResult,
    PrivacyMetrics,
    PrivacyReport,
    ProgramUsage,
)
from backend_privacyscore.analysis_engine.scorer import (
    PENALTY_WEIGHTS,
    compute_privacy_score,
    risk_tier,
    score_penalties,
)

__all__ = [
    "EMPTY_METRICS",
    "compute_metrics",
    "AnalysisResult",
    "PrivacyMetrics",
    "PrivacyReport",
    "ProgramUsage",
    "PENALTY_WEIGHTS",
    "compute_privacy_score",
    "risk_tier",
    "score_penalties",
]
