"""
Deterministic rule-based privacy report.

Pure string templating over metrics and score: no I/O, never raises. Leak
lines are threshold-gated candidates in fixed order, truncated to
MAX_LEAKS. Mitigations and checklist are a static playbook that does not
depend on metric values.
"""

from __future__ import annotations

from backend_privacyscore.analysis_engine.models import PrivacyMetrics, PrivacyReport
from backend_privacyscore.analysis_engine.scorer import risk_tier

MAX_LEAKS = 5

HIGH_FEE_PAYER_REUSE = 0.5
LOW_ENTROPY = 0.5

MITIGATIONS = (
    "Rotate fee payer wallets using a pool of at least 5 addresses",
    "Introduce random delays between transactions (30-300 second range)",
    "Use privacy-preserving DEX aggregators to obscure trading patterns",
    "Batch operations through program composition to reduce fingerprinting",
    "Implement memo field policies - never include identifiable data",
    "Consider using multiple operational wallets for different functions",
)

CHECKLIST = (
    "Audit all current fee payer addresses and create rotation schedule",
    "Review memo usage across all transactions - remove sensitive data",
    "Implement transaction timing randomization in operational scripts",
    "Set up counterparty diversification strategy",
    "Document and train team on privacy-preserving transaction practices",
    "Schedule quarterly privacy posture reviews",
)


def _pct(ratio: float) -> str:
    return f"{ratio * 100:.0f}%"


def _summary(metrics: PrivacyMetrics, score: int) -> str:
    primary = (
        "high fee payer reuse"
        if metrics.fee_payer_reuse_ratio > HIGH_FEE_PAYER_REUSE
        else "program fingerprinting"
    )
    secondary = "memo field data leakage" if metrics.memo_detected else "temporal activity patterns"
    return (
        f"This wallet exhibits {risk_tier(score)} privacy risks based on analysis of "
        f"{metrics.transaction_count} recent transactions. Primary concerns include "
        f"{primary} and {secondary}. Operational adjustments are recommended to reduce "
        "deanonymization risk."
    )


def _leak_candidates(metrics: PrivacyMetrics) -> list[str]:
    fingerprint = "highly distinctive" if metrics.program_entropy < LOW_ENTROPY else "moderately unique"
    timing = (
        "predictable business-hour patterns"
        if metrics.temporal_entropy < LOW_ENTROPY
        else "some timing regularity"
    )
    leaks = [
        f"Fee payer concentration at {_pct(metrics.fee_payer_reuse_ratio)} creates wallet clustering signals",
        f"Program interaction fingerprint is {fingerprint} (entropy: {metrics.program_entropy:.2f})",
        f"Transaction timing shows {timing}",
    ]
    if metrics.memo_detected:
        leaks.append("Memo fields detected - may contain identifying information")
    leaks.append(
        f"Counterparty concentration at {_pct(metrics.counterparty_concentration)} reveals interaction patterns"
    )
    leaks.append(
        f"Signer concentration at {_pct(metrics.signer_concentration)} exposes organizational structure"
    )
    return leaks


def build_fallback_report(metrics: PrivacyMetrics, score: int) -> PrivacyReport:
    return PrivacyReport(
        summary=_summary(metrics, score),
        leaks=tuple(_leak_candidates(metrics)[:MAX_LEAKS]),
        mitigations=MITIGATIONS,
        checklist=CHECKLIST,
    )
