"""
Data models for analysis engine output.

PrivacyMetrics, PrivacyReport and AnalysisResult are created fresh per
request and never mutated. to_dict() emits the camelCase field names of the
public JSON contract; AnalysisResult.from_dict() reads them back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProgramUsage:
    """One entry of the top-programs ranking."""

    name: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "count": self.count}


@dataclass(frozen=True)
class PrivacyMetrics:
    """
    Six independent privacy-risk metrics plus derived counts.

    Ratios and entropies lie in [0, 1]. Higher ratios mean more reuse or
    concentration (riskier); higher entropies mean more diverse behaviour
    (safer).
    """

    fee_payer_reuse_ratio: float
    signer_concentration: float
    program_entropy: float
    counterparty_concentration: float
    memo_detected: bool
    temporal_entropy: float
    transaction_count: int
    unique_fee_payers: int
    unique_signers: int
    unique_programs: int
    top_programs: tuple[ProgramUsage, ...] = ()

    def metrics_dict(self) -> dict[str, Any]:
        return {
            "feePayerReuseRatio": self.fee_payer_reuse_ratio,
            "signerConcentration": self.signer_concentration,
            "programEntropy": self.program_entropy,
            "counterpartyConcentration": self.counterparty_concentration,
            "memoDetected": self.memo_detected,
            "temporalEntropy": self.temporal_entropy,
        }

    def meta_dict(self) -> dict[str, Any]:
        return {
            "transactionCount": self.transaction_count,
            "uniqueFeePayers": self.unique_fee_payers,
            "uniqueSigners": self.unique_signers,
            "uniquePrograms": self.unique_programs,
            "topPrograms": [p.to_dict() for p in self.top_programs],
        }

    @classmethod
    def from_dicts(cls, metrics: dict[str, Any], meta: dict[str, Any]) -> "PrivacyMetrics":
        return cls(
            fee_payer_reuse_ratio=float(metrics["feePayerReuseRatio"]),
            signer_concentration=float(metrics["signerConcentration"]),
            program_entropy=float(metrics["programEntropy"]),
            counterparty_concentration=float(metrics["counterpartyConcentration"]),
            memo_detected=bool(metrics["memoDetected"]),
            temporal_entropy=float(metrics["temporalEntropy"]),
            transaction_count=int(meta["transactionCount"]),
            unique_fee_payers=int(meta["uniqueFeePayers"]),
            unique_signers=int(meta["uniqueSigners"]),
            unique_programs=int(meta["uniquePrograms"]),
            top_programs=tuple(
                ProgramUsage(name=str(p["name"]), count=int(p["count"]))
                for p in meta.get("topPrograms") or []
            ),
        )


@dataclass(frozen=True)
class PrivacyReport:
    summary: str
    leaks: tuple[str, ...]
    mitigations: tuple[str, ...]
    checklist: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "leaks": list(self.leaks),
            "mitigations": list(self.mitigations),
            "checklist": list(self.checklist),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrivacyReport":
        return cls(
            summary=str(data["summary"]),
            leaks=tuple(str(x) for x in data["leaks"]),
            mitigations=tuple(str(x) for x in data["mitigations"]),
            checklist=tuple(str(x) for x in data["checklist"]),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Final output of one pipeline run; score is an integer in [10, 95]."""

    wallet: str
    score: int
    metrics: PrivacyMetrics
    report: PrivacyReport

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict: wallet, score, metrics, report, meta."""
        return {
            "wallet": self.wallet,
            "score": self.score,
            "metrics": self.metrics.metrics_dict(),
            "report": self.report.to_dict(),
            "meta": self.metrics.meta_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisResult":
        return cls(
            wallet=str(data["wallet"]),
            score=int(data["score"]),
            metrics=PrivacyMetrics.from_dicts(data["metrics"], data["meta"]),
            report=PrivacyReport.from_dict(data["report"]),
        )
