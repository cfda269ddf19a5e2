"""
Report hashing for on-chain anchoring.

Only the deterministic hash payload and digest live here; submitting the
hash to a ledger is handled by an external publisher.
"""

from backend_privacyscore.oracle.report_hash import (
    SCORING_VERSION,
    ReportHashPayload,
    compute_report_hash,
    create_hash_payload,
    verify_report_hash,
)

__all__ = [
    "SCORING_VERSION",
    "ReportHashPayload",
    "compute_report_hash",
    "create_hash_payload",
    "verify_report_hash",
]
