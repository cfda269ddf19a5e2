"""
SHA-256 report hash over a deterministic payload.

Payload: wallet_address, metrics_json (compact JSON of score, metrics and
meta; the prose report is excluded), scoring_version and the analysis
timestamp in milliseconds. The digest is taken over the compact JSON of the
payload with keys in declaration order.

Both JSON texts are written the way a browser's JSON.stringify writes them
(`1` not `1.0`, `1e-7` not `1e-07`) so a hash computed by the web client
for the same analysis verifies here and vice versa.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import math
import time
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any

from backend_privacyscore.analysis_engine.models import AnalysisResult

SCORING_VERSION = "1.0.0"


def js_number(value: float) -> str:
    """Number.prototype.toString for a finite double; non-finite becomes null."""
    if not math.isfinite(value):
        return "null"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    # repr is the shortest round-trip form, the same digits JS picks
    digits_t, exponent = Decimal(repr(abs(value))).as_tuple()[1:]
    digits = "".join(str(d) for d in digits_t).rstrip("0")
    exponent += len(digits_t) - len(digits)
    k = len(digits)
    n = k + exponent
    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"
    return sign + text


def js_json(obj: Any) -> str:
    """Compact JSON text matching JSON.stringify for dicts, lists, str, bool, None and numbers."""
    if obj is None:
        return "null"
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, float):
        return js_number(obj)
    if isinstance(obj, str):
        return json.dumps(obj, ensure_ascii=False)
    if isinstance(obj, dict):
        return "{" + ",".join(f"{js_json(str(k))}:{js_json(v)}" for k, v in obj.items()) + "}"
    if isinstance(obj, (list, tuple)):
        return "[" + ",".join(js_json(v) for v in obj) + "]"
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass(frozen=True)
class ReportHashPayload:
    wallet_address: str
    metrics_json: str
    scoring_version: str
    analysis_timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def create_hash_payload(
    result: AnalysisResult,
    analysis_timestamp_ms: int | None = None,
) -> ReportHashPayload:
    """Build the payload; timestamp defaults to now (ms) and is injectable for replay."""
    data = result.to_dict()
    metrics_json = js_json({"score": data["score"], "metrics": data["metrics"], "meta": data["meta"]})
    if analysis_timestamp_ms is None:
        analysis_timestamp_ms = int(time.time() * 1000)
    return ReportHashPayload(
        wallet_address=result.wallet,
        metrics_json=metrics_json,
        scoring_version=SCORING_VERSION,
        analysis_timestamp=int(analysis_timestamp_ms),
    )


def compute_report_hash(payload: ReportHashPayload) -> str:
    """Hex SHA-256 of the compact JSON payload."""
    encoded = js_json(payload.to_dict()).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


def verify_report_hash(payload: ReportHashPayload, expected_hash_hex: str) -> bool:
    return hmac.compare_digest(compute_report_hash(payload), (expected_hash_hex or "").strip().lower())
