"""
Report assembler: optional LLM text generator with deterministic fallback.

One chat-completions call per analysis (OpenAI-compatible endpoint), bounded
by a timeout and never retried. Any failure (unconfigured key, transport
error, timeout, non-2xx, reply without a JSON object, wrong field types)
falls back to build_fallback_report. Report generation is best-effort and
never surfaces an error to the caller.
"""

from __future__ import annotations

import json
import re
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from backend_privacyscore.ai_engine.fallback_report import build_fallback_report
from backend_privacyscore.analysis_engine.models import PrivacyMetrics, PrivacyReport
from backend_privacyscore.config.settings import Settings
from backend_privacyscore.core.exceptions import ReportGenerationError
from backend_privacyscore.privacy_logging import get_logger
from backend_privacyscore.utils.wallet_utils import mask_wallet, short_wallet

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 15.0
TEMPERATURE = 0.7

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

SYSTEM_PROMPT = "You are a blockchain privacy analyst. Respond only with valid JSON."


class ReportGenerator(Protocol):
    """Produces a report dict shaped like PrivacyReport.to_dict(); may raise."""

    def generate(self, wallet: str, metrics: PrivacyMetrics, score: int) -> dict[str, Any]:
        ...


class GeneratedReport(BaseModel):
    """Fields the generator may return; missing or empty ones are filled from the fallback."""

    summary: str | None = None
    leaks: list[str] | None = None
    mitigations: list[str] | None = None
    checklist: list[str] | None = None


def _score_label(score: int) -> str:
    if score >= 80:
        return "Strong"
    if score >= 60:
        return "Moderate"
    if score >= 40:
        return "Elevated Risk"
    return "Critical Risk"


def build_prompt(wallet: str, metrics: PrivacyMetrics, score: int) -> str:
    """User prompt with the metrics; the wallet is shortened, raw transactions are never sent."""
    top = ", ".join(f"{p.name} ({p.count})" for p in metrics.top_programs)
    return f"""You are a Solana blockchain privacy analyst. Analyze the following wallet privacy metrics and generate a concise privacy assessment report.

Wallet: {short_wallet(wallet)}
Privacy Score: {score}/100 ({_score_label(score)})

METRICS:
- Fee Payer Reuse: {metrics.fee_payer_reuse_ratio * 100:.1f}% ({metrics.unique_fee_payers} unique fee payers)
- Signer Concentration: {metrics.signer_concentration * 100:.1f}% ({metrics.unique_signers} unique signers)
- Program Entropy: {metrics.program_entropy:.2f} ({metrics.unique_programs} unique programs)
- Counterparty Concentration: {metrics.counterparty_concentration * 100:.1f}%
- Memo Leakage: {"DETECTED" if metrics.memo_detected else "None"}
- Temporal Entropy: {metrics.temporal_entropy:.2f}
- Total Transactions Analyzed: {metrics.transaction_count}
- Top Programs: {top}

Generate a JSON response with:
1. "summary": A 2-3 sentence executive summary of the privacy posture
2. "leaks": Array of 4-5 specific privacy leaks detected
3. "mitigations": Array of 5-6 actionable mitigation strategies
4. "checklist": Array of 5-6 operational checklist items

Be specific to the actual metrics. Focus on Solana-specific privacy concerns."""


def extract_json_object(content: str) -> dict[str, Any]:
    """Parse the outermost {...} block of a model reply; raises ReportGenerationError."""
    match = _JSON_OBJECT_RE.search(content or "")
    if not match:
        raise ReportGenerationError("Generator reply contains no JSON object")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ReportGenerationError("Generator reply is not valid JSON") from e
    if not isinstance(parsed, dict):
        raise ReportGenerationError("Generator reply is not a JSON object")
    return parsed


class LLMReportGenerator:
    """OpenAI-compatible chat-completions client (httpx, single attempt)."""

    def __init__(
        self,
        api_key: str,
        url: str,
        model: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._model = model
        self._timeout = timeout_sec
        self._transport = transport

    def generate(self, wallet: str, metrics: PrivacyMetrics, score: int) -> dict[str, Any]:
        body = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(wallet, metrics, score)},
            ],
            "temperature": TEMPERATURE,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.post(self._url, json=body, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ReportGenerationError(f"Generator request failed: {type(e).__name__}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ReportGenerationError("Generator reply has no message content") from e
        if not isinstance(content, str):
            raise ReportGenerationError("Generator message content is not text")
        return extract_json_object(content)


def build_report_generator(settings: Settings) -> ReportGenerator | None:
    """LLMReportGenerator when REPORT_LLM_API_KEY is set, else None (fallback only)."""
    if not settings.report_llm_enabled:
        return None
    return LLMReportGenerator(
        settings.report_llm_api_key,
        settings.report_llm_url,
        settings.report_llm_model,
        timeout_sec=settings.report_llm_timeout_sec,
    )


def _merge_with_fallback(generated: GeneratedReport, fallback: PrivacyReport) -> PrivacyReport:
    return PrivacyReport(
        summary=generated.summary or fallback.summary,
        leaks=tuple(generated.leaks) if generated.leaks else fallback.leaks,
        mitigations=tuple(generated.mitigations) if generated.mitigations else fallback.mitigations,
        checklist=tuple(generated.checklist) if generated.checklist else fallback.checklist,
    )


def assemble_report(
    wallet: str,
    metrics: PrivacyMetrics,
    score: int,
    generator: ReportGenerator | None = None,
) -> PrivacyReport:
    """
    Return the privacy report for one analysis. Never raises.

    Without a generator the deterministic report is returned directly.
    """
    fallback = build_fallback_report(metrics, score)
    if generator is None:
        logger.info("report_fallback_used", wallet_id=mask_wallet(wallet), reason="generator_unconfigured")
        return fallback

    try:
        raw = generator.generate(wallet, metrics, score)
        generated = GeneratedReport.model_validate(raw)
    except (ReportGenerationError, ValidationError) as e:
        logger.warning("report_fallback_used", wallet_id=mask_wallet(wallet), reason=str(e)[:200])
        return fallback
    except Exception as e:
        # injected generators may raise anything
        logger.exception("report_generator_unexpected_error", wallet_id=mask_wallet(wallet), error=type(e).__name__)
        return fallback

    logger.info("report_generated", wallet_id=mask_wallet(wallet), source="generator")
    return _merge_with_fallback(generated, fallback)
