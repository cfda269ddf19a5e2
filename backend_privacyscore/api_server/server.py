"""
FastAPI server: wallet privacy analysis API.

POST /analyze-wallet runs one analysis per request: rate-limit check,
wallet validation, one transaction fetch, pipeline. POST /report-hash
returns the anchoring hash of a previously returned analysis.
Collaborators are dependencies so tests can override them.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend_privacyscore import __version__
from backend_privacyscore.ai_engine.report_generator import ReportGenerator, build_report_generator
from backend_privacyscore.analysis_engine.models import AnalysisResult
from backend_privacyscore.analytics.analytics_pipeline import analyze_wallet
from backend_privacyscore.api_server.middleware import (
    SlidingWindowRateLimiter,
    get_client_ip,
    log_requests,
)
from backend_privacyscore.config.programs import DEFAULT_PROGRAM_REGISTRY, ProgramRegistry
from backend_privacyscore.config.settings import Settings, get_settings
from backend_privacyscore.core.exceptions import (
    ConfigurationError,
    InvalidWalletAddress,
    NoTransactionsFound,
    PrivacyScoreError,
    RateLimitExceeded,
)
from backend_privacyscore.oracle.report_hash import compute_report_hash, create_hash_payload
from backend_privacyscore.privacy_logging import get_logger
from backend_privacyscore.solana_listener.helius_client import HeliusTransactionSource, TransactionSource
from backend_privacyscore.utils.wallet_utils import mask_wallet

logger = get_logger(__name__)

ANALYZE_ENDPOINT = "analyze-wallet"


# -----------------------------------------------------------------------------
# Request / response models (camelCase on the wire)
# -----------------------------------------------------------------------------

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeWalletRequest(BaseModel):
    """POST /analyze-wallet body. Any type accepted here; validation answers 400, not 422."""

    wallet: Any = Field(None, description="Solana wallet address (base58)")


class MetricsResponse(CamelModel):
    fee_payer_reuse_ratio: float = Field(..., ge=0, le=1)
    signer_concentration: float = Field(..., ge=0, le=1)
    program_entropy: float = Field(..., ge=0, le=1)
    counterparty_concentration: float = Field(..., ge=0, le=1)
    memo_detected: bool
    temporal_entropy: float = Field(..., ge=0, le=1)


class ReportResponse(CamelModel):
    summary: str
    leaks: list[str]
    mitigations: list[str]
    checklist: list[str]


class ProgramUsageResponse(CamelModel):
    name: str
    count: int = Field(..., ge=0)


class MetaResponse(CamelModel):
    transaction_count: int = Field(..., ge=0)
    unique_fee_payers: int = Field(..., ge=0)
    unique_signers: int = Field(..., ge=0)
    unique_programs: int = Field(..., ge=0)
    top_programs: list[ProgramUsageResponse] = Field(default_factory=list, max_length=5)


class AnalysisResponse(CamelModel):
    """Full analysis result: wallet, score (10-95), metrics, report, meta."""

    wallet: str
    score: int = Field(..., ge=10, le=95)
    metrics: MetricsResponse
    report: ReportResponse
    meta: MetaResponse


class ReportHashRequest(CamelModel):
    result: AnalysisResponse
    analysis_timestamp: int | None = Field(None, ge=0, description="Milliseconds since epoch; defaults to now")


class ReportHashPayloadResponse(CamelModel):
    wallet_address: str
    metrics_json: str
    scoring_version: str
    analysis_timestamp: int


class ReportHashResponse(CamelModel):
    hash_hex: str
    payload: ReportHashPayloadResponse


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------

def get_app_settings() -> Settings:
    return get_settings()


def get_transaction_source(settings: Settings = Depends(get_app_settings)) -> TransactionSource:
    """Helius source; a missing HELIUS_API_KEY surfaces as ConfigurationError on fetch."""
    return HeliusTransactionSource.from_settings(settings)


def get_report_generator(settings: Settings = Depends(get_app_settings)) -> ReportGenerator | None:
    return build_report_generator(settings)


@lru_cache(maxsize=1)
def get_rate_limiter() -> SlidingWindowRateLimiter:
    """Process-wide limiter, created on first use from settings."""
    settings = get_settings()
    return SlidingWindowRateLimiter(settings.rate_limit_max_requests, settings.rate_limit_window_sec)


def get_program_registry() -> ProgramRegistry:
    return DEFAULT_PROGRAM_REGISTRY


# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(
        "api_started",
        version=__version__,
        helius_configured=bool(settings.helius_api_key),
        report_llm_enabled=settings.report_llm_enabled,
        transaction_page_size=settings.transaction_page_size,
        rate_limit_max_requests=settings.rate_limit_max_requests,
        rate_limit_window_minutes=settings.rate_limit_window_minutes,
    )
    yield
    logger.info("api_stopped")


app = FastAPI(
    title="Backend PrivacyScore API",
    description="Wallet privacy score and risk report from recent Solana transactions.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_allow_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.middleware("http")(log_requests)


@app.post("/analyze-wallet", response_model=AnalysisResponse)
def analyze_wallet_endpoint(
    body: AnalyzeWalletRequest,
    request: Request,
    settings: Settings = Depends(get_app_settings),
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
    registry: ProgramRegistry = Depends(get_program_registry),
    source: TransactionSource = Depends(get_transaction_source),
    generator: ReportGenerator | None = Depends(get_report_generator),
) -> Any:
    """
    Analyze a wallet's most recent transactions (one page, at most 100).

    400 invalid wallet, 404 no transactions, 429 rate limited, 500 for
    configuration or upstream failures (message kept opaque).
    """
    client_ip = get_client_ip(request)
    if not limiter.check(client_ip, ANALYZE_ENDPOINT):
        logger.warning("rate_limit_exceeded", endpoint=ANALYZE_ENDPOINT)
        raise RateLimitExceeded(limiter.retry_after_sec)

    try:
        result = analyze_wallet(
            body.wallet,
            source,
            limit=settings.transaction_page_size,
            registry=registry,
            generator=generator,
        )
    except InvalidWalletAddress as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except NoTransactionsFound as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except ConfigurationError as e:
        logger.error("analysis_config_error", error=e.message)
        raise HTTPException(status_code=500, detail="Server configuration error") from e
    except PrivacyScoreError as e:
        logger.error("analysis_failed", code=e.code, error=e.message)
        raise HTTPException(status_code=500, detail="Analysis failed") from e
    except Exception as e:
        logger.exception("analysis_unexpected_error", error=type(e).__name__)
        raise HTTPException(status_code=500, detail="Analysis failed") from e

    logger.info("analyze_wallet_served", wallet_id=mask_wallet(result.wallet), score=result.score)
    return result.to_dict()


@app.post("/report-hash", response_model=ReportHashResponse)
def report_hash_endpoint(body: ReportHashRequest) -> Any:
    """SHA-256 anchoring hash of an analysis result (score, metrics, meta)."""
    result = AnalysisResult.from_dict(body.result.model_dump(by_alias=True))
    payload = create_hash_payload(result, body.analysis_timestamp)
    return ReportHashResponse(
        hash_hex=compute_report_hash(payload),
        payload=ReportHashPayloadResponse(**payload.to_dict()),
    )


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.exception_handler(RateLimitExceeded)
def rate_limit_exception_handler(request: Any, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"detail": exc.message, "retryAfter": exc.retry_after_sec},
        headers={"Retry-After": str(exc.retry_after_sec)},
    )


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
