"""
Main entrypoint: FastAPI privacy analysis server under uvicorn.

Env: HELIUS_API_KEY (required for analysis), REPORT_LLM_API_KEY (optional),
API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT, RATE_LIMIT_MAX_REQUESTS,
RATE_LIMIT_WINDOW_MINUTES, CORS_ALLOW_ORIGINS.

Equivalent: uvicorn backend_privacyscore.api_server.app:app --host 0.0.0.0 --port 8000
"""

# Configure structured JSON logging before other imports that may log
from backend_privacyscore.privacy_logging import get_logger
from backend_privacyscore.privacy_logging.logger import configure_logging

logger = get_logger("main")


def main() -> None:
    """Read settings and serve the API in the main thread."""
    import uvicorn

    from backend_privacyscore.config import get_settings

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    if not settings.helius_api_key:
        logger.warning(
            "main_config_warning",
            message="HELIUS_API_KEY is not set: /analyze-wallet will answer 500 until it is configured",
        )

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        "backend_privacyscore.api_server.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
