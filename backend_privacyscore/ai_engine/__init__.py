"""
Report assembly: deterministic fallback report plus the optional LLM generator.
"""

from backend_privacyscore.ai_engine.fallback_report import build_fallback_report
from backend_privacyscore.ai_engine.report_generator import (
    LLMReportGenerator,
    ReportGenerator,
    assemble_report,
    build_report_generator,
)

__all__ = [
    "LLMReportGenerator",
    "ReportGenerator",
    "assemble_report",
    "build_fallback_report",
    "build_report_generator",
]
