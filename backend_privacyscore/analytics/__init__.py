"""
Privacy analytics: pipeline entrypoints used by the API and scripts.
"""

from backend_privacyscore.analytics.analytics_pipeline import analyze_wallet, run_privacy_analysis

__all__ = ["analyze_wallet", "run_privacy_analysis"]
