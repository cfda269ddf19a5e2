"""
Backend PrivacyScore: wallet privacy analysis for Solana.

Ingests a wallet's recent transaction history, derives six privacy-risk
metrics, folds them into a clamped 0-100 privacy score and assembles a
human-readable risk report. Modular layout: transaction source and
normalizer, analysis engine, report assembler, API server.
"""

__version__ = "0.1.0"
