"""
API server package: HTTP interface for wallet privacy analysis.

Handles request validation, rate limiting and error mapping, and delegates
to the analytics pipeline for the actual analysis.
"""
