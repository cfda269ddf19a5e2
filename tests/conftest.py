"""
Pytest fixtures for PrivacyScore tests: wallet constants, raw Helius-shaped
transaction factory, fake transaction source, and a FastAPI TestClient with
collaborators overridden (no network access).
"""

from __future__ import annotations

import dataclasses
from types import SimpleNamespace
from typing import Any

import pytest

# Valid Solana pubkeys (base58, 32 bytes)
VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
VALID_WALLET_2 = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"

SYSTEM_PROGRAM = "11111111111111111111111111111111"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
JUPITER = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"
MEMO_PROGRAM = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"

# 2024-01-01T00:00:00Z
BASE_TS = 1704067200


class FakeTransactionSource:
    """In-memory TransactionSource recording every call."""

    def __init__(self, transactions: list[dict[str, Any]] | None = None, error: Exception | None = None):
        self.transactions = list(transactions or [])
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def fetch_transactions(self, wallet: str, limit: int = 100) -> list[dict[str, Any]]:
        self.calls.append((wallet, limit))
        if self.error is not None:
            raise self.error
        return self.transactions[:limit]


def make_raw_tx(
    *,
    fee_payer: str = VALID_WALLET,
    signers: list[str] | None = None,
    programs: list[str] | tuple[str, ...] = (SYSTEM_PROGRAM,),
    accounts: list[str] | tuple[str, ...] = (),
    timestamp: int | None = BASE_TS,
    memo_data: str | None = None,
    signature: str | None = None,
) -> dict[str, Any]:
    """Helius enhanced-transaction shaped record."""
    instructions: list[dict[str, Any]] = [
        {"programId": p, "data": "", "accounts": [], "innerInstructions": []} for p in programs
    ]
    if memo_data is not None:
        instructions.append({"programId": MEMO_PROGRAM, "data": memo_data, "accounts": []})
    tx: dict[str, Any] = {
        "feePayer": fee_payer,
        "signers": signers if signers is not None else [fee_payer],
        "instructions": instructions,
        "accountData": [{"account": a, "nativeBalanceChange": 0} for a in accounts],
        "type": "TRANSFER",
        "source": "SYSTEM_PROGRAM",
    }
    if timestamp is not None:
        tx["timestamp"] = timestamp
    if signature is not None:
        tx["signature"] = signature
    return tx


@pytest.fixture
def raw_tx():
    """Factory for Helius-shaped raw transactions."""
    return make_raw_tx


@pytest.fixture
def fake_source():
    """Factory for FakeTransactionSource."""
    return FakeTransactionSource


@pytest.fixture
def helius_history() -> list[dict[str, Any]]:
    """Ten transactions: two fee payers (7/3), mixed programs, hours and one memo."""
    txs = []
    for i in range(10):
        txs.append(
            make_raw_tx(
                fee_payer=VALID_WALLET if i < 7 else VALID_WALLET_2,
                signers=[VALID_WALLET] if i < 7 else [VALID_WALLET_2, VALID_WALLET],
                programs=[SYSTEM_PROGRAM, TOKEN_PROGRAM] if i % 2 == 0 else [JUPITER, TOKEN_PROGRAM, TOKEN_PROGRAM],
                accounts=[VALID_WALLET, VALID_WALLET_2, f"Acct{i % 3}"],
                timestamp=BASE_TS + i * 3600 * 2,
                memo_data="3vQB7B6MrGQZaxCuFg4oh" if i == 4 else None,
                signature=f"sig{i}",
            )
        )
    return txs


@pytest.fixture
def api():
    """
    TestClient plus a mutable state namespace (source, limiter, generator).
    Dependencies read the namespace at request time, so tests swap collaborators freely.
    """
    from fastapi.testclient import TestClient

    from backend_privacyscore.api_server import server
    from backend_privacyscore.api_server.middleware import SlidingWindowRateLimiter
    from backend_privacyscore.config.settings import get_settings

    state = SimpleNamespace(
        source=FakeTransactionSource([]),
        limiter=SlidingWindowRateLimiter(1000, 3600),
        generator=None,
        settings=dataclasses.replace(get_settings(), helius_api_key="test-key", transaction_page_size=100),
    )
    overrides = server.app.dependency_overrides
    overrides[server.get_app_settings] = lambda: state.settings
    overrides[server.get_transaction_source] = lambda: state.source
    overrides[server.get_rate_limiter] = lambda: state.limiter
    overrides[server.get_report_generator] = lambda: state.generator
    try:
        yield SimpleNamespace(client=TestClient(server.app), state=state)
    finally:
        overrides.clear()
