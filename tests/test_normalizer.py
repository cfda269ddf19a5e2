"""
Tests for the transaction normalizer: Helius records to TransactionFacts.
"""

from __future__ import annotations

import json

from backend_privacyscore.config.programs import LEGACY_MEMO_PROGRAM_ID, ProgramRegistry
from backend_privacyscore.solana_listener.normalizer import normalize_transaction, normalize_transactions

WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
OTHER = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"
SYSTEM_PROGRAM = "11111111111111111111111111111111"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
MEMO_PROGRAM = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"


def test_normalize_full_record(raw_tx):
    tx = raw_tx(
        fee_payer=OTHER,
        signers=[OTHER, WALLET, OTHER],
        programs=[SYSTEM_PROGRAM, TOKEN_PROGRAM, SYSTEM_PROGRAM],
        accounts=[WALLET, OTHER, "Acct1", OTHER],
        timestamp=1704067200,
        memo_data="invoice-42",
        signature="sigA",
    )
    facts = normalize_transaction(tx, WALLET)
    assert facts.fee_payer == OTHER
    assert facts.signers == (OTHER, WALLET)
    # per-transaction presence, first-seen order, memo program included
    assert facts.programs == (SYSTEM_PROGRAM, TOKEN_PROGRAM, MEMO_PROGRAM)
    # the analyzed wallet is never its own counterparty
    assert facts.counterparties == (OTHER, "Acct1")
    assert facts.has_memo is True
    assert facts.memo_content == "invoice-42"
    assert facts.timestamp == 1704067200
    assert facts.signature == "sigA"


def test_normalize_missing_fields():
    """Missing or wrong-typed fields become empty values instead of raising."""
    facts = normalize_transaction({"feePayer": 42, "signers": "x", "instructions": {"a": 1}}, WALLET)
    assert facts.fee_payer == ""
    assert facts.signers == ()
    assert facts.programs == ()
    assert facts.counterparties == ()
    assert facts.has_memo is False
    assert facts.memo_content is None
    assert facts.timestamp == 0
    assert facts.signature is None


def test_normalize_non_dict_record():
    facts = normalize_transaction(None, WALLET)
    assert facts.fee_payer == ""
    assert facts.timestamp == 0


def test_normalize_bad_timestamps(raw_tx):
    for bad in (-5, 0, True, "1704067200", float("nan"), float("inf"), float("-inf")):
        tx = raw_tx()
        tx["timestamp"] = bad
        assert normalize_transaction(tx, WALLET).timestamp == 0
    tx = raw_tx()
    tx["timestamp"] = 1704067200.9
    assert normalize_transaction(tx, WALLET).timestamp == 1704067200


def test_legacy_memo_program_detected(raw_tx):
    tx = raw_tx(programs=[LEGACY_MEMO_PROGRAM_ID])
    facts = normalize_transaction(tx, WALLET)
    assert facts.has_memo is True
    # empty data carries no content
    assert facts.memo_content is None


def test_custom_registry_memo_ids(raw_tx):
    registry = ProgramRegistry(memo_program_ids={TOKEN_PROGRAM})
    facts = normalize_transaction(raw_tx(programs=[TOKEN_PROGRAM]), WALLET, registry)
    assert facts.has_memo is True
    assert normalize_transaction(raw_tx(memo_data="hi"), WALLET, registry).has_memo is False


def test_normalize_transactions_preserves_order(raw_tx):
    raws = [raw_tx(timestamp=1704067200 + i, signature=f"s{i}") for i in (3, 1, 2)]
    facts = normalize_transactions(raws, WALLET)
    assert [f.signature for f in facts] == ["s3", "s1", "s2"]
    assert normalize_transactions([], WALLET) == []


def test_to_dict(raw_tx):
    d = normalize_transaction(raw_tx(signature="s"), WALLET).to_dict()
    assert d["fee_payer"] == WALLET
    assert d["programs"] == [SYSTEM_PROGRAM]
    assert d["has_memo"] is False


def test_non_finite_timestamp_does_not_abort_batch():
    """NaN / Infinity literals parse as floats; the record keeps timestamp 0 and the batch survives."""
    raws = json.loads('[{"feePayer": "A", "timestamp": NaN}, {"feePayer": "B", "timestamp": Infinity}, {"feePayer": "C", "timestamp": 1704067200}]')
    facts = normalize_transactions(raws, WALLET)
    assert [f.timestamp for f in facts] == [0, 0, 1704067200]
    assert [f.fee_payer for f in facts] == ["A", "B", "C"]
