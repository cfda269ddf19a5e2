"""Wallet validation and masking utilities."""

from __future__ import annotations

import re

from solders.pubkey import Pubkey

from backend_privacyscore.core.exceptions import InvalidWalletAddress

# Base58 alphabet (no 0, O, I, l); Solana public keys encode to 32-44 characters
BASE58_WALLET_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def validate_wallet(raw: object) -> str:
    """
    Return the stripped wallet address or raise InvalidWalletAddress.

    Fast shape check first, then a full decode: the address must be a
    32-byte Ed25519 public key.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidWalletAddress("Invalid wallet address")
    wallet = raw.strip()
    if not BASE58_WALLET_RE.match(wallet):
        raise InvalidWalletAddress("Invalid Solana wallet address format")
    try:
        Pubkey.from_string(wallet)
    except Exception as e:
        raise InvalidWalletAddress("Invalid Solana wallet address - not a valid public key") from e
    return wallet


def is_valid_wallet(w: object) -> bool:
    """Return True if w is a valid Solana wallet (Pubkey) address."""
    try:
        validate_wallet(w)
        return True
    except InvalidWalletAddress:
        return False


def short_wallet(wallet: str) -> str:
    """first8...last4, as shown in prompts and reports."""
    if len(wallet) <= 12:
        return wallet
    return f"{wallet[:8]}...{wallet[-4:]}"


def mask_wallet(wallet: str | None) -> str:
    """Log-safe form of a wallet address."""
    return short_wallet(wallet or "")
