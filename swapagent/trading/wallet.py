"""
Wallet loading for SwapAgent trading.
"""

from typing import List

import base58
from solders.keypair import Keypair


def keypair_from_secret(secret: str) -> Keypair:
    """
    Build a Keypair from a base58 secret.

    Solana secrets are 64 bytes (32 private + 32 public) or a 32-byte seed.

    Raises:
        ValueError if the secret is empty or cannot be decoded
    """
    trimmed = (secret or "").strip()
    if not trimmed:
        raise ValueError("Empty wallet secret provided")

    try:
        key_bytes = base58.b58decode(trimmed)
    except ValueError as e:
        raise ValueError(f"Failed to decode wallet secret: {e}") from e

    try:
        if len(key_bytes) == 64:
            return Keypair.from_bytes(key_bytes)
        if len(key_bytes) == 32:
            return Keypair.from_seed(key_bytes)
    except Exception as e:
        raise ValueError(f"Failed to decode wallet secret: {e}") from e

    raise ValueError(f"Failed to decode wallet secret: invalid key length {len(key_bytes)} bytes")


def keypairs_from_secrets(secrets: List[str]) -> List[Keypair]:
    return [keypair_from_secret(secret) for secret in secrets]
