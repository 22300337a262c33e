"""
Unit tests for wallet secret decoding.
"""

import pytest
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import base58
from solders.keypair import Keypair

from swapagent.trading.wallet import keypair_from_secret, keypairs_from_secrets


class TestKeypairFromSecret:
    def test_full_secret(self):
        keypair = Keypair()
        secret = base58.b58encode(bytes(keypair)).decode()
        assert keypair_from_secret(secret).pubkey() == keypair.pubkey()

    def test_seed_secret(self):
        seed = bytes(range(32))
        secret = base58.b58encode(seed).decode()
        assert keypair_from_secret(secret).pubkey() == Keypair.from_seed(seed).pubkey()

    def test_whitespace_trimmed(self):
        keypair = Keypair()
        secret = f"  {base58.b58encode(bytes(keypair)).decode()}\n"
        assert keypair_from_secret(secret).pubkey() == keypair.pubkey()

    def test_empty(self):
        with pytest.raises(ValueError, match="Empty"):
            keypair_from_secret("  ")

    def test_bad_length(self):
        with pytest.raises(ValueError, match="invalid key length"):
            keypair_from_secret(base58.b58encode(b"short").decode())

    def test_not_base58(self):
        with pytest.raises(ValueError):
            keypair_from_secret("0OIl")

    def test_many(self):
        keypairs = [Keypair(), Keypair()]
        secrets = [base58.b58encode(bytes(k)).decode() for k in keypairs]
        assert [k.pubkey() for k in keypairs_from_secrets(secrets)] == [k.pubkey() for k in keypairs]
