"""
Token account lookup for SwapAgent.

Finds the wallet's holding account for a mint and reads its balance.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from solana.rpc.types import TokenAccountOpts
from solders.pubkey import Pubkey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenAccountSnapshot:
    """Balance of a token account."""
    pubkey: Pubkey
    amount: int  # base units
    decimals: int


class AccountResolver:
    """Resolves token accounts and balances over RPC."""

    def __init__(self, rpc_client, attempts: int = 3):
        """
        Initialize account resolver.

        Args:
            rpc_client: solana.rpc.api.Client
            attempts: Default lookup attempts before giving up
        """
        self.rpc_client = rpc_client
        self.attempts = max(1, attempts)

    def find_token_account(
        self,
        owner: Pubkey,
        mint: Pubkey,
        attempts: Optional[int] = None,
    ) -> Optional[Pubkey]:
        """
        Find the first token account owned by owner for mint.

        RPC errors are retried; the last one is re-raised. An empty answer
        is also retried since fresh accounts can lag in the RPC index.

        Returns:
            Token account pubkey, or None if the owner holds none
        """
        attempts = max(1, attempts or self.attempts)

        for attempt in range(attempts):
            try:
                response = self.rpc_client.get_token_accounts_by_owner(
                    owner, TokenAccountOpts(mint=mint)
                )
                accounts = response.value or []
                if accounts:
                    return accounts[0].pubkey
                logger.debug(f"No token account for {mint} yet ({attempt + 1}/{attempts})")
            except Exception as e:
                if attempt == attempts - 1:
                    logger.error(f"Token account lookup failed for {mint}: {e}")
                    raise
                logger.warning(f"Token account lookup error, retrying ({attempt + 1}/{attempts}): {e}")

        return None

    def get_token_account_snapshot(self, account: Pubkey) -> TokenAccountSnapshot:
        """Read the balance of a token account. No retry."""
        response = self.rpc_client.get_token_account_balance(account)
        balance = response.value
        return TokenAccountSnapshot(
            pubkey=account,
            amount=int(balance.amount),
            decimals=int(balance.decimals),
        )
