"""
Trading automation module for SwapAgent.

Handles swap intents, Jupiter routing, execution, and notification.
"""

from swapagent.trading.accounts import AccountResolver, TokenAccountSnapshot
from swapagent.trading.executor import DryRunExecutor, JupiterSwapExecutor
from swapagent.trading.intents import (
    BuyIntent,
    ExecutionResult,
    SellIntent,
    SwapExecutor,
    SwapIntent,
)
from swapagent.trading.jupiter import SOL_MINT, JupiterClient, SwapQuote
from swapagent.trading.notifying import NotifyingExecutor, summarize_intent
from swapagent.trading.wallet import keypair_from_secret, keypairs_from_secrets

__all__ = [
    "AccountResolver",
    "TokenAccountSnapshot",
    "DryRunExecutor",
    "JupiterSwapExecutor",
    "BuyIntent",
    "SellIntent",
    "SwapIntent",
    "SwapExecutor",
    "ExecutionResult",
    "SOL_MINT",
    "JupiterClient",
    "SwapQuote",
    "NotifyingExecutor",
    "summarize_intent",
    "keypair_from_secret",
    "keypairs_from_secrets",
]
