"""
Error types for SwapAgent.

Validation errors fail fast and are never retried. Route and liquidity
errors are surfaced immediately. On-chain failures carry the network's
error payload so callers know whether funds moved.
"""

from typing import Any, Optional


class SwapError(Exception):
    """Base class for swap execution failures."""


class InvalidIntentError(SwapError, ValueError):
    """Intent is malformed (missing mint, unknown side)."""


class InvalidAmountError(InvalidIntentError):
    """Amount is not a finite positive number."""


class TokenAccountNotFoundError(SwapError):
    """Owner holds no token account for the mint."""

    def __init__(self, mint: str):
        super().__init__(f"No token account for mint {mint}")
        self.mint = mint


class EmptyBalanceError(SwapError):
    """Computed sell amount is zero."""

    def __init__(self, mint: str):
        super().__init__(f"Token account has no balance for mint {mint}")
        self.mint = mint


class NoRouteError(SwapError):
    """Aggregator returned no route for the requested swap."""

    def __init__(self, input_mint: str, output_mint: str, amount: int):
        super().__init__(
            f"No route available from Jupiter: {input_mint} -> {output_mint} ({amount})"
        )
        self.input_mint = input_mint
        self.output_mint = output_mint
        self.amount = amount


class SwapResponseError(SwapError):
    """Aggregator response is missing required fields."""


class TransactionFailedError(SwapError):
    """Transaction landed but the network reported an error."""

    def __init__(self, signature: str, err: Any):
        super().__init__(f"Transaction failed: {signature}: {err}")
        self.signature = signature
        self.err = err


class ConfirmationTimeoutError(SwapError):
    """Transaction was sent but not confirmed in time."""

    def __init__(self, signature: str, timeout: Optional[float] = None):
        detail = f" after {timeout:.0f}s" if timeout is not None else ""
        super().__init__(f"Transaction confirmation timeout{detail}: {signature}")
        self.signature = signature
