"""
Swap intents and results.

An intent is either a BuyIntent or a SellIntent; executors dispatch on
the type.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Union


@dataclass(frozen=True)
class BuyIntent:
    """Spend sol_amount SOL on mint."""
    mint: str
    sol_amount: float
    slippage_bps: Optional[int] = None

    @property
    def side(self) -> str:
        return "buy"


@dataclass(frozen=True)
class SellIntent:
    """
    Sell mint for SOL.

    token_amount (base units) governs when set; otherwise percent of the
    holding, defaulting to 100.
    """
    mint: str
    percent: Optional[float] = None
    token_amount: Optional[int] = None
    slippage_bps: Optional[int] = None

    @property
    def side(self) -> str:
        return "sell"

    @property
    def effective_percent(self) -> float:
        return 100.0 if self.percent is None else self.percent


SwapIntent = Union[BuyIntent, SellIntent]


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a successful swap."""
    signature: str
    final_amount: Optional[int] = None  # output token base units


class SwapExecutor(Protocol):
    """Anything that turns an intent into a confirmed swap."""

    def execute(self, intent: SwapIntent) -> ExecutionResult:
        ...


def intent_to_dict(intent: SwapIntent) -> dict:
    """
    Loggable/JSON-safe view of an intent.

    Base-unit amounts are stringified; they can exceed what JSON
    consumers hold exactly.
    """
    data = {"side": intent.side, "mint": intent.mint}
    if isinstance(intent, BuyIntent):
        data["sol_amount"] = intent.sol_amount
    else:
        data["percent"] = intent.percent
        data["token_amount"] = str(intent.token_amount) if intent.token_amount is not None else None
    data["slippage_bps"] = intent.slippage_bps
    return data


def result_to_dict(result: ExecutionResult) -> dict:
    return {
        "signature": result.signature,
        "final_amount": str(result.final_amount) if result.final_amount is not None else None,
    }
