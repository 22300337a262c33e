"""
Notifying decorator for swap executors.
"""

import logging
from typing import Optional

from swapagent.notify.base import Notifier
from swapagent.trading.intents import (
    BuyIntent,
    ExecutionResult,
    SwapExecutor,
    SwapIntent,
    intent_to_dict,
    result_to_dict,
)

logger = logging.getLogger(__name__)


def summarize_intent(intent: SwapIntent) -> str:
    """
    One-line description of an intent.

    Examples:
        "BUY 0.1 SOL → <mint>"
        "SELL 5000 base units of <mint>"
        "SELL 100% of <mint>"
    """
    if isinstance(intent, BuyIntent):
        return f"BUY {intent.sol_amount} SOL → {intent.mint}"
    if intent.token_amount is not None:
        return f"SELL {intent.token_amount} base units of {intent.mint}"
    percent = 100 if intent.percent is None else intent.percent
    return f"SELL {percent}% of {intent.mint}"


def _error_detail(error: BaseException) -> str:
    message = str(error)
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


class NotifyingExecutor:
    """
    Wraps an executor and reports every outcome.

    The inner result or exception always reaches the caller unchanged.
    """

    def __init__(self, inner: SwapExecutor, notifier: Notifier):
        self.inner = inner
        self.notifier = notifier

    def execute(self, intent: SwapIntent) -> ExecutionResult:
        try:
            result = self.inner.execute(intent)
        except Exception as error:
            self._notify(intent, error=error)
            raise

        self._notify(intent, result=result)
        return result

    def _notify(
        self,
        intent: SwapIntent,
        result: Optional[ExecutionResult] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        # Trade outcome wins over notification outcome, formatting included
        try:
            if error is not None:
                message = f"❌ {summarize_intent(intent)}\nError: {_error_detail(error)}"
                meta = {"intent": intent_to_dict(intent), "error": _error_detail(error)}
            else:
                message = f"✅ {summarize_intent(intent)}\nTx: {result.signature}"
                meta = {"intent": intent_to_dict(intent), "result": result_to_dict(result)}
            self.notifier.notify(message, meta)
        except Exception as e:
            logger.error(f"Trade notification failed: {e}")

