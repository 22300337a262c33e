"""
Position and loss limits for SwapAgent trading.

Every position-increasing trade must pass the gate before it is sent.
"""

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Deque, Optional

logger = logging.getLogger(__name__)

ROLLING_WINDOW = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RiskLimits:
    """Limits in SOL, fixed for the lifetime of a RiskEngine."""
    max_daily_loss_sol: float
    max_position_sol: float


@dataclass(frozen=True)
class TradeRecord:
    """A realized trade. Never mutated once recorded."""
    side: str  # "buy" or "sell"
    sol_amount: float
    timestamp: datetime = field(default_factory=_utcnow)
    realized_pnl_sol: Optional[float] = None


class RiskEngine:
    """
    Gate for position size and rolling daily loss.

    Owns the open exposure counter and a 24h ledger of trades. Never
    raises; decisions are booleans with the reason logged.
    """

    def __init__(
        self,
        limits: RiskLimits,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize risk engine.

        Args:
            limits: Position and daily loss limits in SOL
            clock: Returns the current aware datetime (defaults to UTC now)
        """
        self.limits = limits
        self._clock = clock or _utcnow
        self._trades: Deque[TradeRecord] = deque()
        self._exposure_sol = 0.0

    @property
    def exposure_sol(self) -> float:
        """Current open position size in SOL."""
        return self._exposure_sol

    @property
    def trades(self) -> list:
        """Snapshot of the ledger, oldest first."""
        return list(self._trades)

    def can_enter_position(self, sol_amount: float) -> bool:
        """
        Check whether a new position of sol_amount may be opened now.

        Does not mutate state.
        """
        if isinstance(sol_amount, bool) or not isinstance(sol_amount, (int, float)) or not math.isfinite(sol_amount):
            logger.warning(f"Position check rejected invalid amount: {sol_amount!r}")
            return False

        next_exposure = self._exposure_sol + sol_amount
        if next_exposure > self.limits.max_position_sol:
            logger.warning(
                f"Position limit: {sol_amount} SOL would raise exposure to "
                f"{next_exposure:.4f}/{self.limits.max_position_sol} SOL"
            )
            return False

        daily_loss = self.compute_daily_loss()
        if daily_loss >= self.limits.max_daily_loss_sol:
            logger.warning(
                f"Daily loss limit: {daily_loss:.4f}/{self.limits.max_daily_loss_sol} SOL "
                f"lost in the last 24h, rejecting {sol_amount} SOL"
            )
            return False

        return True

    def record_trade(self, record: TradeRecord) -> None:
        """
        Record a realized trade and update exposure.

        Records must arrive in timestamp order; eviction is from the oldest end.
        """
        self._trades.append(record)

        if record.side == "buy":
            self._exposure_sol += record.sol_amount
        else:
            self._exposure_sol = max(0.0, self._exposure_sol - record.sol_amount)

        pnl = record.realized_pnl_sol
        if pnl is not None:
            if pnl < 0:
                logger.warning(f"Realized loss: {pnl:.4f} SOL")
            else:
                logger.info(f"Realized PnL: {pnl:.4f} SOL")

        self._trim_old_trades()

    def compute_daily_loss(self) -> float:
        """Sum of realized losses over the last 24 hours, in SOL."""
        cutoff = self._clock() - ROLLING_WINDOW
        loss = 0.0
        for trade in self._trades:
            if trade.timestamp < cutoff:
                continue
            if trade.realized_pnl_sol is not None and trade.realized_pnl_sol < 0:
                loss += abs(trade.realized_pnl_sol)
        return loss

    def _trim_old_trades(self) -> None:
        cutoff = self._clock() - ROLLING_WINDOW
        while self._trades and self._trades[0].timestamp < cutoff:
            self._trades.popleft()

    def get_status(self) -> dict:
        """
        Get current risk status.

        Returns:
            Dict with exposure, loss, and remaining budgets
        """
        daily_loss = self.compute_daily_loss()
        return {
            "exposure_sol": self._exposure_sol,
            "max_position_sol": self.limits.max_position_sol,
            "position_remaining_sol": max(0.0, self.limits.max_position_sol - self._exposure_sol),
            "daily_loss_sol": daily_loss,
            "max_daily_loss_sol": self.limits.max_daily_loss_sol,
            "daily_loss_remaining_sol": max(0.0, self.limits.max_daily_loss_sol - daily_loss),
            "trades_24h": len(self._trades),
        }
