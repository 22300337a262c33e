"""
Swap journal for SwapAgent.

Persists every swap attempt and rebuilds the risk ledger on startup.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from swapagent.core.db import init_db, session_scope
from swapagent.core.models import SwapRecord, SwapSide, SwapStatus
from swapagent.core.utils import lamports_to_sol
from swapagent.risk.engine import TradeRecord
from swapagent.trading.intents import BuyIntent, ExecutionResult, SwapIntent

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SwapJournal:
    """SQLite-backed log of swaps."""

    def __init__(self, database_path: str):
        self.database_path = database_path
        init_db(database_path)

    def record(
        self,
        intent: SwapIntent,
        result: Optional[ExecutionResult] = None,
        error: Optional[BaseException] = None,
        dry_run: bool = False,
        realized_pnl_sol: Optional[float] = None,
    ) -> int:
        """
        Record a swap attempt.

        Returns:
            ID of the stored SwapRecord
        """
        if error is not None:
            status = SwapStatus.FAILED
        elif dry_run:
            status = SwapStatus.DRY_RUN
        else:
            status = SwapStatus.CONFIRMED

        is_buy = isinstance(intent, BuyIntent)
        record = SwapRecord(
            mint=intent.mint,
            side=SwapSide.BUY if is_buy else SwapSide.SELL,
            sol_amount=intent.sol_amount if is_buy else None,
            percent=None if is_buy else intent.percent,
            token_amount=None if is_buy or intent.token_amount is None else str(intent.token_amount),
            slippage_bps=intent.slippage_bps,
            status=status,
            signature=result.signature if result else None,
            final_amount=str(result.final_amount) if result and result.final_amount is not None else None,
            realized_pnl_sol=realized_pnl_sol,
            error_message=str(error) if error is not None else None,
            dry_run=dry_run,
        )

        with session_scope(self.database_path) as session:
            session.add(record)
            session.flush()
            record_id = record.id

        logger.info(f"Journaled swap {record_id}: {record.side.value} {record.mint} [{status.value}]")
        return record_id

    def recent(self, hours: int = 24, include_dry_run: bool = False) -> List[SwapRecord]:
        """Swaps in the last `hours`, oldest first."""
        cutoff = datetime.now(timezone.utc) - timedelta(hours=hours)

        with session_scope(self.database_path) as session:
            query = session.query(SwapRecord).filter(SwapRecord.timestamp >= cutoff)
            if not include_dry_run:
                query = query.filter(SwapRecord.dry_run.is_(False))
            records = query.order_by(SwapRecord.timestamp.asc(), SwapRecord.id.asc()).all()
            session.expunge_all()

        return records

    def recent_trades(self, hours: int = 24, include_dry_run: bool = False) -> List[TradeRecord]:
        """
        Successful swaps in the last `hours` as risk ledger records.

        Sells count the SOL received (final amount in lamports).
        """
        trades: List[TradeRecord] = []
        for record in self.recent(hours=hours, include_dry_run=include_dry_run):
            if record.status == SwapStatus.FAILED:
                continue

            if record.side == SwapSide.BUY:
                sol_amount = record.sol_amount or 0.0
            elif record.final_amount and not record.dry_run:
                sol_amount = lamports_to_sol(int(record.final_amount))
            else:
                # Dry-run sells echo token units, not lamports
                sol_amount = 0.0

            trades.append(TradeRecord(
                side=record.side.value,
                sol_amount=sol_amount,
                timestamp=_as_utc(record.timestamp),
                realized_pnl_sol=record.realized_pnl_sol,
            ))

        return trades
