"""
Database models for SwapAgent.

Models: SwapRecord.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    Float,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class SwapSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class SwapStatus(str, Enum):
    """Outcome of a swap attempt."""
    CONFIRMED = "confirmed"
    FAILED = "failed"
    DRY_RUN = "dry_run"


class SwapRecord(Base):
    """
    A single swap attempt.

    Base-unit amounts are stored as text; u64 token amounts overflow
    SQLite's signed 64-bit integers.
    """

    __tablename__ = "swaps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    mint: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    side: Mapped[SwapSide] = mapped_column(SQLEnum(SwapSide), nullable=False)

    # Intent
    sol_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    percent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    token_amount: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    slippage_bps: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Outcome
    status: Mapped[SwapStatus] = mapped_column(SQLEnum(SwapStatus), nullable=False)
    signature: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    final_amount: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    realized_pnl_sol: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    dry_run: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<SwapRecord {self.id}: {self.side.value} {self.mint} [{self.status.value}]>"
