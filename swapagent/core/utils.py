"""
Utility functions for SwapAgent.
"""

import math
from decimal import Decimal
from typing import Any, Optional

LAMPORTS_PER_SOL = 10**9


def parse_bool(value: Optional[str]) -> bool:
    """Parse an environment flag. Accepts true/1/yes."""
    if not value:
        return False
    return value.strip().lower() in ("true", "1", "yes")


def parse_positive_float(value: Optional[str], default: float) -> float:
    """Parse a positive float, falling back to default."""
    try:
        number = float(value.strip()) if value else math.nan
    except ValueError:
        return default
    if math.isfinite(number) and number > 0:
        return number
    return default


def is_positive_number(value: Any) -> bool:
    """True for finite numbers greater than zero (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return math.isfinite(value) and value > 0


def _to_decimal(value: Any) -> Decimal:
    """Exact Decimal of an int or Decimal; floats via their shortest repr."""
    if isinstance(value, (Decimal, int)):
        return Decimal(value)
    return Decimal(str(float(value)))


def sol_to_lamports(sol_amount: float) -> int:
    """
    Convert a SOL amount to lamports, rounding down.

    Goes through Decimal so 0.29 SOL is 290_000_000, not 289_999_999.

    Examples:
        0.01 -> 10_000_000
        1.5 -> 1_500_000_000
    """
    return int(_to_decimal(sol_amount) * LAMPORTS_PER_SOL)


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


def percent_of(amount: int, percent: float) -> int:
    """
    Floor of amount * percent / 100 with percent clamped to [0, 100].

    Raises ValueError for a NaN or infinite percent.

    Examples:
        (1_000, 37) -> 370
        (1_000, 150) -> 1_000
        (3, 50) -> 1
    """
    if not math.isfinite(percent):
        raise ValueError(f"Percent must be finite: {percent}")
    clamped = max(0.0, min(100.0, float(percent)))
    return int(Decimal(amount) * _to_decimal(clamped) / 100)


def shorten(value: str, keep: int = 4) -> str:
    """Shorten an address or signature for display: 'So11...1112'."""
    if not value or len(value) <= keep * 2 + 3:
        return value
    return f"{value[:keep]}...{value[-keep:]}"


def mask_secret(value: Optional[str]) -> str:
    """Mask a token or URL for safe logging."""
    if not value:
        return "Not configured"
    if len(value) <= 8:
        return "***"
    return f"{value[:4]}***{value[-4:]}"
