"""
Risk gate for SwapAgent.

Position and daily loss limits checked before every trade.
"""

from swapagent.risk.engine import RiskEngine, RiskLimits, TradeRecord

__all__ = ["RiskEngine", "RiskLimits", "TradeRecord"]
