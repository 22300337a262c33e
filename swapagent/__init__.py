"""
SwapAgent - Risk-gated Solana swap execution

Turns buy/sell intents into confirmed Jupiter swaps, behind a position
and daily-loss gate, with cached pricing for whatever decides the trades.
"""

__version__ = "0.1.0"
