"""
DexScreener pair parsing and token labels.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SOLANA_CHAIN_ID = "solana"


@dataclass(frozen=True)
class PriceRecord:
    """USD price of a token."""
    usd_price: float


@dataclass(frozen=True)
class TokenMeta:
    """Token symbol and name. Either may be unknown."""
    symbol: Optional[str] = None
    name: Optional[str] = None


@dataclass
class PairInfo:
    """Trading pair information from DexScreener."""
    pair_address: str
    chain_id: str
    base_mint: str
    base_symbol: str
    base_name: str
    quote_mint: str
    quote_symbol: str
    quote_name: str
    liquidity_usd: float
    price_usd: Optional[float]
    dex_id: str


def _to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return math.nan
    return number


def pair_liquidity_usd(pair: Dict[str, Any]) -> float:
    """USD liquidity of a raw pair, 0 when missing or malformed."""
    liquidity = pair.get("liquidity") or {}
    number = _to_float(liquidity.get("usd") if isinstance(liquidity, dict) else None)
    return number if math.isfinite(number) else 0.0


def pair_price_usd(pair: Dict[str, Any]) -> Optional[float]:
    """
    USD price of a raw pair.

    Reads priceUsd, then price.usd, then price_usd; a zero price falls
    through to the next field. Returns None unless the price is finite
    and positive.
    """
    price = pair.get("price")
    candidates = [
        pair.get("priceUsd"),
        price.get("usd") if isinstance(price, dict) else None,
        pair.get("price_usd"),
    ]
    for candidate in candidates:
        if candidate is None or candidate == "":
            continue
        number = _to_float(candidate)
        if number == 0:
            continue
        return number if math.isfinite(number) and number > 0 else None
    return None


def select_best_pair(
    pairs: List[Dict[str, Any]],
    chain_id: str = SOLANA_CHAIN_ID,
) -> Optional[Dict[str, Any]]:
    """
    Pick the most liquid pair.

    Only pairs on chain_id are considered, unless none are, then all
    pairs. Ties keep response order (sorted() is stable, also in reverse).
    """
    if not pairs:
        return None

    same_chain = [p for p in pairs if str(p.get("chainId", "")).lower() == chain_id]
    candidates = same_chain or pairs
    ranked = sorted(candidates, key=pair_liquidity_usd, reverse=True)
    return ranked[0]


def parse_pair(pair: Dict[str, Any]) -> PairInfo:
    """Parse DexScreener pair response into PairInfo."""
    base_token = pair.get("baseToken") or {}
    quote_token = pair.get("quoteToken") or {}

    return PairInfo(
        pair_address=pair.get("pairAddress", ""),
        chain_id=str(pair.get("chainId", "")),
        base_mint=base_token.get("address", ""),
        base_symbol=base_token.get("symbol", ""),
        base_name=base_token.get("name", ""),
        quote_mint=quote_token.get("address", ""),
        quote_symbol=quote_token.get("symbol", ""),
        quote_name=quote_token.get("name", ""),
        liquidity_usd=pair_liquidity_usd(pair),
        price_usd=pair_price_usd(pair),
        dex_id=pair.get("dexId", ""),
    )


def meta_from_pair(pair: Dict[str, Any], mint: str) -> TokenMeta:
    """
    Symbol and name of mint from whichever side of the pair it is on.

    Both fields are None if the mint is on neither side.
    """
    info = parse_pair(pair)
    normalized = mint.lower()

    if info.base_mint.lower() == normalized:
        return TokenMeta(symbol=info.base_symbol or None, name=info.base_name or None)
    if info.quote_mint.lower() == normalized:
        return TokenMeta(symbol=info.quote_symbol or None, name=info.quote_name or None)
    return TokenMeta()


class TokenMetadataService:
    """Human-readable token labels backed by the pricing metadata cache."""

    def __init__(self, pricing):
        self.pricing = pricing

    def format_token_label(self, mint: str) -> str:
        """
        Label a mint for display.

        Examples:
            "Bonk (BONK)", "Bonk", "BONK", or the mint itself
        """
        meta = self.pricing.get_token_meta(mint)
        if not meta:
            return mint
        if meta.symbol and meta.name:
            return f"{meta.name} ({meta.symbol})"
        if meta.name:
            return meta.name
        if meta.symbol:
            return meta.symbol
        return mint
