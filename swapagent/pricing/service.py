"""
Token pricing and metadata for SwapAgent.

Two TTL caches per token: prices (short-lived) and metadata (24h).
Failures are cached as None for a shorter window so a dead upstream is
not hammered. Nothing here raises to the caller.
"""

import logging
import math
import time
from typing import Any, Callable, Dict, List, Optional

import requests
from solders.pubkey import Pubkey

from swapagent.pricing.cache import MISSING, TTLCache
from swapagent.pricing.metadata import (
    PriceRecord,
    TokenMeta,
    meta_from_pair,
    pair_price_usd,
    select_best_pair,
)
from swapagent.trading.jupiter import SOL_MINT, JupiterClient

logger = logging.getLogger(__name__)

DEXSCREENER_TOKENS_API = "https://api.dexscreener.com/latest/dex/tokens"

DEFAULT_PRICE_TTL = 15.0
DEFAULT_NEGATIVE_TTL = 60.0
MIN_PRICE_TTL = 1.0
MIN_NEGATIVE_TTL = 5.0
MAX_NEGATIVE_TTL = 60.0
META_TTL = 24 * 60 * 60

DEFAULT_DECIMALS = 9
QUOTE_SLIPPAGE_BPS = 50
HTTP_TIMEOUT = 10


class PricingService:
    """
    Cached price and metadata lookups.

    Sources:
    1. DexScreener (USD price of the most liquid pair, metadata)
    2. Jupiter quotes (SOL-denominated price)
    """

    def __init__(
        self,
        rpc_client=None,
        jupiter: Optional[JupiterClient] = None,
        price_ttl_seconds: float = DEFAULT_PRICE_TTL,
        price_negative_ttl_seconds: float = DEFAULT_NEGATIVE_TTL,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize pricing service.

        Args:
            rpc_client: solana Client used for mint decimals
            jupiter: Jupiter client for route quotes
            price_ttl_seconds: TTL of found prices (at least 1s)
            price_negative_ttl_seconds: TTL of missing prices (5s to 60s)
            session: Shared requests session
            clock: Monotonic time source in seconds
        """
        self.rpc_client = rpc_client
        self.session = session or requests.Session()
        self.jupiter = jupiter or JupiterClient(session=self.session)
        self.price_ttl = max(MIN_PRICE_TTL, price_ttl_seconds)
        self.price_negative_ttl = max(
            MIN_NEGATIVE_TTL, min(price_negative_ttl_seconds, MAX_NEGATIVE_TTL)
        )
        self._price_cache: TTLCache[Optional[PriceRecord]] = TTLCache(clock)
        self._meta_cache: TTLCache[Optional[TokenMeta]] = TTLCache(clock)

    def _set_price(self, key: str, record: Optional[PriceRecord]) -> Optional[PriceRecord]:
        ttl = self.price_ttl if record else self.price_negative_ttl
        self._price_cache.set(key, record, ttl)
        return record

    def _fetch_pairs(self, mint: str) -> List[Dict[str, Any]]:
        """Raw DexScreener pairs for a mint. Empty list is a valid answer."""
        response = self.session.get(f"{DEXSCREENER_TOKENS_API}/{mint}", timeout=HTTP_TIMEOUT)
        response.raise_for_status()
        data = response.json() or {}
        return data.get("pairs") or []

    def get_mint_decimals(self, mint: str) -> int:
        """Decimals of a mint from RPC, 9 when unknown."""
        if self.rpc_client is None:
            return DEFAULT_DECIMALS

        try:
            response = self.rpc_client.get_account_info_json_parsed(Pubkey.from_string(mint))
            value = response.value
            parsed = value.data.parsed if value is not None else None
            decimals = parsed["info"]["decimals"] if isinstance(parsed, dict) else None
            if isinstance(decimals, int) and not isinstance(decimals, bool):
                return decimals
        except Exception as e:
            logger.warning(f"Failed to get decimals for {mint}: {e}")

        return DEFAULT_DECIMALS

    def get_price(self, mint: str) -> Optional[PriceRecord]:
        """
        USD price from the most liquid DexScreener pair.

        Args:
            mint: Token mint address

        Returns:
            PriceRecord, or None if no priced pair exists or the fetch failed
        """
        key = f"ds:{mint}"
        cached = self._price_cache.get(key)
        if cached is not MISSING:
            return cached

        try:
            best = select_best_pair(self._fetch_pairs(mint))
            if best is None:
                return self._set_price(key, None)

            price = pair_price_usd(best)
            return self._set_price(key, PriceRecord(usd_price=price) if price else None)

        except Exception as e:
            logger.warning(f"DexScreener price failed for {mint}: {e}")
            return self._set_price(key, None)

    def _quote_one_token_in_lamports(self, mint: str) -> int:
        """Lamports received for one whole token, 0 without a route."""
        decimals = self.get_mint_decimals(mint)
        quote = self.jupiter.get_quote(
            input_mint=mint,
            output_mint=SOL_MINT,
            amount=10**decimals,
            slippage_bps=QUOTE_SLIPPAGE_BPS,
            timeout=HTTP_TIMEOUT,
        )
        return quote.out_amount if quote else 0

    def get_price_jupiter_usd(self, mint: str) -> Optional[PriceRecord]:
        """
        USD price from a Jupiter quote of one token into SOL.

        Returns:
            PriceRecord, or None without a route or SOL/USD price
        """
        key = f"jup:{mint}"
        cached = self._price_cache.get(key)
        if cached is not MISSING:
            return cached

        try:
            out_lamports = self._quote_one_token_in_lamports(mint)
            if out_lamports <= 0:
                return self._set_price(key, None)

            sol_usd = self.get_sol_usd()
            if not sol_usd:
                return self._set_price(key, None)

            usd_price = out_lamports / 1e9 * sol_usd
            if not math.isfinite(usd_price) or usd_price <= 0:
                return self._set_price(key, None)
            return self._set_price(key, PriceRecord(usd_price=usd_price))

        except Exception as e:
            logger.warning(f"Jupiter price failed for {mint}: {e}")
            return self._set_price(key, None)

    def get_price_in_sol(self, mint: str) -> Optional[float]:
        """
        Price of one whole token in SOL.

        Uses a Jupiter quote first, then DexScreener USD / SOL-USD.

        Returns:
            SOL price, or None if both sources fail
        """
        try:
            out_lamports = self._quote_one_token_in_lamports(mint)
            if out_lamports > 0:
                return out_lamports / 1e9
        except Exception as e:
            logger.warning(f"Jupiter SOL quote failed for {mint}: {e}")

        try:
            record = self.get_price(mint)
            sol_usd = self.get_sol_usd()
            if record and sol_usd and record.usd_price > 0 and sol_usd > 0:
                return record.usd_price / sol_usd
        except Exception as e:
            logger.warning(f"SOL price fallback failed for {mint}: {e}")

        return None

    def get_token_meta(self, mint: str) -> Optional[TokenMeta]:
        """
        Symbol and name from the most liquid DexScreener pair.

        Cached for 24h, including misses and failures.
        """
        cached = self._meta_cache.get(mint)
        if cached is not MISSING:
            return cached

        try:
            best = select_best_pair(self._fetch_pairs(mint))
            meta = meta_from_pair(best, mint) if best is not None else None
        except Exception as e:
            logger.warning(f"Token metadata failed for {mint}: {e}")
            meta = None

        self._meta_cache.set(mint, meta, META_TTL)
        return meta

    def get_sol_usd(self) -> Optional[float]:
        """SOL/USD price, through the same price cache as any token."""
        record = self.get_price(SOL_MINT)
        return record.usd_price if record else None
