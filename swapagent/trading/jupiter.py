"""
Jupiter swap aggregator client for SwapAgent.

Fetches best-route quotes and unsigned swap transactions.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests

from swapagent.core.errors import SwapResponseError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://quote-api.jup.ag"

# Wrapped SOL mint; Jupiter's counter-asset for every swap
SOL_MINT = "So11111111111111111111111111111111111111112"


@dataclass
class SwapQuote:
    """Best route from Jupiter for a swap."""
    input_mint: str
    output_mint: str
    in_amount: int  # smallest unit of input token
    out_amount: int  # smallest unit of output token
    price_impact_pct: float
    slippage_bps: int
    route_plan: list
    raw_quote: dict  # Full route, sent back with the swap request


def _first_route(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    First candidate route of a quote response.

    Accepts the list form ({"routes": [...]}) and the single-quote form.
    """
    routes = data.get("routes")
    if isinstance(routes, list):
        return routes[0] if routes else None
    if "outAmount" in data:
        return data
    return None


class JupiterClient:
    """
    Jupiter V6 HTTP client.

    Quote and swap requests only; signing happens in the executor.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 20,
    ):
        """
        Initialize Jupiter client.

        Args:
            base_url: Jupiter API root
            session: Shared requests session
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_bps: int,
        timeout: Optional[float] = None,
    ) -> Optional[SwapQuote]:
        """
        Get the best-route quote for an exact-in swap.

        Args:
            input_mint: Input token mint address
            output_mint: Output token mint address
            amount: Amount in smallest unit of the input token
            slippage_bps: Slippage tolerance in basis points
            timeout: Override the client timeout

        Returns:
            SwapQuote, or None when Jupiter has no route

        Raises:
            requests.RequestException on HTTP failure
        """
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": slippage_bps,
            "swapMode": "ExactIn",
            "onlyDirectRoutes": "false",
            "asLegacyTransaction": "false",
        }

        logger.info(f"Quote request: {amount} {input_mint} -> {output_mint} ({slippage_bps} bps)")

        response = self.session.get(
            f"{self.base_url}/v6/quote",
            params=params,
            timeout=timeout or self.timeout,
        )
        response.raise_for_status()
        data = response.json() or {}

        if "error" in data:
            logger.warning(f"Jupiter quote error: {data['error']}")
            return None

        route = _first_route(data)
        if not route:
            return None

        return SwapQuote(
            input_mint=route.get("inputMint", input_mint),
            output_mint=route.get("outputMint", output_mint),
            in_amount=int(route.get("inAmount") or amount),
            out_amount=int(route.get("outAmount") or 0),
            price_impact_pct=float(route.get("priceImpactPct") or 0),
            slippage_bps=slippage_bps,
            route_plan=route.get("routePlan", []),
            raw_quote=route,
        )

    def get_swap_transaction(
        self,
        quote: SwapQuote,
        user_pubkey: str,
        priority_fee: Union[int, str] = "auto",
    ) -> bytes:
        """
        Get the unsigned swap transaction for a quote.

        Args:
            quote: Quote from get_quote()
            user_pubkey: Signer's wallet public key
            priority_fee: Priority fee in lamports, or "auto"

        Returns:
            Serialized VersionedTransaction bytes

        Raises:
            SwapResponseError if the response has no transaction
        """
        payload = {
            "quoteResponse": quote.raw_quote,
            "userPublicKey": user_pubkey,
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
            "prioritizationFeeLamports": priority_fee,
        }

        response = self.session.post(
            f"{self.base_url}/v6/swap",
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json() or {}

        swap_tx_b64 = data.get("swapTransaction")
        if not swap_tx_b64:
            raise SwapResponseError(
                f"Jupiter swap response missing transaction: {data.get('error', 'no error given')}"
            )

        return base64.b64decode(swap_tx_b64)
