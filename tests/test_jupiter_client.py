"""
Unit tests for the Jupiter client.

Tests quote parameters, route selection, and swap transaction decoding.
"""

import base64
import pytest
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import requests

from swapagent.core.errors import SwapResponseError
from swapagent.trading.jupiter import SOL_MINT, JupiterClient, SwapQuote

MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


def http_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def route(out_amount="12345", in_amount="1000000"):
    return {
        "inputMint": SOL_MINT,
        "outputMint": MINT,
        "inAmount": in_amount,
        "outAmount": out_amount,
        "priceImpactPct": "0.12",
        "routePlan": [{"swapInfo": {"label": "Raydium"}}],
    }


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    return JupiterClient("https://jup.example/", session=session)


class TestGetQuote:
    """Test quote requests."""

    def test_exact_in_parameters(self, client, session):
        session.get.return_value = http_response({"routes": [route()]})

        client.get_quote(SOL_MINT, MINT, 1_000_000, 1500)

        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == "https://jup.example/v6/quote"
        assert params["inputMint"] == SOL_MINT
        assert params["outputMint"] == MINT
        assert params["amount"] == "1000000"
        assert params["slippageBps"] == 1500
        assert params["swapMode"] == "ExactIn"
        assert params["onlyDirectRoutes"] == "false"
        assert params["asLegacyTransaction"] == "false"

    def test_first_route_is_used(self, client, session):
        best = route(out_amount="999")
        session.get.return_value = http_response({"routes": [best, route(out_amount="1")]})

        quote = client.get_quote(SOL_MINT, MINT, 1_000_000, 50)

        assert quote.out_amount == 999
        assert quote.in_amount == 1_000_000
        assert quote.price_impact_pct == pytest.approx(0.12)
        assert quote.raw_quote is best

    def test_single_quote_body(self, client, session):
        session.get.return_value = http_response(route(out_amount="42"))
        assert client.get_quote(SOL_MINT, MINT, 1_000_000, 50).out_amount == 42

    def test_empty_routes(self, client, session):
        session.get.return_value = http_response({"routes": []})
        assert client.get_quote(SOL_MINT, MINT, 1, 50) is None

    def test_error_body(self, client, session):
        session.get.return_value = http_response({"error": "Could not find any route"})
        assert client.get_quote(SOL_MINT, MINT, 1, 50) is None

    def test_http_error_propagates(self, client, session):
        response = http_response({})
        response.raise_for_status.side_effect = requests.HTTPError("500")
        session.get.return_value = response

        with pytest.raises(requests.HTTPError):
            client.get_quote(SOL_MINT, MINT, 1, 50)

    def test_timeout_override(self, client, session):
        session.get.return_value = http_response({"routes": [route()]})
        client.get_quote(SOL_MINT, MINT, 1, 50, timeout=3)
        assert session.get.call_args.kwargs["timeout"] == 3


class TestGetSwapTransaction:
    """Test swap transaction requests."""

    def make_quote(self):
        raw = route()
        return SwapQuote(
            input_mint=SOL_MINT,
            output_mint=MINT,
            in_amount=1_000_000,
            out_amount=12345,
            price_impact_pct=0.0,
            slippage_bps=1500,
            route_plan=[],
            raw_quote=raw,
        )

    def test_request_body(self, client, session):
        quote = self.make_quote()
        session.post.return_value = http_response(
            {"swapTransaction": base64.b64encode(b"tx-bytes").decode()}
        )

        raw = client.get_swap_transaction(quote, "Owner111", priority_fee="auto")

        assert raw == b"tx-bytes"
        assert session.post.call_args.args[0] == "https://jup.example/v6/swap"
        body = session.post.call_args.kwargs["json"]
        assert body == {
            "quoteResponse": quote.raw_quote,
            "userPublicKey": "Owner111",
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
            "prioritizationFeeLamports": "auto",
        }

    def test_numeric_priority_fee(self, client, session):
        session.post.return_value = http_response(
            {"swapTransaction": base64.b64encode(b"x").decode()}
        )
        client.get_swap_transaction(self.make_quote(), "Owner111", priority_fee=5000)
        assert session.post.call_args.kwargs["json"]["prioritizationFeeLamports"] == 5000

    def test_missing_transaction(self, client, session):
        session.post.return_value = http_response({"error": "bad quote"})

        with pytest.raises(SwapResponseError, match="bad quote"):
            client.get_swap_transaction(self.make_quote(), "Owner111")
