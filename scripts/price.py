#!/usr/bin/env python3
"""
Token price and metadata lookups.

Read-only; never trades.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from typing import List

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from solana.rpc.api import Client

from swapagent.core.config import Config
from swapagent.core.logging import setup_logging
from swapagent.pricing.metadata import TokenMetadataService
from swapagent.pricing.service import PricingService
from swapagent.trading.jupiter import JupiterClient

app = typer.Typer(help="Token prices via DexScreener and Jupiter")
console = Console()


def _pricing() -> PricingService:
    load_dotenv()
    config = Config.from_env()
    setup_logging(config.log_level, None)
    return PricingService(
        rpc_client=Client(config.rpc_url, timeout=10),
        jupiter=JupiterClient(config.jupiter_base_url),
        price_ttl_seconds=config.price_ttl_seconds,
        price_negative_ttl_seconds=config.price_negative_ttl_seconds,
    )


@app.command()
def price(
    mints: List[str] = typer.Argument(..., help="Token mint(s)"),
):
    """
    Show USD and SOL prices for tokens.

    Example:
        python scripts/price.py price DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263
    """
    pricing = _pricing()
    labels = TokenMetadataService(pricing)

    sol_usd = pricing.get_sol_usd()
    console.print(f"SOL/USD: {f'${sol_usd:,.2f}' if sol_usd else '[red]unavailable[/red]'}\n")

    table = Table(title="Token Prices")
    table.add_column("Token")
    table.add_column("USD (DexScreener)", justify="right")
    table.add_column("USD (Jupiter)", justify="right")
    table.add_column("SOL", justify="right")

    for mint in mints:
        ds = pricing.get_price(mint)
        jup = pricing.get_price_jupiter_usd(mint)
        in_sol = pricing.get_price_in_sol(mint)
        table.add_row(
            labels.format_token_label(mint),
            f"${ds.usd_price:,.8g}" if ds else "-",
            f"${jup.usd_price:,.8g}" if jup else "-",
            f"{in_sol:.9g}" if in_sol is not None else "-",
        )

    console.print(table)


@app.command()
def meta(
    mint: str = typer.Argument(..., help="Token mint"),
):
    """Show symbol, name and decimals for a token."""
    pricing = _pricing()
    token = pricing.get_token_meta(mint)

    if not token:
        console.print(f"[yellow]No metadata for {mint}[/yellow]")
        raise typer.Exit(1)

    console.print(f"Mint: {mint}")
    console.print(f"Symbol: {token.symbol or '?'}")
    console.print(f"Name: {token.name or '?'}")
    console.print(f"Decimals: {pricing.get_mint_decimals(mint)}")


if __name__ == "__main__":
    app()
