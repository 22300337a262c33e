#!/usr/bin/env python3
"""
Risk-checked swaps from the command line.

Buys go through the risk gate first. Every attempt is journaled and
notified. DRY_RUN=true (or no wallet) simulates without sending.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import requests
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from swapagent.agent import build_agent
from swapagent.core.config import Config
from swapagent.core.errors import SwapError
from swapagent.core.logging import setup_logging
from swapagent.core.utils import shorten
from swapagent.trading.journal import SwapJournal

app = typer.Typer(help="Risk-checked Jupiter swaps")
console = Console()


def _load():
    load_dotenv()
    config = Config.from_env()
    setup_logging(config.log_level, config.log_file)
    journal = SwapJournal(config.database_path)
    return config, build_agent(config, journal=journal)


def _mode_badge(config: Config) -> str:
    return "[red]LIVE[/red]" if config.is_live else "[cyan]DRY RUN[/cyan]"


@app.command()
def buy(
    mint: str = typer.Argument(..., help="Token mint to buy"),
    sol: float = typer.Option(..., "--sol", "-s", help="SOL amount to spend"),
    slippage: int = typer.Option(None, "--slippage", help="Slippage in bps (default from config)"),
):
    """
    Buy a token with SOL.

    Example:
        python scripts/swap.py buy <MINT> --sol 0.1
    """
    config, agent = _load()
    console.print(f"[bold]BUY[/bold] {sol} SOL → {mint} [{_mode_badge(config)}]")

    try:
        result = agent.buy(mint, sol, slippage_bps=slippage)
    except (SwapError, requests.RequestException) as e:
        console.print(f"[red]✗ Swap failed: {e}[/red]")
        raise typer.Exit(1)

    if result is None:
        console.print("[yellow]Blocked by risk gate. See `status`.[/yellow]")
        raise typer.Exit(2)

    console.print(f"[green]✓ Confirmed: {result.signature}[/green]")
    if result.final_amount:
        console.print(f"  Expected tokens: {result.final_amount:,} base units")


@app.command()
def sell(
    mint: str = typer.Argument(..., help="Token mint to sell"),
    percent: float = typer.Option(None, "--percent", "-p", help="Percent of holding (default 100)"),
    amount: int = typer.Option(None, "--amount", "-a", help="Exact amount in base units"),
    slippage: int = typer.Option(None, "--slippage", help="Slippage in bps (default from config)"),
    pnl: float = typer.Option(None, "--pnl", help="Realized PnL in SOL, negative for a loss"),
):
    """
    Sell a token for SOL.

    Example:
        python scripts/swap.py sell <MINT> --percent 50
    """
    if percent is not None and amount is not None:
        console.print("[red]Use either --percent or --amount, not both.[/red]")
        raise typer.Exit(1)

    config, agent = _load()
    what = f"{amount:,} base units" if amount is not None else f"{percent if percent is not None else 100}%"
    console.print(f"[bold]SELL[/bold] {what} of {mint} [{_mode_badge(config)}]")

    try:
        result = agent.sell(mint, percent=percent, token_amount=amount, slippage_bps=slippage,
                            realized_pnl_sol=pnl)
    except (SwapError, requests.RequestException) as e:
        console.print(f"[red]✗ Swap failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Confirmed: {result.signature}[/green]")
    if result.final_amount:
        console.print(f"  Expected output: {result.final_amount:,} base units")


@app.command()
def status(
    hours: int = typer.Option(24, "--hours", "-h", help="Hours of swaps to list"),
):
    """
    Show risk limits, exposure, and recent swaps.
    """
    config, agent = _load()
    risk = agent.risk.get_status()

    console.print(f"\n[bold]Risk Status[/bold] [{_mode_badge(config)}]\n")
    console.print(f"  Exposure: {risk['exposure_sol']:.4f}/{risk['max_position_sol']} SOL "
                  f"({risk['position_remaining_sol']:.4f} remaining)")
    console.print(f"  Daily Loss: {risk['daily_loss_sol']:.4f}/{risk['max_daily_loss_sol']} SOL "
                  f"({risk['daily_loss_remaining_sol']:.4f} remaining)")
    console.print(f"  Trades (24h): {risk['trades_24h']}\n")

    records = agent.journal.recent(hours=hours, include_dry_run=True)
    if not records:
        console.print("[dim]No swaps in this window.[/dim]")
        return

    table = Table(title=f"Swaps (last {hours}h)")
    table.add_column("ID", justify="right")
    table.add_column("Time")
    table.add_column("Side")
    table.add_column("Mint")
    table.add_column("Size", justify="right")
    table.add_column("Status")
    table.add_column("Tx")

    for record in records:
        if record.sol_amount is not None:
            size = f"{record.sol_amount} SOL"
        elif record.token_amount is not None:
            size = f"{int(record.token_amount):,} units"
        else:
            size = f"{record.percent if record.percent is not None else 100}%"

        table.add_row(
            str(record.id),
            record.timestamp.strftime("%m-%d %H:%M"),
            record.side.value.upper(),
            shorten(record.mint),
            size,
            record.status.value,
            shorten(record.signature or "-", keep=6),
        )

    console.print(table)


@app.command("config")
def show_config():
    """Show the active configuration (secrets masked)."""
    load_dotenv()
    console.print(Config.from_env().get_summary())


if __name__ == "__main__":
    app()
