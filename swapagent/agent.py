"""
Trading agent wiring for SwapAgent.

Every trade goes: risk gate -> executor (with notifications) -> risk
ledger -> journal.
"""

import logging
from typing import List, Optional

from solana.rpc.api import Client

from swapagent.core.config import Config
from swapagent.core.utils import lamports_to_sol
from swapagent.notify.base import ConsoleNotifier, Notifier, NotifierManager
from swapagent.notify.telegram import TelegramNotifier
from swapagent.notify.webhook import WebhookNotifier
from swapagent.pricing.service import PricingService
from swapagent.risk.engine import RiskEngine, RiskLimits, TradeRecord
from swapagent.trading.executor import DryRunExecutor, JupiterSwapExecutor
from swapagent.trading.intents import BuyIntent, ExecutionResult, SellIntent, SwapExecutor, SwapIntent
from swapagent.trading.journal import SwapJournal
from swapagent.trading.jupiter import JupiterClient
from swapagent.trading.notifying import NotifyingExecutor
from swapagent.trading.wallet import keypair_from_secret

logger = logging.getLogger(__name__)

RPC_TIMEOUT = 20


class TradingAgent:
    """Runs risk-checked trades through an executor."""

    def __init__(
        self,
        risk: RiskEngine,
        executor: SwapExecutor,
        pricing: Optional[PricingService] = None,
        journal: Optional[SwapJournal] = None,
        dry_run: bool = False,
    ):
        self.risk = risk
        self.executor = executor
        self.pricing = pricing
        self.journal = journal
        self.dry_run = dry_run

    def buy(
        self,
        mint: str,
        sol_amount: float,
        slippage_bps: Optional[int] = None,
    ) -> Optional[ExecutionResult]:
        """
        Buy mint with sol_amount SOL if the risk gate allows it.

        Returns:
            ExecutionResult, or None when the gate rejects the trade
        """
        if not self.risk.can_enter_position(sol_amount):
            logger.warning(f"Risk gate blocked buy of {sol_amount} SOL of {mint}")
            return None

        intent = BuyIntent(mint=mint, sol_amount=sol_amount, slippage_bps=slippage_bps)
        result = self._execute(intent)
        self.risk.record_trade(TradeRecord(side="buy", sol_amount=sol_amount))
        self._journal(intent, result=result)
        return result

    def sell(
        self,
        mint: str,
        percent: Optional[float] = None,
        token_amount: Optional[int] = None,
        slippage_bps: Optional[int] = None,
        realized_pnl_sol: Optional[float] = None,
    ) -> ExecutionResult:
        """
        Sell a holding. Sells reduce exposure, so they skip the gate.

        Exposure drops by the SOL received, when the route reports it.
        """
        intent = SellIntent(
            mint=mint,
            percent=percent,
            token_amount=token_amount,
            slippage_bps=slippage_bps,
        )
        result = self._execute(intent)

        received = 0.0
        if result.final_amount and not self.dry_run:
            received = lamports_to_sol(result.final_amount)

        self.risk.record_trade(TradeRecord(
            side="sell",
            sol_amount=received,
            realized_pnl_sol=realized_pnl_sol,
        ))
        self._journal(intent, result=result, realized_pnl_sol=realized_pnl_sol)
        return result

    def _execute(self, intent: SwapIntent) -> ExecutionResult:
        try:
            return self.executor.execute(intent)
        except Exception as error:
            self._journal(intent, error=error)
            raise

    def _journal(
        self,
        intent: SwapIntent,
        result: Optional[ExecutionResult] = None,
        error: Optional[BaseException] = None,
        realized_pnl_sol: Optional[float] = None,
    ) -> None:
        """Best-effort journal write; the risk ledger is the source of truth."""
        if not self.journal:
            return
        try:
            self.journal.record(
                intent,
                result=result,
                error=error,
                dry_run=self.dry_run,
                realized_pnl_sol=realized_pnl_sol,
            )
        except Exception as e:
            logger.error(f"Journal write failed for {intent.side} {intent.mint}: {e}")


def build_notifier(config: Config) -> NotifierManager:
    """Console plus whichever remote channels are configured."""
    notifiers: List[Notifier] = [ConsoleNotifier()]
    if config.telegram_bot_token and config.telegram_chat_id:
        notifiers.append(TelegramNotifier(config.telegram_bot_token, config.telegram_chat_id))
    if config.webhook_url:
        notifiers.append(WebhookNotifier(config.webhook_url))
    return NotifierManager(notifiers)


def build_agent(config: Config, journal: Optional[SwapJournal] = None) -> TradingAgent:
    """
    Wire a TradingAgent from configuration.

    Live execution needs DRY_RUN off and at least one wallet secret; the
    first wallet is used.
    """
    rpc_client = Client(config.rpc_url, timeout=RPC_TIMEOUT)
    jupiter = JupiterClient(config.jupiter_base_url)

    executor: SwapExecutor
    if config.is_live:
        wallet = keypair_from_secret(config.wallet_secrets[0])
        executor = JupiterSwapExecutor(
            rpc_client,
            wallet,
            jupiter=jupiter,
            slippage_bps=config.default_slippage_bps,
            priority_fee_lamports=config.priority_fee_lamports,
        )
        logger.info(f"Executor ready: live ({wallet.pubkey()})")
    else:
        executor = DryRunExecutor()
        logger.info("Executor ready: dry-run")

    executor = NotifyingExecutor(executor, build_notifier(config))

    risk = RiskEngine(RiskLimits(
        max_daily_loss_sol=config.max_daily_loss_sol,
        max_position_sol=config.max_position_sol,
    ))
    if journal:
        for trade in journal.recent_trades(include_dry_run=not config.is_live):
            risk.record_trade(trade)
        logger.info(f"Risk ledger restored: {risk.exposure_sol:.4f} SOL exposure")

    pricing = PricingService(
        rpc_client=rpc_client,
        jupiter=jupiter,
        price_ttl_seconds=config.price_ttl_seconds,
        price_negative_ttl_seconds=config.price_negative_ttl_seconds,
    )

    return TradingAgent(
        risk=risk,
        executor=executor,
        pricing=pricing,
        journal=journal,
        dry_run=not config.is_live,
    )
