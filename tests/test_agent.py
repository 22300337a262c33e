"""
Integration tests for the trading agent.

Runs dry-run trades through the risk gate, notifications and a real
SQLite journal.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from swapagent.agent import TradingAgent, build_agent, build_notifier
from swapagent.core.config import Config
from swapagent.core.db import session_scope
from swapagent.core.errors import NoRouteError
from swapagent.core.models import SwapRecord, SwapSide, SwapStatus
from swapagent.notify.telegram import TelegramNotifier
from swapagent.notify.webhook import WebhookNotifier
from swapagent.risk.engine import RiskEngine, RiskLimits
from swapagent.trading.executor import DRY_RUN_SIGNATURE, DryRunExecutor, JupiterSwapExecutor
from swapagent.trading.intents import ExecutionResult
from swapagent.trading.journal import SwapJournal
from swapagent.trading.notifying import NotifyingExecutor

MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"


@pytest.fixture
def journal(tmp_path):
    return SwapJournal(str(tmp_path / "swaps.db"))


@pytest.fixture
def risk():
    return RiskEngine(RiskLimits(max_daily_loss_sol=5, max_position_sol=0.5))


@pytest.fixture
def agent(risk, journal):
    return TradingAgent(risk=risk, executor=DryRunExecutor(), journal=journal, dry_run=True)


class TestBuy:
    """Buys pass the gate before execution."""

    def test_allowed_buy_executes_and_records(self, agent, risk, journal):
        result = agent.buy(MINT, 0.3)

        assert result.signature == DRY_RUN_SIGNATURE
        assert risk.exposure_sol == pytest.approx(0.3)

        records = journal.recent(include_dry_run=True)
        assert len(records) == 1
        assert records[0].side == SwapSide.BUY
        assert records[0].status == SwapStatus.DRY_RUN

    def test_blocked_buy_never_executes(self, risk, journal):
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(signature="sig")
        agent = TradingAgent(risk=risk, executor=executor, journal=journal, dry_run=True)

        agent.buy(MINT, 0.5)
        assert agent.buy(MINT, 0.01) is None

        assert executor.execute.call_count == 1
        assert risk.exposure_sol == pytest.approx(0.5)

    def test_failed_buy_not_recorded_as_exposure(self, risk, journal):
        executor = MagicMock()
        executor.execute.side_effect = NoRouteError("a", "b", 1)
        agent = TradingAgent(risk=risk, executor=executor, journal=journal)

        with pytest.raises(NoRouteError):
            agent.buy(MINT, 0.1)

        assert risk.exposure_sol == 0
        records = journal.recent()
        assert records[0].status == SwapStatus.FAILED
        assert "No route" in records[0].error_message


class TestSell:
    def test_sell_skips_gate(self, risk, journal):
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(signature="sig", final_amount=200_000_000)
        agent = TradingAgent(risk=risk, executor=executor, journal=journal)
        agent.buy(MINT, 0.5)

        agent.sell(MINT, percent=50, realized_pnl_sol=-0.1)

        assert risk.exposure_sol == pytest.approx(0.3)
        assert risk.compute_daily_loss() == pytest.approx(0.1)

    def test_dry_run_sell_does_not_reduce_exposure(self, agent, risk):
        agent.buy(MINT, 0.2)
        agent.sell(MINT, token_amount=10**12)
        assert risk.exposure_sol == pytest.approx(0.2)

    def test_exact_amount_journaled_as_text(self, agent, journal):
        agent.sell(MINT, token_amount=2**64 + 1)
        record = journal.recent(include_dry_run=True)[0]
        assert record.token_amount == str(2**64 + 1)
        assert record.final_amount == str(2**64 + 1)


class TestJournal:
    """Journal persistence and risk ledger rebuild."""

    def test_recent_trades_rebuild_exposure(self, journal):
        agent = TradingAgent(
            risk=RiskEngine(RiskLimits(5, 0.5)),
            executor=MagicMock(execute=MagicMock(return_value=ExecutionResult("sig", 100_000_000))),
            journal=journal,
        )
        agent.buy(MINT, 0.4)
        agent.sell(MINT, realized_pnl_sol=-1)

        rebuilt = RiskEngine(RiskLimits(5, 0.5))
        for trade in journal.recent_trades():
            rebuilt.record_trade(trade)

        assert rebuilt.exposure_sol == pytest.approx(0.3)
        assert rebuilt.compute_daily_loss() == pytest.approx(1)

    def test_old_records_ignored(self, journal):
        with session_scope(journal.database_path) as session:
            session.add(SwapRecord(
                timestamp=datetime.now(timezone.utc) - timedelta(hours=30),
                mint=MINT,
                side=SwapSide.BUY,
                sol_amount=0.4,
                status=SwapStatus.CONFIRMED,
            ))

        assert journal.recent_trades() == []

    def test_session_scope_rolls_back_on_error(self, journal):
        with pytest.raises(RuntimeError):
            with session_scope(journal.database_path) as session:
                session.add(SwapRecord(mint=MINT, side=SwapSide.BUY, sol_amount=0.1, status=SwapStatus.CONFIRMED))
                session.flush()
                raise RuntimeError("abort")

        assert journal.recent() == []

    def test_dry_run_excluded_by_default(self, agent, journal):
        agent.buy(MINT, 0.1)
        assert journal.recent() == []
        assert len(journal.recent_trades(include_dry_run=True)) == 1

    def test_timestamps_are_utc(self, agent, journal):
        agent.buy(MINT, 0.1)
        trade = journal.recent_trades(include_dry_run=True)[0]
        assert trade.timestamp.tzinfo is not None


class TestWiring:
    """build_agent/build_notifier from Config."""

    def test_dry_run_without_wallet(self, tmp_path):
        config = Config(rpc_url="https://rpc.example", database_path=str(tmp_path / "a.db"))
        agent = build_agent(config, journal=SwapJournal(config.database_path))

        assert isinstance(agent.executor, NotifyingExecutor)
        assert isinstance(agent.executor.inner, DryRunExecutor)
        assert agent.dry_run is True
        assert agent.risk.limits.max_position_sol == 0.5

    def test_live_with_wallet(self):
        import base58
        from solders.keypair import Keypair

        secret = base58.b58encode(bytes(Keypair())).decode()
        config = Config(rpc_url="https://rpc.example", wallet_secrets=[secret])
        agent = build_agent(config)

        assert isinstance(agent.executor.inner, JupiterSwapExecutor)
        assert agent.dry_run is False

    def test_restores_ledger_from_journal(self, tmp_path):
        path = str(tmp_path / "b.db")
        journal = SwapJournal(path)
        TradingAgent(RiskEngine(RiskLimits(5, 0.5)), DryRunExecutor(), journal=journal, dry_run=True).buy(MINT, 0.25)

        agent = build_agent(Config(rpc_url="https://rpc.example", database_path=path), journal=journal)
        assert agent.risk.exposure_sol == pytest.approx(0.25)

    def test_notifier_channels(self):
        config = Config(
            rpc_url="https://rpc.example",
            telegram_bot_token="tok",
            telegram_chat_id="42",
            webhook_url="https://hooks.example/x",
        )
        kinds = [type(n) for n in build_notifier(config).notifiers]
        assert TelegramNotifier in kinds
        assert WebhookNotifier in kinds


class TestJournalFailure:
    """A broken journal never hides a trade from the risk ledger."""

    def broken_journal(self):
        journal = MagicMock()
        journal.record.side_effect = RuntimeError("database is locked")
        return journal

    def test_executed_buy_still_counts_as_exposure(self, risk):
        agent = TradingAgent(risk=risk, executor=DryRunExecutor(), journal=self.broken_journal(), dry_run=True)

        assert agent.buy(MINT, 0.5).signature == DRY_RUN_SIGNATURE
        assert risk.exposure_sol == pytest.approx(0.5)
        assert risk.can_enter_position(0.5) is False

    def test_executed_sell_still_recorded(self, risk):
        executor = MagicMock()
        executor.execute.return_value = ExecutionResult(signature="sig", final_amount=100_000_000)
        agent = TradingAgent(risk=risk, executor=executor, journal=self.broken_journal())

        agent.buy(MINT, 0.3)
        agent.sell(MINT, realized_pnl_sol=-2)

        assert risk.exposure_sol == pytest.approx(0.2)
        assert risk.compute_daily_loss() == pytest.approx(2)

    def test_trade_error_not_replaced_by_journal_error(self, risk):
        executor = MagicMock()
        executor.execute.side_effect = NoRouteError("a", "b", 1)
        agent = TradingAgent(risk=risk, executor=executor, journal=self.broken_journal())

        with pytest.raises(NoRouteError):
            agent.buy(MINT, 0.1)
        assert risk.exposure_sol == 0
