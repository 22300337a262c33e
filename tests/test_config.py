"""
Unit tests for environment configuration.
"""

import pytest
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from swapagent.core.config import Config

ENV_VARS = [
    "RPC_URL", "WEBSOCKET_URL", "JUPITER_BASE_URL", "SLIPPAGE_BPS",
    "PRIORITY_FEE_LAMPORTS", "SOLANA_WALLETS", "SOL_PRIVATE_KEY",
    "WALLET_PRIVATE_KEY", "DRY_RUN", "MAX_DAILY_LOSS_SOL", "MAX_POSITION_SOL",
    "PRICE_TTL_SECONDS", "PRICE_NEGATIVE_TTL_SECONDS", "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID", "WEBHOOK_NOTIFY_URL", "SWAPAGENT_DB_PATH",
    "SWAPAGENT_LOG_FILE", "LOG_LEVEL",
]


@pytest.fixture
def env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RPC_URL", "https://rpc.example")
    return monkeypatch


class TestFromEnv:
    def test_rpc_required(self, env):
        env.delenv("RPC_URL")
        with pytest.raises(ValueError, match="RPC_URL"):
            Config.from_env()

    def test_defaults(self, env):
        config = Config.from_env()
        assert config.default_slippage_bps == 1500
        assert config.priority_fee_lamports == "auto"
        assert config.max_daily_loss_sol == 5.0
        assert config.max_position_sol == 0.5
        assert config.price_ttl_seconds == 15.0
        assert config.price_negative_ttl_seconds == 60.0
        assert config.wallet_secrets == []
        assert config.is_live is False

    def test_wallet_list(self, env):
        env.setenv("SOLANA_WALLETS", " aaa , ,bbb ")
        assert Config.from_env().wallet_secrets == ["aaa", "bbb"]

    def test_single_wallet_fallback(self, env):
        env.setenv("SOL_PRIVATE_KEY", "ccc")
        config = Config.from_env()
        assert config.wallet_secrets == ["ccc"]
        assert config.is_live is True

    def test_dry_run_overrides_wallet(self, env):
        env.setenv("SOL_PRIVATE_KEY", "ccc")
        env.setenv("DRY_RUN", "true")
        assert Config.from_env().is_live is False

    def test_invalid_numbers_fall_back(self, env):
        env.setenv("MAX_POSITION_SOL", "-1")
        env.setenv("MAX_DAILY_LOSS_SOL", "lots")
        env.setenv("SLIPPAGE_BPS", "0")
        config = Config.from_env()
        assert config.max_position_sol == 0.5
        assert config.max_daily_loss_sol == 5.0
        assert config.default_slippage_bps == 1500

    def test_numeric_priority_fee(self, env):
        env.setenv("PRIORITY_FEE_LAMPORTS", "10000")
        assert Config.from_env().priority_fee_lamports == 10000

    def test_telegram_needs_token_and_chat(self, env):
        env.setenv("TELEGRAM_BOT_TOKEN", "tok")
        config = Config.from_env()
        assert config.telegram_bot_token is None

        env.setenv("TELEGRAM_CHAT_ID", "42")
        config = Config.from_env()
        assert config.telegram_bot_token == "tok"
        assert config.telegram_chat_id == "42"

    def test_summary_masks_rpc(self, env):
        env.setenv("RPC_URL", "https://rpc.example/?api-key=supersecretkey")
        summary = Config.from_env().get_summary()
        assert "supersecretkey" not in summary
        assert "DRY RUN" in summary
