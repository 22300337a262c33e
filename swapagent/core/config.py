"""
Configuration management for SwapAgent.

Loads settings from environment variables. Scripts call load_dotenv()
before Config.from_env() so a local .env file is honoured.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Union

from swapagent.core.utils import mask_secret, parse_bool, parse_positive_float

DEFAULT_JUPITER_BASE_URL = "https://quote-api.jup.ag"
DEFAULT_SLIPPAGE_BPS = 1500


def _normalize_wallet_secrets(values: List[str]) -> List[str]:
    return [value.strip() for value in values if value and value.strip()]


def _parse_priority_fee(value: Optional[str]) -> Union[int, str]:
    """Priority fee is either a lamport amount or 'auto'."""
    raw = (value or "").strip().lower()
    if not raw or raw == "auto":
        return "auto"
    try:
        lamports = float(raw)
    except ValueError:
        return "auto"
    if lamports >= 0 and lamports != float("inf"):
        return int(lamports)
    return "auto"


def _parse_slippage(value: Optional[str]) -> int:
    slippage = parse_positive_float(value, DEFAULT_SLIPPAGE_BPS)
    return int(slippage)


@dataclass
class Config:
    """Application configuration."""

    # Network
    rpc_url: str = ""
    websocket_url: Optional[str] = None
    jupiter_base_url: str = DEFAULT_JUPITER_BASE_URL

    # Execution
    default_slippage_bps: int = DEFAULT_SLIPPAGE_BPS
    priority_fee_lamports: Union[int, str] = "auto"
    wallet_secrets: List[str] = field(default_factory=list)
    dry_run: bool = False

    # Risk limits
    max_daily_loss_sol: float = 5.0
    max_position_sol: float = 0.5

    # Pricing cache
    price_ttl_seconds: float = 15.0
    price_negative_ttl_seconds: float = 60.0

    # Notifications
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    webhook_url: Optional[str] = None

    # Storage and logs
    database_path: str = "data/swapagent.db"
    log_file: Optional[str] = "logs/agent.log"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        rpc_url = (os.getenv("RPC_URL") or "").strip()
        if not rpc_url:
            raise ValueError("RPC_URL is required")

        wallets = os.getenv("SOLANA_WALLETS")
        wallet_secrets = _normalize_wallet_secrets(wallets.split(",") if wallets else [])
        if not wallet_secrets:
            wallet_secrets = _normalize_wallet_secrets([
                os.getenv("SOL_PRIVATE_KEY", ""),
                os.getenv("WALLET_PRIVATE_KEY", ""),
            ])

        telegram_token = (os.getenv("TELEGRAM_BOT_TOKEN") or "").strip()
        telegram_chat = (os.getenv("TELEGRAM_CHAT_ID") or "").strip()
        webhook_url = (os.getenv("WEBHOOK_NOTIFY_URL") or "").strip()

        return cls(
            rpc_url=rpc_url,
            websocket_url=(os.getenv("WEBSOCKET_URL") or "").strip() or None,
            jupiter_base_url=(os.getenv("JUPITER_BASE_URL") or "").strip() or DEFAULT_JUPITER_BASE_URL,
            default_slippage_bps=_parse_slippage(os.getenv("SLIPPAGE_BPS")),
            priority_fee_lamports=_parse_priority_fee(os.getenv("PRIORITY_FEE_LAMPORTS")),
            wallet_secrets=wallet_secrets,
            dry_run=parse_bool(os.getenv("DRY_RUN")),
            max_daily_loss_sol=parse_positive_float(os.getenv("MAX_DAILY_LOSS_SOL"), 5.0),
            max_position_sol=parse_positive_float(os.getenv("MAX_POSITION_SOL"), 0.5),
            price_ttl_seconds=parse_positive_float(os.getenv("PRICE_TTL_SECONDS"), 15.0),
            price_negative_ttl_seconds=parse_positive_float(
                os.getenv("PRICE_NEGATIVE_TTL_SECONDS"), 60.0
            ),
            # Telegram needs both token and chat
            telegram_bot_token=telegram_token if telegram_token and telegram_chat else None,
            telegram_chat_id=telegram_chat if telegram_token and telegram_chat else None,
            webhook_url=webhook_url or None,
            database_path=os.getenv("SWAPAGENT_DB_PATH", "data/swapagent.db"),
            log_file=os.getenv("SWAPAGENT_LOG_FILE", "logs/agent.log") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def is_live(self) -> bool:
        """Live trading needs a wallet and DRY_RUN off."""
        return not self.dry_run and bool(self.wallet_secrets)

    def get_summary(self) -> str:
        """Get a summary of current settings with secrets masked."""
        mode = "LIVE" if self.is_live else "DRY RUN"
        fee = self.priority_fee_lamports
        fee_str = fee if isinstance(fee, str) else f"{fee:,} lamports"
        return f"""Mode: {mode}
RPC: {mask_secret(self.rpc_url)}
Jupiter: {self.jupiter_base_url}
Wallets Loaded: {len(self.wallet_secrets)}

Execution:
  Default Slippage: {self.default_slippage_bps} bps
  Priority Fee: {fee_str}

Risk Limits:
  Max Position: {self.max_position_sol} SOL
  Max Daily Loss: {self.max_daily_loss_sol} SOL

Pricing Cache:
  Price TTL: {self.price_ttl_seconds:.0f}s
  Negative TTL: {self.price_negative_ttl_seconds:.0f}s

Notifications:
  Telegram: {"enabled" if self.telegram_bot_token else "disabled"}
  Webhook: {mask_secret(self.webhook_url)}
"""
