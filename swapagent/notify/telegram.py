"""
Telegram notification channel.

Sends plain trade notifications through the Bot API.
"""

import html
import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramNotifier:
    """Sends messages to one Telegram chat."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.session = session or requests.Session()
        self.timeout = timeout

    def notify(self, message: str, meta: Optional[Dict[str, Any]] = None) -> bool:
        """
        Send message to Telegram. Meta is not sent.

        Returns True if successful, False otherwise.
        """
        if not self.bot_token or not self.chat_id:
            logger.warning("Telegram not configured, skipping notification")
            return False

        url = f"{TELEGRAM_API_BASE}/bot{self.bot_token}/sendMessage"

        try:
            response = self.session.post(
                url,
                json={
                    "chat_id": self.chat_id,
                    "text": html.escape(message, quote=False),
                    "parse_mode": "HTML",
                    "disable_web_page_preview": True,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()

            logger.debug("Telegram message sent")
            return True

        except requests.RequestException as e:
            logger.error(f"Telegram message failed: {e}")
            return False
