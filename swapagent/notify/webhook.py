"""
Webhook notification channel.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from swapagent.notify.base import to_jsonable

logger = logging.getLogger(__name__)


class WebhookNotifier:
    """POSTs {message, meta, timestamp} as JSON to a URL."""

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def notify(self, message: str, meta: Optional[Dict[str, Any]] = None) -> bool:
        try:
            response = self.session.post(
                self.url,
                json={
                    "message": message,
                    "meta": to_jsonable(meta),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
                timeout=self.timeout,
            )
            response.raise_for_status()

            logger.debug("Webhook notification sent")
            return True

        except requests.RequestException as e:
            logger.error(f"Webhook notification failed: {e}")
            return False
