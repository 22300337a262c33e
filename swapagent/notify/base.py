"""
Notification channels and fan-out.

Notification is best-effort: channels log their own failures and
return False rather than raising.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str, meta: Optional[Dict[str, Any]] = None) -> bool:
        ...


def to_jsonable(meta: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Round-trip meta through JSON, stringifying anything exotic."""
    if meta is None:
        return None
    return json.loads(json.dumps(meta, default=str))


class ConsoleNotifier:
    """Writes notifications to the log."""

    def notify(self, message: str, meta: Optional[Dict[str, Any]] = None) -> bool:
        logger.info(f"Notify: {message}")
        if meta:
            logger.debug(f"Notify meta: {to_jsonable(meta)}")
        return True


class NotifierManager:
    """
    Sends each notification to every channel concurrently.

    One channel failing does not stop the others.
    """

    def __init__(self, notifiers: Optional[List[Notifier]] = None):
        self.notifiers = list(notifiers or [])

    def _notify_one(self, notifier: Notifier, message: str, meta: Optional[Dict[str, Any]]) -> bool:
        try:
            return bool(notifier.notify(message, meta))
        except Exception as e:
            logger.error(f"Notifier {type(notifier).__name__} failed: {e}")
            return False

    def notify(self, message: str, meta: Optional[Dict[str, Any]] = None) -> bool:
        """
        Notify all channels and wait for them.

        Returns:
            True if every channel succeeded
        """
        if not self.notifiers:
            return True

        with ThreadPoolExecutor(max_workers=len(self.notifiers)) as pool:
            futures = [
                pool.submit(self._notify_one, notifier, message, meta)
                for notifier in self.notifiers
            ]
            outcomes = [future.result() for future in futures]

        return all(outcomes)
