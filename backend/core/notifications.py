"""
User-visible notifications raised by the editor and generation services.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, List, Optional

from core.config import NOTIFICATION_HISTORY_LIMIT

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A message surfaced to the educator"""
    level: str  # 'success' | 'info' | 'error'
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Collects recent notifications in order and mirrors them to the log."""

    def __init__(self, limit: int = NOTIFICATION_HISTORY_LIMIT):
        # oldest entries fall off once the limit is reached
        self.history: Deque[Notification] = deque(maxlen=limit)

    def success(self, message: str) -> Notification:
        return self._push("success", message, logging.INFO)

    def info(self, message: str) -> Notification:
        return self._push("info", message, logging.INFO)

    def error(self, message: str) -> Notification:
        return self._push("error", message, logging.ERROR)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def errors(self) -> List[Notification]:
        return [n for n in self.history if n.level == "error"]

    def clear(self) -> None:
        self.history.clear()

    def _push(self, level: str, message: str, log_level: int) -> Notification:
        notification = Notification(level=level, message=message)
        self.history.append(notification)
        logger.log(log_level, "[%s] %s", level, message)
        return notification
