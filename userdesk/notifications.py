"""
Transient notifications pushed by the user list controller.

Messages are fire-and-forget: pushing never blocks and needs no
acknowledgment. Each message is shown for a fixed duration.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from userdesk.utils.config import Config

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"


@dataclass
class Notification:
    message: str
    level: str = SUCCESS
    created_at: float = field(default_factory=time.monotonic)
    duration: float = 3.0

    def is_expired(self, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        return now - self.created_at >= self.duration


class NotificationCenter:
    """Collects notifications until the view drains them."""

    def __init__(self, duration: Optional[float] = None):
        self.duration = Config.NOTIFICATION_SECONDS if duration is None else duration
        self._pending: List[Notification] = []
        self._shown: List[Notification] = []

    def push(self, message: str, level: str = SUCCESS) -> Notification:
        notification = Notification(message=message, level=level, duration=self.duration)
        self._pending.append(notification)
        logger.debug(f"Queued {level} notification: {message}")
        return notification

    def success(self, message: str) -> Notification:
        return self.push(message, SUCCESS)

    def error(self, message: str) -> Notification:
        return self.push(message, ERROR)

    def drain(self, now: Optional[float] = None) -> List[Notification]:
        """Hand every pending notification to the caller exactly once."""
        now = time.monotonic() if now is None else now
        drained, self._pending = self._pending, []
        self._shown = [n for n in self._shown + drained if not n.is_expired(now)]
        return drained

    def active(self, now: Optional[float] = None, since: Optional[float] = None) -> List[Notification]:
        """
        Notifications still inside their display window, pending or already shown.

        With ``since``, only those pushed at or after that monotonic time.
        """
        now = time.monotonic() if now is None else now
        self._shown = [n for n in self._shown if not n.is_expired(now)]
        return [
            n for n in self._shown + self._pending
            if not n.is_expired(now) and (since is None or n.created_at >= since)
        ]
