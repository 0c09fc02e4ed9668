"""
Transient user notifications.

The editor surfaces every outcome (saved, restored, failed) as a short-lived
notification rather than an exception. The feed keeps the most recent ones
for whoever renders them.
"""

from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from scribe.utils.logging import AppLogger, get_logger


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class Notification:
    """A single notification."""

    def __init__(self, level: NotificationLevel, message: str, description: Optional[str] = None):
        self.timestamp = datetime.now(timezone.utc)
        self.level = level
        self.message = message
        self.description = description

    def to_dict(self):
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "message": self.message,
            "description": self.description,
        }

    def __repr__(self):
        return f"Notification({self.level.value}, {self.message!r})"


class Notifier:
    """Bounded feed of notifications; errors are also logged."""

    def __init__(self, logger: Optional[AppLogger] = None, max_size: int = 50):
        self._feed: deque = deque(maxlen=max_size)
        self._logger = logger or get_logger("editor")

    def _push(self, level: NotificationLevel, message: str, description: Optional[str] = None) -> Notification:
        notification = Notification(level, message, description)
        self._feed.append(notification)
        if level == NotificationLevel.ERROR:
            self._logger.error(message, description=description)
        else:
            self._logger.debug(message)
        return notification

    def success(self, message: str, description: Optional[str] = None) -> Notification:
        return self._push(NotificationLevel.SUCCESS, message, description)

    def info(self, message: str, description: Optional[str] = None) -> Notification:
        return self._push(NotificationLevel.INFO, message, description)

    def error(self, message: str, description: Optional[str] = None) -> Notification:
        return self._push(NotificationLevel.ERROR, message, description)

    @property
    def latest(self) -> Optional[Notification]:
        return self._feed[-1] if self._feed else None

    def recent(self, limit: int = 10) -> List[Notification]:
        return list(self._feed)[-limit:]

    def clear(self):
        self._feed.clear()

    def __len__(self):
        return len(self._feed)
