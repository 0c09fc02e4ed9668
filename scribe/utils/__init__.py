"""Utility modules for Scribe."""

from scribe.utils.logging import (
    get_logger,
    get_log_buffer,
    configure_logging,
    LogLevel,
    LogEntry,
    AppLogger,
    autosave_logger,
    versions_logger,
    writer_logger,
    api_logger,
)
from scribe.utils.notifications import Notifier, Notification, NotificationLevel

__all__ = [
    "get_logger",
    "get_log_buffer",
    "configure_logging",
    "LogLevel",
    "LogEntry",
    "AppLogger",
    "autosave_logger",
    "versions_logger",
    "writer_logger",
    "api_logger",
    "Notifier",
    "Notification",
    "NotificationLevel",
]
