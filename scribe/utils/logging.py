"""
Centralized logging for Scribe.

Every message goes to Python logging and to an in-memory ring buffer, so
the logs endpoint can show recent autosave failures and AI errors for a
manuscript without an external log aggregator.
"""

import logging
from collections import Counter, deque
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import Optional, List, Dict, Any


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def stdlib_level(self) -> int:
        return getattr(logging, self.name)


class LogEntry:
    """One buffered message, tagged with the manuscript it concerns (if any)."""

    def __init__(
        self,
        level: LogLevel,
        message: str,
        source: str = "system",
        metadata: Optional[Dict[str, Any]] = None
    ):
        self.timestamp = datetime.now(timezone.utc)
        self.level = level
        self.message = message
        self.source = source
        self.metadata = dict(metadata or {})
        manuscript_id = self.metadata.get("manuscript_id")
        self.manuscript_id = str(manuscript_id) if manuscript_id is not None else None

    def matches(
        self,
        level: Optional[LogLevel],
        source: Optional[str],
        manuscript_id: Optional[str],
    ) -> bool:
        return (
            (level is None or self.level == level)
            and (source is None or self.source == source)
            and (manuscript_id is None or self.manuscript_id == manuscript_id)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "source": self.source,
            "message": self.message,
            "manuscript_id": self.manuscript_id,
            "metadata": self.metadata,
        }


class LogBuffer:
    """
    Bounded, thread-safe store of the latest entries.

    Error totals survive eviction so the stats still show how many saves
    failed since startup.
    """

    def __init__(self, max_size: int = 500):
        self._entries: deque = deque(maxlen=max_size)
        self._lock = Lock()
        self._error_count = 0

    def add(self, entry: LogEntry):
        with self._lock:
            self._entries.append(entry)
            if entry.level is LogLevel.ERROR:
                self._error_count += 1

    def get_recent(
        self,
        limit: int = 100,
        level: Optional[LogLevel] = None,
        source: Optional[str] = None,
        manuscript_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Newest entries first, optionally filtered."""
        with self._lock:
            snapshot = list(self._entries)

        found: List[Dict[str, Any]] = []
        for entry in reversed(snapshot):
            if len(found) >= limit:
                break
            if entry.matches(level, source, manuscript_id):
                found.append(entry.to_dict())
        return found

    def get_errors(self, limit: int = 50) -> List[Dict[str, Any]]:
        return self.get_recent(limit=limit, level=LogLevel.ERROR)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            levels = Counter(entry.level.value for entry in self._entries)
            sources = Counter(entry.source for entry in self._entries)
            return {
                "total": len(self._entries),
                "by_level": dict(levels),
                "by_source": dict(sources),
                "error_count": self._error_count,
            }

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._error_count = 0


_log_buffer = LogBuffer()


def get_log_buffer() -> LogBuffer:
    """The process-wide log buffer."""
    return _log_buffer


def _format_metadata(metadata: Dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in metadata.items())


class AppLogger:
    """
    Per-source logger writing to stdlib logging and the shared buffer.

    Keyword arguments become structured metadata:
        autosave_logger.error("Autosave failed", manuscript_id=mid, error=str(e))
    """

    def __init__(self, source: str):
        self.source = source
        self._logger = logging.getLogger(f"scribe.{source}")

    def _log(self, level: LogLevel, message: str, metadata: Dict[str, Any]):
        _log_buffer.add(LogEntry(level, message, self.source, metadata))
        if metadata:
            self._logger.log(level.stdlib_level, "%s | %s", message, _format_metadata(metadata))
        else:
            self._logger.log(level.stdlib_level, message)

    def debug(self, message: str, **metadata):
        self._log(LogLevel.DEBUG, message, metadata)

    def info(self, message: str, **metadata):
        self._log(LogLevel.INFO, message, metadata)

    def warning(self, message: str, **metadata):
        self._log(LogLevel.WARNING, message, metadata)

    def error(self, message: str, **metadata):
        self._log(LogLevel.ERROR, message, metadata)


def get_logger(source: str) -> AppLogger:
    return AppLogger(source)


def configure_logging(level: str = "INFO") -> None:
    """Set up the root handler once at process start."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


autosave_logger = AppLogger("autosave")
versions_logger = AppLogger("versions")
writer_logger = AppLogger("writer")
api_logger = AppLogger("api")
