"""Recent pipeline log lines, kept in memory for the dashboard's /api/logs feed."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone

# Every module logs under "app.*", so one handler on the package logger sees them all.
APP_LOGGER = "app"
BUFFER_SIZE = 200


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    levelno: int
    logger: str
    message: str

    @classmethod
    def from_record(cls, record: logging.LogRecord, message: str) -> LogEntry:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return cls(
            timestamp=created.strftime("%Y-%m-%d %H:%M:%S UTC"),
            level=record.levelname,
            levelno=record.levelno,
            logger=record.name,
            message=message,
        )

    def as_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "logger": self.logger,
            "message": self.message,
        }


class BufferHandler(logging.Handler):
    """Ring buffer of the last *maxlen* records; older ones fall off the front."""

    def __init__(self, maxlen: int = BUFFER_SIZE) -> None:
        super().__init__(level=logging.INFO)
        self.setFormatter(logging.Formatter("%(message)s"))
        self._records: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._records.append(LogEntry.from_record(record, self.format(record)))
        except Exception:
            self.handleError(record)

    def entries(self, limit: int = 100, level: str | None = None) -> list[dict]:
        """Newest first; *level* keeps only records at or above that severity."""
        threshold = logging.getLevelName(level.upper()) if level else logging.NOTSET
        if not isinstance(threshold, int):
            threshold = logging.NOTSET
        selected = [entry for entry in reversed(self._records) if entry.levelno >= threshold]
        return [entry.as_dict() for entry in selected[: max(limit, 0)]]

    def clear(self) -> None:
        self._records.clear()


_handler: BufferHandler | None = None


def get_buffer_handler() -> BufferHandler:
    global _handler
    if _handler is None:
        _handler = BufferHandler()
    return _handler


def install_buffer_handler() -> BufferHandler:
    """Hook the buffer onto the package logger; safe to call more than once."""
    handler = get_buffer_handler()
    app_logger = logging.getLogger(APP_LOGGER)
    if handler not in app_logger.handlers:
        app_logger.addHandler(handler)
    if app_logger.level == logging.NOTSET or app_logger.level > logging.INFO:
        app_logger.setLevel(logging.INFO)
    return handler
