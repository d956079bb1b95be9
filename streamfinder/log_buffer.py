"""Keeps recent optimizer and sync log lines in memory for /api/logs."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

PACKAGE_LOGGER = "streamfinder"


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    levelno: int
    logger: str
    message: str


class BufferHandler(logging.Handler):
    def __init__(self, maxlen: int = 200) -> None:
        super().__init__()
        self._records: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            self._records.append(
                LogEntry(
                    timestamp=created.isoformat(timespec="seconds"),
                    level=record.levelname,
                    levelno=record.levelno,
                    logger=record.name,
                    message=self.format(record),
                )
            )
        except Exception:
            self.handleError(record)

    def entries(self, limit: int = 100, min_level: str | None = None) -> list[dict]:
        """Newest first, optionally only records at or above *min_level*."""

        threshold = logging.NOTSET
        if min_level:
            threshold = logging.getLevelName(min_level.strip().upper())
            if not isinstance(threshold, int):
                raise ValueError(f"Unknown log level: {min_level}")
        selected = [e for e in reversed(self._records) if e.levelno >= threshold]
        return [asdict(e) for e in selected[: max(limit, 0)]]


_handler: BufferHandler | None = None


def get_buffer_handler() -> BufferHandler:
    global _handler
    if _handler is None:
        _handler = BufferHandler(maxlen=200)
        _handler.setFormatter(logging.Formatter("%(message)s"))
        _handler.setLevel(logging.INFO)
    return _handler


def install_buffer_handler() -> BufferHandler:
    """Attach the buffer to the package logger so every module feeds it."""

    handler = get_buffer_handler()
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if handler not in package_logger.handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.INFO)
    return handler
