"""Runtime log for Coursekit.

Records runtime activity in a bounded ring buffer that the host can inspect
or export. Oldest entries are dropped once ``max_logs`` is reached.

Entries are mirrored to the ``coursekit.engine.runtime`` stdlib logger: all
of them in debug mode, warnings and errors always.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from coursekit_core.events import now_ms
from coursekit_core.utils.logging import get_logger

_stdlib_logger = get_logger("engine.runtime")


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class LogCategory(str, Enum):
    EVENT = "event"
    CONDITION = "condition"
    ACTION = "action"
    STATE = "state"
    SCENE = "scene"


_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class LogEntry(BaseModel):
    """One immutable runtime log record."""

    level: LogLevel
    category: LogCategory
    message: str
    data: Any = None
    timestamp: int = Field(default_factory=now_ms)

    model_config = ConfigDict(frozen=True)


_entries_adapter = TypeAdapter(list[LogEntry])


class RuntimeLogger:
    """Bounded, append-only runtime log.

    Usage:
        log = RuntimeLogger(max_logs=500)
        log.info(LogCategory.SCENE, "Entering scene: intro")
        log.get_logs_by_category(LogCategory.SCENE)
    """

    def __init__(self, max_logs: int = 1000, debug: bool = False):
        """Initialize the logger.

        Args:
            max_logs: Ring buffer capacity
            debug: Mirror every entry (not only warnings/errors) to stdlib logging
        """
        self.max_logs = max_logs
        self.debug_mode = debug
        self._entries: deque[LogEntry] = deque(maxlen=max_logs)

    def __len__(self) -> int:
        return len(self._entries)

    def log(
        self,
        level: LogLevel | str,
        category: LogCategory | str,
        message: str,
        data: Any = None,
    ) -> LogEntry:
        entry = LogEntry(
            level=LogLevel(level),
            category=LogCategory(category),
            message=message,
            data=data,
        )
        self._entries.append(entry)

        if self.debug_mode or entry.level in (LogLevel.WARN, LogLevel.ERROR):
            self._mirror(entry)
        return entry

    def debug(self, category: LogCategory | str, message: str, data: Any = None) -> LogEntry:
        return self.log(LogLevel.DEBUG, category, message, data)

    def info(self, category: LogCategory | str, message: str, data: Any = None) -> LogEntry:
        return self.log(LogLevel.INFO, category, message, data)

    def warn(self, category: LogCategory | str, message: str, data: Any = None) -> LogEntry:
        return self.log(LogLevel.WARN, category, message, data)

    def error(self, category: LogCategory | str, message: str, data: Any = None) -> LogEntry:
        return self.log(LogLevel.ERROR, category, message, data)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_logs(self) -> list[LogEntry]:
        """All buffered entries, oldest first (a copy)."""
        return list(self._entries)

    def get_recent_logs(self, count: int) -> list[LogEntry]:
        if count <= 0:
            return []
        return list(self._entries)[-count:]

    def get_logs_by_category(self, category: LogCategory | str) -> list[LogEntry]:
        category = LogCategory(category)
        return [entry for entry in self._entries if entry.category == category]

    def get_logs_by_level(self, level: LogLevel | str) -> list[LogEntry]:
        level = LogLevel(level)
        return [entry for entry in self._entries if entry.level == level]

    def clear(self) -> None:
        self._entries.clear()

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export(self, indent: Optional[int] = 2) -> str:
        """Serialize the buffer as a JSON array of entries, oldest first."""
        payload = [entry.model_dump(mode="json") for entry in self._entries]
        return json.dumps(payload, indent=indent, default=str)

    def import_logs(self, logs_json: str) -> bool:
        """Replace the buffer with entries exported by ``export``.

        Returns:
            False (buffer untouched) when the text is not a valid export
        """
        try:
            entries = _entries_adapter.validate_json(logs_json)
        except ValidationError as exc:
            _stdlib_logger.error(f"Failed to import logs: {exc.error_count()} invalid field(s)")
            return False

        self._entries = deque(entries, maxlen=self.max_logs)
        return True

    def _mirror(self, entry: LogEntry) -> None:
        message = f"[{entry.category.value}] {entry.message}"
        if entry.data is not None:
            message = f"{message} | {entry.data}"
        _stdlib_logger.log(_STDLIB_LEVELS[entry.level], message)
