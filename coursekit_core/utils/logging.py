"""
Logging setup for Coursekit.

Everything logs under the ``coursekit`` logger hierarchy. Hosts embedding the
runtime usually leave it alone; the CLI calls ``configure_from_config`` so
``RuntimeConfig.debug`` and ``RuntimeConfig.log_level`` decide verbosity.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from coursekit_core.config import RuntimeConfig

ROOT_LOGGER = "coursekit"

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CoursekitFormatter(logging.Formatter):
    """``LEVEL [engine.runtime] message``, colored by level on a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = False, include_timestamp: bool = False):
        fmt = "%(levelname)-7s [%(short_name)s] %(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        super().__init__(fmt, datefmt="%H:%M:%S")
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        record.short_name = record.name.removeprefix(f"{ROOT_LOGGER}.")
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{line}{self.RESET}" if color else line


def setup_logging(
    level: str = "WARNING",
    stream: Optional[IO[str]] = None,
    use_colors: Optional[bool] = None,
    include_timestamp: bool = False,
) -> logging.Logger:
    """Route the ``coursekit`` hierarchy to a single stream handler.

    Calling it again replaces the previous handler.

    Args:
        level: One of DEBUG, INFO, WARNING, ERROR
        stream: Defaults to ``sys.stderr`` at call time
        use_colors: Defaults to whether ``stream`` is a terminal
        include_timestamp: Prefix lines with ``HH:MM:SS``
    """
    level = level.upper()
    if level not in LEVELS:
        raise ValueError(f"Unknown log level '{level}' (expected one of {', '.join(LEVELS)})")

    stream = stream if stream is not None else sys.stderr
    if use_colors is None:
        use_colors = hasattr(stream, "isatty") and stream.isatty()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(CoursekitFormatter(use_colors=use_colors, include_timestamp=include_timestamp))

    root = logging.getLogger(ROOT_LOGGER)
    root.handlers = [handler]
    root.setLevel(level)
    root.propagate = False
    return root


def configure_from_config(config: "RuntimeConfig", verbose: bool = False) -> logging.Logger:
    """``setup_logging`` driven by a ``RuntimeConfig``; debug mode wins over ``log_level``."""
    level = "DEBUG" if verbose or config.debug else config.log_level
    return setup_logging(level=level, include_timestamp=level == "DEBUG")


def get_logger(name: str) -> logging.Logger:
    """Logger below ``coursekit``, e.g. ``get_logger("engine.runtime")``."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, operation: str, details: Optional[dict] = None) -> None:
    if details:
        logger.info("%s: %s", operation, ", ".join(f"{k}={v}" for k, v in details.items()))
    else:
        logger.info(operation)


def log_error(
    logger: logging.Logger,
    operation: str,
    error: BaseException,
    context: Optional[dict] = None,
) -> None:
    """Log a failed operation with its traceback and optional context."""
    suffix = f" ({', '.join(f'{k}={v}' for k, v in context.items())})" if context else ""
    logger.error("%s failed: %s: %s%s", operation, type(error).__name__, error, suffix, exc_info=error)


# Warnings and errors reach stderr until a host configures something else
setup_logging()
