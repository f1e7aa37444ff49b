#!/usr/bin/env python3
"""Loguru-based diagnostics for logger_decoration itself.

The package decorates the application's stdlib loggers; its own internal
messages (registrations, factory activity, configuration) go through loguru so
they never re-enter the decorated logging pipeline.

Basic Usage Examples:
    from logger_decoration.utils.loguru_setup import logger

    logger.configure_level("DEBUG")
    logger.debug("Hidden assembly registered")

Environment Variables:
    LOGGER_DECORATION_LOG_LEVEL: Global level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    LOGGER_DECORATION_LOG_FILE: Optional log file path for file output
    LOGGER_DECORATION_DISABLE_COLORS: Set to "true" to disable colored output
"""

import os
import sys
from contextlib import suppress
from pathlib import Path

from loguru import logger as _loguru_logger

# Drop loguru's pristine default sink so diagnostics only reach our own sinks
with suppress(ValueError):
    _loguru_logger.remove(0)

# Configuration from environment
DEFAULT_LOG_LEVEL = os.getenv("LOGGER_DECORATION_LOG_LEVEL", "ERROR").upper()
LOG_FILE = os.getenv("LOGGER_DECORATION_LOG_FILE")
DISABLE_COLORS = os.getenv("LOGGER_DECORATION_DISABLE_COLORS", "false").lower() == "true"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

SIMPLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

_LEVEL_NAMES = {10: "DEBUG", 20: "INFO", 30: "WARNING", 40: "ERROR", 50: "CRITICAL"}


class DecorationLogger:
    """Wrapper around loguru owning the sinks of the package's diagnostics."""

    def __init__(self) -> None:
        self._current_level = DEFAULT_LOG_LEVEL
        self._log_file = LOG_FILE
        self._disable_colors = DISABLE_COLORS
        self._sink_ids: list[int] = []
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Replace this wrapper's sinks according to the current configuration."""
        for sink_id in self._sink_ids:
            _loguru_logger.remove(sink_id)
        self._sink_ids.clear()

        format_template = SIMPLE_FORMAT if self._disable_colors else LOG_FORMAT
        only_ours = lambda record: record["name"].startswith("logger_decoration")  # noqa: E731

        self._sink_ids.append(
            _loguru_logger.add(
                sys.stderr,
                level=self._current_level,
                format=format_template,
                colorize=not self._disable_colors,
                filter=only_ours,
                backtrace=True,
                diagnose=False,
            )
        )

        if self._log_file:
            log_path = Path(self._log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            self._sink_ids.append(
                _loguru_logger.add(
                    str(log_path),
                    level=self._current_level,
                    format=SIMPLE_FORMAT,
                    filter=only_ours,
                    rotation="10 MB",
                    retention="1 week",
                    backtrace=True,
                    diagnose=False,
                )
            )

    def configure_level(self, level: str | int) -> "DecorationLogger":
        """Configure the log level.

        Args:
            level: Log level name or number

        Returns:
            Self for method chaining
        """
        if isinstance(level, int):
            level = _LEVEL_NAMES.get(level, "INFO")
        self._current_level = level.upper()
        self._setup_logger()
        return self

    def configure_file(self, log_file: str | Path | None) -> "DecorationLogger":
        """Configure file output, or disable it with ``None``."""
        self._log_file = str(log_file) if log_file else None
        self._setup_logger()
        return self

    def disable_colors(self, disable: bool = True) -> "DecorationLogger":
        self._disable_colors = disable
        self._setup_logger()
        return self

    def getEffectiveLevel(self) -> str:
        return self._current_level

    def debug(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).debug(message, *args, **kwargs)
        return self

    def info(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).info(message, *args, **kwargs)
        return self

    def warning(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).warning(message, *args, **kwargs)
        return self

    def error(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).error(message, *args, **kwargs)
        return self

    def exception(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).exception(message, *args, **kwargs)
        return self


logger = DecorationLogger()


def configure_level(level: str | int) -> None:
    """Configure the level of the package diagnostics."""
    logger.configure_level(level)
