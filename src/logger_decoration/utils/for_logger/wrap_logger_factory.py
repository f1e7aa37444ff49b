#!/usr/bin/env python3
"""Factory handing out one ``WrapLogger`` per category name."""

import inspect
import logging
import threading
from collections.abc import Callable

from logger_decoration.core.stack_resolver import StackResolver
from logger_decoration.utils.config import DecorationConfig
from logger_decoration.utils.for_logger.wrap_logger import WrapLogger
from logger_decoration.utils.loguru_setup import logger


class WrapLoggerFactory:
    """Creates and caches decorated loggers on top of an origin logger factory.

    Args:
        origin_factory: Callable returning the stdlib logger for a category name
        resolver: Resolver shared by every logger of this factory
        config: Rendering options shared by every logger of this factory
    """

    def __init__(
        self,
        origin_factory: Callable[[str], logging.Logger] = logging.getLogger,
        resolver: StackResolver | None = None,
        config: DecorationConfig | None = None,
    ) -> None:
        self._origin_factory = origin_factory
        self.resolver = resolver if resolver is not None else StackResolver()
        self.config = config if config is not None else DecorationConfig()
        self._loggers: dict[str, WrapLogger] = {}
        self._lock = threading.Lock()

    def create_logger(self, category_name: str) -> WrapLogger:
        """Get the decorated logger of ``category_name``, creating it once."""
        wrapper = self._loggers.get(category_name)
        if wrapper is not None:
            return wrapper

        with self._lock:
            wrapper = self._loggers.get(category_name)
            if wrapper is None:
                wrapper = WrapLogger(self._origin_factory(category_name), self.resolver, self.config)
                self._loggers[category_name] = wrapper
                logger.debug(f"Created decorated logger for category '{category_name}'")
        return wrapper

    def get_logger(self, name: str | None = None) -> WrapLogger:
        """Get a decorated logger, named after the caller's module when ``name`` is None."""
        if name is None:
            frame = inspect.currentframe()
            caller = frame.f_back if frame is not None else None
            try:
                name = caller.f_globals.get("__name__", "__main__") if caller is not None else "__main__"
            finally:
                del frame, caller
        return self.create_logger(name)

    def add_handler(self, handler: logging.Handler, category_name: str = "") -> "WrapLoggerFactory":
        """Attach ``handler`` to the origin logger of ``category_name`` (root by default)."""
        self._origin_factory(category_name).addHandler(handler)
        return self

    def close(self) -> None:
        """Forget every cached logger; origin loggers are left untouched."""
        with self._lock:
            self._loggers = {}

    def __enter__(self) -> "WrapLoggerFactory":
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb) -> None:
        self.close()
