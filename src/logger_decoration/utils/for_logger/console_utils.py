#!/usr/bin/env python3
"""Rich console shared by the console handlers."""

import logging

from rich.console import Console


class ConsoleState:
    """Singleton holding the shared console, avoiding a module-level global."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._console = None
        return cls._instance

    @property
    def console(self) -> Console:
        # Lazy initialize console
        if self._console is None:
            self._console = get_console(highlight=False)
        return self._console

    @console.setter
    def console(self, value: Console | None) -> None:
        self._console = value


def get_console(highlight: bool = False, stderr: bool = True) -> Console:
    """Create a console; syntax highlighting is off so message markup stays intact."""
    return Console(highlight=highlight, stderr=stderr)


def should_show_rich_output() -> bool:
    """True when the root level still lets DEBUG, INFO or WARNING through."""
    return logging.getLogger().level < logging.ERROR
