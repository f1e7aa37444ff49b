#!/usr/bin/env python3
"""Registry of modules and classes that never count as a call site.

Both sets are append-only. Writers take a lock and publish a fresh frozenset;
readers never lock and always see a complete snapshot.
"""

import threading
from collections.abc import Hashable
from types import ModuleType

from logger_decoration.utils.loguru_setup import logger


class HiddenSetRegistry:
    """Owned, thread-safe sets of hidden modules ("assemblies") and types."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hidden_assemblies: frozenset[str] = frozenset()
        self._hidden_types: frozenset[Hashable] = frozenset()

    @property
    def hidden_assemblies(self) -> frozenset[str]:
        return self._hidden_assemblies

    @property
    def hidden_types(self) -> frozenset[Hashable]:
        return self._hidden_types

    def register_hidden_assembly(self, assembly: ModuleType | str | None) -> None:
        """Hide a module, and every module below it when it is a package.

        Args:
            assembly: Module object or dotted module name. ``None`` is ignored.
        """
        if assembly is None:
            return
        name = assembly.__name__ if isinstance(assembly, ModuleType) else str(assembly)
        if name in self._hidden_assemblies:
            return

        with self._lock:
            if name in self._hidden_assemblies:
                return
            self._hidden_assemblies = self._hidden_assemblies | {name}
        logger.debug(f"Hidden assembly registered: {name}")

    def register_hidden_type(self, class_type: Hashable | None) -> None:
        """Hide a class, or a type full name for hand-built frame descriptors.

        Args:
            class_type: Class object or full type name. ``None`` is ignored.
        """
        if class_type is None or class_type in self._hidden_types:
            return

        with self._lock:
            if class_type in self._hidden_types:
                return
            self._hidden_types = self._hidden_types | {class_type}
        logger.debug(f"Hidden type registered: {class_type!r}")

    def is_hidden_assembly(self, name: str) -> bool:
        hidden = self._hidden_assemblies
        return bool(hidden) and name in hidden

    def is_hidden_type(self, class_type: Hashable) -> bool:
        hidden = self._hidden_types
        return bool(hidden) and class_type in hidden
