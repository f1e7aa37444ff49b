#!/usr/bin/env python3
"""Classification of stack frames as hidden or as logger-wrapper frames."""

from typing import Final

from logger_decoration.core.frames import StackFrame
from logger_decoration.core.hidden_registry import HiddenSetRegistry

# The resolver's own package never hosts a call site
OWN_PACKAGE: Final = __name__.split(".", 1)[0]

# Modules treated as the runtime core: the logging library and interpreter plumbing
CORE_RUNTIME_MODULES: Final = frozenset(
    {
        "builtins",
        "logging",
        "importlib._bootstrap",
        "importlib._bootstrap_external",
    }
)


class FrameClassifier:
    """Decides which frames are skipped while searching for the call site."""

    def __init__(self, registry: HiddenSetRegistry | None = None) -> None:
        self.registry = registry if registry is not None else HiddenSetRegistry()

    def is_hidden(self, frame: StackFrame) -> bool:
        """True when the frame is unresolvable, infrastructure, or registered as hidden."""
        method = frame.method
        if method is None:
            return True
        declaring_type = method.declaring_type
        if declaring_type is None:
            return True
        module = frame.module
        if module is None:
            return True

        for name in module.prefixes:
            if name == OWN_PACKAGE or name in CORE_RUNTIME_MODULES:
                return True
            if self.registry.is_hidden_assembly(name):
                return True

        if declaring_type.cls is not None and self.registry.is_hidden_type(declaring_type.cls):
            return True
        return self.registry.is_hidden_type(declaring_type.full_name)

    def is_logger_frame(self, frame: StackFrame, logger_type: type | None) -> bool:
        """True when the frame is declared by ``logger_type`` or one of its subclasses."""
        declaring_type = frame.declaring_type
        return declaring_type is not None and declaring_type.is_subtype_of(logger_type)
