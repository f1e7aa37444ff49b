"""Logger Decoration - Call-site enrichment for stdlib logging.

Every record logged through a decorated logger carries the class, method,
file and line of the application code that issued the call. Frames of logger
wrappers, the logging library and modules or classes registered as hidden are
skipped, and compiler-generated names of generators, coroutines, lambdas and
comprehensions are cleaned up to the names a developer would recognise.

Quick Start:
    >>> import logging
    >>> from logger_decoration import add_logger_decoration
    >>>
    >>> logging.basicConfig(
    ...     format="%(levelname)s %(caller_class_name)s.%(caller_method_name)s: %(message)s",
    ...     level=logging.INFO,
    ... )
    >>> factory = add_logger_decoration()
    >>> log = factory.get_logger(__name__)
    >>>
    >>> class OrderService:
    ...     def place(self):
    ...         log.info("placed")  # INFO __main__.OrderService.place: placed
"""

__version__ = "0.1.0"

from typing import Any

_EXPORTS = {
    "add_logger_decoration": "logger_decoration.decoration",
    "CallSiteInformation": "logger_decoration.core.call_site",
    "CallerInfo": "logger_decoration.core.call_site",
    "FrameClassifier": "logger_decoration.core.frame_classifier",
    "HiddenSetRegistry": "logger_decoration.core.hidden_registry",
    "StackResolver": "logger_decoration.core.stack_resolver",
    "capture_stack": "logger_decoration.core.frames",
    "DecorationConfig": "logger_decoration.utils.config",
    "WrapLogger": "logger_decoration.utils.for_logger.wrap_logger",
    "WrapLoggerFactory": "logger_decoration.utils.for_logger.wrap_logger_factory",
    "CallSiteFilter": "logger_decoration.utils.for_logger.call_site_filter",
    "CallSiteLogger": "logger_decoration.utils.for_logger.custom_logger",
    "setup_root_logger": "logger_decoration.utils.logger_setup",
}


# Lazy imports keep `import logger_decoration` free of rich/colorlog until needed
def __getattr__(name: str) -> Any:
    """Lazy import for main package exports."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    import importlib

    return getattr(importlib.import_module(module_name), name)


__all__ = [
    "CallSiteFilter",
    "CallSiteInformation",
    "CallSiteLogger",
    "CallerInfo",
    "DecorationConfig",
    "FrameClassifier",
    "HiddenSetRegistry",
    "StackResolver",
    "WrapLogger",
    "WrapLoggerFactory",
    "__version__",
    "add_logger_decoration",
    "capture_stack",
    "setup_root_logger",
]
