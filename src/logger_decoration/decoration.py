#!/usr/bin/env python3
"""One-call setup of call-site decoration for an application.

Example:
    >>> import logging
    >>> from logger_decoration import add_logger_decoration
    >>>
    >>> factory = add_logger_decoration(hidden_modules=["myapp.logging_helpers"])
    >>> log = factory.get_logger()
    >>> log.info("Order %s accepted", 42)  # record.caller_method_name names the caller
"""

import logging
from collections.abc import Callable, Hashable, Iterable
from types import ModuleType

from logger_decoration.core.frame_classifier import FrameClassifier
from logger_decoration.core.hidden_registry import HiddenSetRegistry
from logger_decoration.core.stack_resolver import StackResolver
from logger_decoration.utils.config import DecorationConfig
from logger_decoration.utils.for_logger.custom_logger import CallSiteLogger
from logger_decoration.utils.for_logger.wrap_logger_factory import WrapLoggerFactory
from logger_decoration.utils.loguru_setup import logger


def add_logger_decoration(
    config: DecorationConfig | None = None,
    registry: HiddenSetRegistry | None = None,
    origin_factory: Callable[[str], logging.Logger] = logging.getLogger,
    install_logger_class: bool = False,
    hidden_modules: Iterable[ModuleType | str] = (),
    hidden_types: Iterable[Hashable] = (),
) -> WrapLoggerFactory:
    """Build a decorated logger factory on top of ``origin_factory``.

    The logging library and this package are registered as hidden, followed
    by ``hidden_modules`` and ``hidden_types``.

    Args:
        config: Rendering options, read from the environment when None
        registry: Hidden set registry to use, a fresh one when None
        origin_factory: Callable returning the stdlib logger of a category
        install_logger_class: Also make ``CallSiteLogger`` the stdlib logger class
            so that ``%(funcName)s`` and ``%(lineno)d`` name the call site
        hidden_modules: Extra modules (objects or dotted names) to hide
        hidden_types: Extra classes (or full type names) to hide

    Returns:
        WrapLoggerFactory: Factory handing out decorated loggers
    """
    config = config or DecorationConfig.from_env()
    registry = registry if registry is not None else HiddenSetRegistry()

    registry.register_hidden_assembly(logging)
    registry.register_hidden_assembly(__name__.split(".", 1)[0])
    for module in hidden_modules:
        registry.register_hidden_assembly(module)
    for class_type in hidden_types:
        registry.register_hidden_type(class_type)

    resolver = StackResolver(FrameClassifier(registry))

    if install_logger_class:
        CallSiteLogger.use_resolver(resolver)
        logging.setLoggerClass(CallSiteLogger)
        logger.debug("CallSiteLogger installed as the logging logger class")

    logger.debug(
        f"Logger decoration added: {len(registry.hidden_assemblies)} hidden modules, "
        f"{len(registry.hidden_types)} hidden types"
    )
    return WrapLoggerFactory(origin_factory, resolver, config)
