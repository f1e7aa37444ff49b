#!/usr/bin/env python3
"""Console and file output for call-site decorated records.

The root logger gets one console handler, rendered with Rich or colorlog, and
a ``CallSiteFilter`` so that records of undecorated loggers carry the same
attributes as records of ``WrapLogger`` instances.

Basic Usage Examples:
    from logger_decoration.utils.logger_setup import setup_root_logger

    setup_root_logger(level="DEBUG", use_rich=False)
    logging.getLogger(__name__).info("Rendered with class, method, file and line")

Environment Variables:
    LOG_LEVEL: Default console level when none is given
    USE_RICH_LOGGING: "true" to prefer Rich over colorlog
"""

import logging
from pathlib import Path

import pendulum
from rich.logging import RichHandler

from logger_decoration.core.stack_resolver import StackResolver
from logger_decoration.utils.config import DecorationConfig
from logger_decoration.utils.for_logger.call_site_filter import CallSiteFilter
from logger_decoration.utils.for_logger.console_utils import ConsoleState
from logger_decoration.utils.for_logger.formatters import (
    RichMarkupStripper,
    create_colored_formatter,
    create_plain_formatter,
    rich_call_site_format,
)
from logger_decoration.utils.loguru_setup import logger

# Marker attribute of handlers installed here, holding the handler kind
_HANDLER_MARKER = "_logger_decoration_handler"
_CONSOLE = "console"
_FILE = "file"

_console_state = ConsoleState()


def _mark(handler: logging.Handler, kind: str) -> logging.Handler:
    setattr(handler, _HANDLER_MARKER, kind)
    return handler


def create_console_handler(
    config: DecorationConfig | None = None,
    resolver: StackResolver | None = None,
    use_rich: bool | None = None,
) -> logging.Handler:
    """Console handler rendering the call-site attributes.

    Args:
        config: Rendering options; read from the environment when None
        resolver: Resolver of the filter enriching undecorated records
        use_rich: Override ``config.use_rich``

    Returns:
        logging.Handler: RichHandler or colorlog StreamHandler with a CallSiteFilter
    """
    config = config or DecorationConfig.from_env()
    use_rich = config.use_rich if use_rich is None else use_rich

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=_console_state.console,
            rich_tracebacks=True,
            markup=True,
            show_time=False,
            show_path=False,  # The format renders the resolved call site instead
            highlighter=None,
        )
        handler.setFormatter(logging.Formatter(rich_call_site_format(config)))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(create_colored_formatter(config))

    handler.addFilter(CallSiteFilter(resolver, config))
    return _mark(handler, _CONSOLE)


def setup_root_logger(
    level: str | None = None,
    use_rich: bool | None = None,
    config: DecorationConfig | None = None,
    resolver: StackResolver | None = None,
) -> logging.Logger:
    """Configure the root logger with one call-site aware console handler.

    The console handler previously installed by this function is closed and
    replaced. File handlers from ``add_file_handler`` and every foreign
    handler are kept.
    """
    config = config or DecorationConfig.from_env()
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, None) == _CONSOLE:
            root_logger.removeHandler(handler)
            handler.close()

    level_name = (level or config.log_level).upper()
    root_logger.setLevel(getattr(logging, level_name))
    root_logger.addHandler(create_console_handler(config, resolver, use_rich))

    logger.debug(f"Root logger configured: level={level_name}, rich={config.use_rich if use_rich is None else use_rich}")
    return root_logger


def add_file_handler(
    file_path: str | Path,
    level: str = "DEBUG",
    mode: str = "a",
    config: DecorationConfig | None = None,
    resolver: StackResolver | None = None,
    strip_rich_markup: bool = True,
) -> logging.Handler:
    """Add a plain-text file handler with call-site attributes to the root logger.

    Args:
        file_path: Path to the log file; parent directories are created
        level: Logging level for this handler
        mode: File mode ('w' to overwrite, 'a' to append)
        config: Rendering options
        resolver: Resolver of the filter enriching undecorated records
        strip_rich_markup: Whether to strip Rich markup tags from messages

    Returns:
        logging.Handler: The installed handler
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(str(file_path), mode=mode)
    handler.setLevel(level.upper())
    handler.setFormatter(create_plain_formatter(config))
    handler.addFilter(CallSiteFilter(resolver, config))
    if strip_rich_markup:
        handler.addFilter(RichMarkupStripper())

    logging.getLogger().addHandler(_mark(handler, _FILE))
    logger.debug(f"Added file handler: {file_path}")
    return handler


def configure_session_logging(
    session_name: str,
    log_dir: str | Path = "logs",
    log_level: str = "DEBUG",
    config: DecorationConfig | None = None,
    resolver: StackResolver | None = None,
) -> tuple[Path, Path, str]:
    """Configure timestamped session log files for decorated records.

    Creates ``<log_dir>/<session>_logs/<session>_<timestamp>.log`` for every
    record at ``log_level`` and ``<log_dir>/error_logs/<session>_errors_<timestamp>.log``
    for ERROR and above.

    Returns:
        tuple: (main_log_path, error_log_path, timestamp) for reference
    """
    timestamp = pendulum.now("UTC").format("YYYYMMDD_HHmmss")

    main_log_path = Path(log_dir) / f"{session_name}_logs" / f"{session_name}_{timestamp}.log"
    error_log_path = Path(log_dir) / "error_logs" / f"{session_name}_errors_{timestamp}.log"

    add_file_handler(main_log_path, level=log_level, config=config, resolver=resolver)
    add_file_handler(error_log_path, level="ERROR", config=config, resolver=resolver)

    logger.info(f"Session logging configured: main={main_log_path}, errors={error_log_path}")
    return main_log_path, error_log_path, timestamp


def remove_installed_handlers() -> None:
    """Detach and close every handler installed by this module."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()
