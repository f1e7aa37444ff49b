#!/usr/bin/env python3
"""Formatters and filters rendering call-site attributes."""

import logging
import re

from colorlog import ColoredFormatter

from logger_decoration.utils.config import DecorationConfig

# Default color scheme
DEFAULT_LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# Rich markup tags such as [bold green] or [/cyan]
_RICH_MARKUP = re.compile(r"\[/?[a-zA-Z_ ,#0-9.=]*\]")


def call_site_format(config: DecorationConfig | None = None, colored: bool = True) -> str:
    """Format string showing the message followed by the resolved call site."""
    config = config or DecorationConfig()
    class_name, method_name, file_path, line_number = config.attribute_names
    if colored:
        return (
            "%(log_color)s%(levelname)-8s%(reset)s %(name)s: %(message)s"
            f"%(blue)s [%(cyan)s%({class_name})s.%({method_name})s%(blue)s "
            f"%(cyan)s%({file_path})s%(blue)s:%(yellow)s%({line_number})s%(blue)s]%(reset)s"
        )
    return (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s "
        f"[%({class_name})s.%({method_name})s %({file_path})s:%({line_number})s]"
    )


def rich_call_site_format(config: DecorationConfig | None = None) -> str:
    """Format string for RichHandler; Rich styles level and time itself."""
    config = config or DecorationConfig()
    class_name, method_name, file_path, line_number = config.attribute_names
    return (
        "%(message)s [blue][[cyan]%(" + class_name + ")s.%(" + method_name + ")s[/cyan] "
        "[cyan]%(" + file_path + ")s[/cyan]:[yellow]%(" + line_number + ")s[/yellow]][/blue]"
    )


def call_site_defaults(config: DecorationConfig | None = None) -> dict[str, object]:
    """Values used by formatters for records that were never decorated."""
    config = config or DecorationConfig()
    class_name, method_name, file_path, line_number = config.attribute_names
    return {class_name: "", method_name: "", file_path: "", line_number: 0}


def create_colored_formatter(config: DecorationConfig | None = None) -> ColoredFormatter:
    """Colorlog formatter including the call-site attributes."""
    return ColoredFormatter(
        call_site_format(config, colored=True),
        log_colors=DEFAULT_LOG_COLORS,
        style="%",
        reset=True,
    )


def create_plain_formatter(config: DecorationConfig | None = None) -> logging.Formatter:
    return logging.Formatter(
        call_site_format(config, colored=False),
        datefmt="%Y-%m-%d %H:%M:%S",
        defaults=call_site_defaults(config),
    )


class RichMarkupStripper(logging.Filter):
    """Strip Rich markup from messages headed to plain-text destinations."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _RICH_MARKUP.sub("", record.msg)
        return True
