#!/usr/bin/env python3
"""``logging.Filter`` enriching records of plain stdlib loggers.

Attach it to a handler or a logger; records that already carry call-site
attributes (e.g. from a ``WrapLogger``) pass through unchanged. The filter
must run on the thread that issued the log call, so it does not belong on
handlers fed by a ``QueueListener``.
"""

import logging

from logger_decoration.core.call_site import CallSiteInformation
from logger_decoration.core.frames import capture_stack
from logger_decoration.core.stack_resolver import StackResolver
from logger_decoration.utils.config import CLASS_NAME_ATTRIBUTE, DecorationConfig
from logger_decoration.utils.for_logger.wrap_logger import call_site_attributes


class CallSiteFilter(logging.Filter):
    """Adds call-site attributes to records that do not have them yet."""

    def __init__(
        self,
        resolver: StackResolver | None = None,
        config: DecorationConfig | None = None,
        logger_type: type = logging.Logger,
        name: str = "",
    ) -> None:
        super().__init__(name)
        self.resolver = resolver if resolver is not None else StackResolver()
        self.config = config if config is not None else DecorationConfig()
        self.logger_type = logger_type

    def filter(self, record: logging.LogRecord) -> bool:
        if not super().filter(record):
            return False
        if hasattr(record, self.config.attribute(CLASS_NAME_ATTRIBUTE)):
            return True

        call_site = CallSiteInformation(self.resolver)
        call_site.set_stack_trace(capture_stack(), logger_type=self.logger_type)
        for attribute, value in call_site_attributes(call_site, self.config).items():
            setattr(record, attribute, value)
        return True
