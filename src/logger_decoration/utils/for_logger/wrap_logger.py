#!/usr/bin/env python3
"""Logger wrapper attaching call-site attributes to every record.

``WrapLogger`` wraps a stdlib ``logging.Logger``. Each log call captures the
stack, resolves the frame that issued the call and forwards the record to the
wrapped logger with four extra attributes (by default ``caller_class_name``,
``caller_method_name``, ``caller_file_path`` and ``caller_line_number``).

An explicit caller can be passed with the ``caller`` keyword; it replaces the
trace lookup entirely::

    log.info("imported", caller=CallerInfo("billing.Importer", "run", "importer.py", 42))
"""

import logging
import os
from collections.abc import Sequence

from logger_decoration.core.call_site import CallerInfo, CallSiteInformation
from logger_decoration.core.frames import StackFrame, capture_stack
from logger_decoration.core.stack_resolver import StackResolver
from logger_decoration.utils.config import (
    CLASS_NAME_ATTRIBUTE,
    FILE_PATH_ATTRIBUTE,
    LINE_NUMBER_ATTRIBUTE,
    METHOD_NAME_ATTRIBUTE,
    DecorationConfig,
)
from logger_decoration.utils.for_logger.custom_logger import CallSiteLogger


def call_site_attributes(call_site: CallSiteInformation, config: DecorationConfig) -> dict[str, object]:
    """Render the four call-site attributes of a resolved call."""
    skip = config.skip_frames
    method = call_site.get_caller_stack_frame_method(skip) if skip else None
    return {
        config.attribute(LINE_NUMBER_ATTRIBUTE): call_site.caller_line_number(skip),
        config.attribute(FILE_PATH_ATTRIBUTE): call_site.caller_file_path(skip),
        config.attribute(METHOD_NAME_ATTRIBUTE): call_site.caller_method_name(
            method,
            config.include_signature,
            config.clean_async_continuation,
            config.clean_anonymous_delegate,
        ),
        config.attribute(CLASS_NAME_ATTRIBUTE): call_site.caller_class_name(
            method,
            config.include_namespace,
            config.clean_async_continuation,
            config.clean_anonymous_delegate,
        ),
    }


def _is_logging_internal(file_name: str) -> bool:
    # Same test logging.Logger.findCaller applies when counting stacklevel
    file_name = os.path.normcase(file_name)
    return file_name == logging._srcfile or ("importlib" in file_name and "_bootstrap" in file_name)


def stacklevel_for(trace: Sequence[StackFrame], index: int) -> int:
    """Stacklevel that makes the stdlib record point at ``trace[index]``.

    ``trace[0]`` must be the frame that calls the stdlib logger.
    """
    return max(1, sum(1 for frame in trace[: index + 1] if not _is_logging_internal(frame.file_name)))


class WrapLogger(logging.LoggerAdapter):
    """Decorates a stdlib logger with call-site enrichment."""

    def __init__(
        self,
        logger: logging.Logger,
        resolver: StackResolver | None = None,
        config: DecorationConfig | None = None,
        extra: dict | None = None,
    ) -> None:
        super().__init__(logger, extra or {})
        self.resolver = resolver if resolver is not None else StackResolver()
        self.config = config if config is not None else DecorationConfig()

    def process(self, msg, kwargs):
        # Merge instead of replacing the caller's extra
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def log(self, level, msg, *args, **kwargs):
        caller: CallerInfo | None = kwargs.pop("caller", None)
        if not self.isEnabledFor(level):
            return

        trace = capture_stack()
        call_site = CallSiteInformation(self.resolver)
        call_site.set_stack_trace(trace, logger_type=WrapLogger)
        if caller is not None:
            call_site.set_caller_info(caller)

        msg, kwargs = self.process(msg, kwargs)
        kwargs["extra"].update(call_site_attributes(call_site, self.config))
        if isinstance(self.logger, CallSiteLogger):
            # CallSiteLogger finds the call site on its own, stacklevel counts from there
            kwargs.setdefault("stacklevel", 1 + self.config.skip_frames)
        else:
            kwargs.setdefault(
                "stacklevel", stacklevel_for(trace, call_site.user_stack_frame_number + self.config.skip_frames)
            )
        self.logger.log(level, msg, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.logger.name} ({logging.getLevelName(self.getEffectiveLevel())})>"
