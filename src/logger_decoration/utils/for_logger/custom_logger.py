#!/usr/bin/env python3
"""Logger class whose records point at the real call site.

``CallSiteLogger`` overrides ``findCaller`` so that ``%(filename)s``,
``%(lineno)d`` and ``%(funcName)s`` name the application code that issued the
call instead of a proxy, wrapper or helper registered as hidden. Install it
with ``logging.setLoggerClass(CallSiteLogger)`` or through
``add_logger_decoration(install_logger_class=True)``.
"""

import logging
import traceback

from logger_decoration.core.call_site import CallSiteInformation
from logger_decoration.core.frames import capture_stack
from logger_decoration.core.stack_resolver import StackResolver

UNKNOWN_CALLER = ("(unknown file)", 0, "(unknown function)", None)


class CallSiteLogger(logging.Logger):
    """Logger that resolves its caller with the call-site resolver.

    The resolver is shared by all instances of the class; bind a resolver owning
    the application's hidden registry with :meth:`use_resolver`.
    """

    resolver: StackResolver = StackResolver()

    @classmethod
    def use_resolver(cls, resolver: StackResolver) -> None:
        cls.resolver = resolver

    def findCaller(self, stack_info: bool = False, stacklevel: int = 1) -> tuple[str, int, str, str | None]:
        """Find the stack frame of the caller.

        Args:
            stack_info: If True, collect stack trace information
            stacklevel: 1 names the call site, higher values its callers

        Returns:
            tuple: (filename, line number, function name, stack info)
        """
        trace = capture_stack()
        if not trace:
            return UNKNOWN_CALLER

        call_site = CallSiteInformation(self.resolver)
        call_site.set_stack_trace(trace, logger_type=CallSiteLogger)
        skip = max(stacklevel, 1) - 1
        index = call_site.user_stack_frame_number + skip
        if index >= len(trace):
            return UNKNOWN_CALLER

        method = call_site.get_caller_stack_frame_method(skip)
        func = call_site.caller_method_name(method) or "(unknown function)"

        sinfo = None
        if stack_info:
            entries = [
                (frame.file_name, frame.line_number, frame.method.name if frame.method else "?", None)
                for frame in reversed(trace[index:])
            ]
            sinfo = "Stack (most recent call last):\n" + "".join(traceback.format_list(entries)).rstrip("\n")

        return call_site.caller_file_path(skip), call_site.caller_line_number(skip), func, sinfo
