#!/usr/bin/env python3
"""Per-log-call call-site state and accessors.

A ``CallSiteInformation`` is created for one log invocation, fed the captured
trace (or an explicit caller override) and then asked for class, method, file
and line. It is discarded once the record is emitted.
"""

from collections.abc import Sequence

import attrs

from logger_decoration.core.frames import MethodRef, StackFrame
from logger_decoration.core.name_cleaner import clean_class_name, clean_method_name
from logger_decoration.core.stack_resolver import StackResolver


@attrs.frozen
class CallerInfo:
    """Caller identity supplied directly by the call site, bypassing the trace."""

    class_name: str = ""
    method_name: str = ""
    file_path: str = ""
    line_number: int | None = None


class CallSiteInformation:
    """Call-site state of a single log invocation."""

    def __init__(self, resolver: StackResolver | None = None) -> None:
        self._resolver = resolver if resolver is not None else StackResolver()
        self.stack_trace: tuple[StackFrame, ...] | None = None
        self.user_stack_frame_number = 0
        # Lower-precision index that skips async resumption frames; for comparison only
        self.user_stack_frame_number_legacy: int | None = None
        self.caller_class_name_override: str | None = None
        self.caller_method_name_override: str | None = None
        self.caller_file_path_override: str | None = None
        self.caller_line_number_override: int | None = None

    def set_stack_trace(
        self,
        stack_trace: Sequence[StackFrame] | None,
        user_stack_frame: int | None = None,
        logger_type: type | None = None,
    ) -> None:
        """Store the trace and locate the user frame in it.

        Args:
            stack_trace: Captured frames, innermost first
            user_stack_frame: Known user frame index; skips resolution when given
            logger_type: Class of the logger wrapper; without it no resolution
                happens and frame 0 is taken as the user frame
        """
        self.stack_trace = tuple(stack_trace) if stack_trace is not None else None
        if user_stack_frame is None and self.stack_trace is not None:
            if logger_type is not None:
                resolved = self._resolver.resolve(self.stack_trace, logger_type)
                self.user_stack_frame_number = resolved.primary
                self.user_stack_frame_number_legacy = resolved.legacy
            else:
                self.user_stack_frame_number = 0
                self.user_stack_frame_number_legacy = None
        else:
            self.user_stack_frame_number = user_stack_frame or 0
            self.user_stack_frame_number_legacy = None

    def set_caller_info(self, caller: CallerInfo) -> None:
        """Record an explicit caller; all accessors return it verbatim from now on."""
        self.caller_class_name_override = caller.class_name
        self.caller_method_name_override = caller.method_name
        self.caller_file_path_override = caller.file_path
        self.caller_line_number_override = caller.line_number

    def _frame(self, skip_frames: int) -> StackFrame | None:
        index = self.user_stack_frame_number + skip_frames
        if not self.stack_trace or index < 0 or index >= len(self.stack_trace):
            return None
        return self.stack_trace[index]

    def get_caller_stack_frame_method(self, skip_frames: int = 0) -> MethodRef | None:
        frame = self._frame(skip_frames)
        return frame.method if frame is not None else None

    def caller_class_name(
        self,
        method: MethodRef | None = None,
        include_namespace: bool = True,
        clean_async_continuation: bool = True,
        clean_anonymous_delegate: bool = True,
    ) -> str:
        if self.caller_class_name_override:
            if include_namespace:
                return self.caller_class_name_override
            last_dot = self.caller_class_name_override.rfind(".")
            if last_dot < 0 or last_dot >= len(self.caller_class_name_override) - 1:
                return self.caller_class_name_override
            return self.caller_class_name_override[last_dot + 1 :]

        method = method or self.get_caller_stack_frame_method(0)
        if method is None:
            return ""

        legacy = self.user_stack_frame_number_legacy is not None
        return (
            clean_class_name(
                method,
                include_namespace,
                clean_async_continuation or legacy,
                clean_anonymous_delegate or legacy,
            )
            or ""
        )

    def caller_method_name(
        self,
        method: MethodRef | None = None,
        include_signature: bool = False,
        clean_async_continuation: bool = True,
        clean_anonymous_delegate: bool = True,
    ) -> str:
        if self.caller_method_name_override:
            return self.caller_method_name_override

        method = method or self.get_caller_stack_frame_method(0)
        if method is None:
            return ""

        legacy = self.user_stack_frame_number_legacy is not None
        return (
            clean_method_name(
                method,
                include_signature,
                clean_async_continuation or legacy,
                clean_anonymous_delegate or legacy,
            )
            or ""
        )

    def caller_file_path(self, skip_frames: int = 0) -> str:
        if self.caller_file_path_override:
            return self.caller_file_path_override

        frame = self._frame(skip_frames)
        return frame.file_name or "" if frame is not None else ""

    def caller_line_number(self, skip_frames: int = 0) -> int:
        if self.caller_line_number_override is not None:
            return self.caller_line_number_override

        frame = self._frame(skip_frames)
        return frame.line_number or 0 if frame is not None else 0
