#!/usr/bin/env python3
"""Location of the user frame inside a captured trace.

The primary pass walks the trace once, innermost frame first::

    frame 0  WrapLogger.log        logger frame
    frame 1  audit                 candidate, dropped again by frame 2
    frame 2  WrapLogger.info       logger frame (decorator re-entered the logger)
    frame 3  OrderService.submit   <- call site
    frame 4  main

Every logger frame clears the tentative candidate, so the first user frame
after the *last* logger frame wins without a backward rescan.
"""

from collections.abc import Sequence
from typing import Final, NamedTuple

from logger_decoration.core.frame_classifier import FrameClassifier
from logger_decoration.core.frames import StackFrame
from logger_decoration.core.hidden_registry import HiddenSetRegistry
from logger_decoration.core.name_cleaner import CONTINUATION_ENTRY_POINT

# Namespaces hosting the machinery that resumes suspended frames
ASYNC_INFRASTRUCTURE_NAMESPACES: Final = frozenset({"asyncio"})

# Types that replay a captured execution context before resuming a frame
EXECUTION_CONTEXT_TYPES: Final = frozenset({"asyncio.events.Handle"})


class ResolvedIndices(NamedTuple):
    """Primary user-frame index and the optional lower-precision legacy index."""

    primary: int
    legacy: int | None = None


class StackResolver:
    """Computes the index of the genuine call-site frame."""

    def __init__(self, classifier: FrameClassifier | None = None) -> None:
        self.classifier = classifier if classifier is not None else FrameClassifier()

    @property
    def registry(self) -> HiddenSetRegistry:
        return self.classifier.registry

    def resolve(self, trace: Sequence[StackFrame] | None, logger_type: type | None) -> ResolvedIndices:
        """Find the user frame in ``trace``.

        Args:
            trace: Captured frames, innermost first
            logger_type: Class of the logger wrapper doing the resolution, or None

        Returns:
            ResolvedIndices: ``primary`` always addresses a frame of a non-empty
            trace; ``legacy`` is set only when the legacy pass lands elsewhere
        """
        first_user = self.find_user_frame(trace, logger_type)
        if first_user is None:
            return ResolvedIndices(0)

        legacy = self.skip_to_user_frame_legacy(trace, first_user)
        return ResolvedIndices(first_user, legacy if legacy != first_user else None)

    def find_user_frame(self, trace: Sequence[StackFrame] | None, logger_type: type | None) -> int | None:
        """Index of the first visible frame after the last logger frame.

        Falls back to the first visible frame, and returns None when every
        frame is hidden.
        """
        if not trace:
            return None

        after_logger = None
        first_user = None
        for index, frame in enumerate(trace):
            if self.classifier.is_hidden(frame):
                continue

            if first_user is None:
                first_user = index

            if self.classifier.is_logger_frame(frame, logger_type):
                after_logger = None
                continue

            if after_logger is None:
                after_logger = index

        return after_logger if after_logger is not None else first_user

    def skip_to_user_frame_legacy(self, trace: Sequence[StackFrame], first_user: int) -> int:
        """Step over continuation entry points resumed by async infrastructure.

        Once an entry point has been stepped over, the event loop frames that
        resumed it are skipped too, so the scan lands on the code that started
        the loop. Kept for comparison with older output only: the frame it
        lands on has lost the source line of the original statement.
        """
        resumed = False
        for index in range(first_user, len(trace)):
            frame = trace[index]
            if self.classifier.is_hidden(frame):
                continue
            if resumed and self._is_async_infrastructure(frame):
                continue

            if self._is_continuation_entry(frame) and index + 1 < len(trace):
                if self._is_async_infrastructure(trace[index + 1]):
                    resumed = True
                    continue

            return index
        return first_user

    @staticmethod
    def _is_continuation_entry(frame: StackFrame) -> bool:
        return frame.is_resumable or (frame.method is not None and frame.method.name == CONTINUATION_ENTRY_POINT)

    @staticmethod
    def _is_async_infrastructure(frame: StackFrame) -> bool:
        declaring_type = frame.declaring_type
        if declaring_type is None:
            return False
        if declaring_type.full_name in EXECUTION_CONTEXT_TYPES:
            return True
        namespace = declaring_type.namespace
        if declaring_type.is_module_scope:
            namespace = declaring_type.full_name
        head = declaring_type
        while head.declaring_type is not None:
            head = head.declaring_type
            namespace = head.namespace
        return any(namespace == ns or namespace.startswith(f"{ns}.") for ns in ASYNC_INFRASTRUCTURE_NAMESPACES)
