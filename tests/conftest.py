#!/usr/bin/env python
"""Root conftest.py that provides fixtures for the test suite.

This file contains:
1. A list-collecting log handler attached to an isolated stdlib logger
2. Hidden set registries and resolvers owned by a single test
3. A builder for hand-made frame descriptors
"""

import logging

import pytest

from logger_decoration.core.frame_classifier import FrameClassifier
from logger_decoration.core.frames import MethodRef, ModuleRef, StackFrame, TypeRef
from logger_decoration.core.hidden_registry import HiddenSetRegistry
from logger_decoration.core.stack_resolver import StackResolver


class _CollectHandler(logging.Handler):
    """Handler that collects log records in a list."""

    def __init__(self, records_list):
        super().__init__()
        self.records_list = records_list

    def emit(self, record):
        self.records_list.append(record)


class LogCapture:
    """Isolated logger whose records end up in ``records``."""

    def __init__(self, name: str):
        self.records: list[logging.LogRecord] = []
        self.handler = _CollectHandler(self.records)
        self.handler.setLevel(logging.DEBUG)
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.addHandler(self.handler)

    def close(self):
        self.logger.removeHandler(self.handler)
        self.records.clear()


class FrameBuilder:
    """Builds frame descriptors the way a recorded trace would carry them."""

    def __init__(self, module: str = "app.services"):
        self.module = ModuleRef(module)

    def type_ref(self, name, cls=None, declaring_type=None, module=None, display_name=None):
        module_ref = ModuleRef(module, display_name) if module else self.module
        return TypeRef(
            name=name,
            namespace="" if declaring_type is not None else module_ref.name,
            declaring_type=declaring_type,
            module=module_ref,
            cls=cls,
        )

    def method(self, name, type_ref=None, qualname=None, parameters=()):
        return MethodRef(
            name=name,
            qualname=qualname or (f"{type_ref.name}.{name}" if type_ref else name),
            parameters=parameters,
            declaring_type=type_ref,
            module=type_ref.module if type_ref else self.module,
        )

    def frame(
        self,
        method_name,
        type_name="OrderService",
        cls=None,
        module=None,
        line=10,
        is_resumable=False,
        declaring_type=None,
        qualname=None,
    ):
        type_ref = self.type_ref(type_name, cls=cls, declaring_type=declaring_type, module=module)
        method = self.method(method_name, type_ref, qualname=qualname)
        file_name = f"/srv/{type_ref.module.name.replace('.', '/')}.py"
        return StackFrame(method, file_name=file_name, line_number=line, is_resumable=is_resumable)

    def logger_frame(self, logger_type, method_name="log", line=1):
        return self.frame(method_name, logger_type.__name__, cls=logger_type, module="app.log_wrappers", line=line)

    def hidden_frame(self, line=0):
        return StackFrame(method=None, file_name="<frozen>", line_number=line)


@pytest.fixture
def log_capture(request):
    """Isolated stdlib logger collecting its records."""
    capture = LogCapture(f"tests.{request.node.name}")
    yield capture
    capture.close()


@pytest.fixture
def registry():
    """Hidden set registry owned by the test."""
    return HiddenSetRegistry()


@pytest.fixture
def resolver(registry):
    """Resolver on top of the test's registry."""
    return StackResolver(FrameClassifier(registry))


@pytest.fixture
def frames():
    """Builder of hand-made frame descriptors in module ``app.services``."""
    return FrameBuilder()
