#!/usr/bin/env python3
"""Unit tests for frame descriptors captured from the running interpreter."""

import asyncio
import sys

import pytest

from logger_decoration.core.frames import (
    MethodRef,
    ModuleRef,
    StackFrame,
    TypeRef,
    capture_stack,
    distribution_for,
)
from logger_decoration.core.name_cleaner import clean_class_name, clean_method_name


def descend(depth):
    if depth == 0:
        return capture_stack()
    return descend(depth - 1)


def capture_for_caller():
    return capture_stack(skip=1)


class Service:
    def run(self):
        return capture_stack()

    def with_lambda(self):
        return (lambda: capture_stack())()

    def with_comprehension(self):
        return [capture_stack() for _ in range(1)][0]

    @classmethod
    def build(cls):
        return capture_stack()

    def lines(self):
        yield capture_stack()

    async def settle(self):
        await asyncio.sleep(0)
        return capture_stack()

    class Inner:
        def run(self):
            return capture_stack()


class TestCaptureStack:
    """Live capture, innermost frame first."""

    def test_first_frame_is_the_caller(self):
        trace = capture_stack()
        line = sys._getframe().f_lineno - 1

        assert trace[0].method.name == "test_first_frame_is_the_caller"
        assert trace[0].file_name == __file__
        assert trace[0].line_number == line

    @pytest.mark.parametrize("depth", [0, 1, 5])
    def test_capture_at_depth(self, depth):
        """A capture d calls deep has d + 1 helper frames ahead of the test."""
        trace = descend(depth)

        assert [frame.method.name for frame in trace[: depth + 1]] == ["descend"] * (depth + 1)
        assert trace[depth + 1].method.name == "test_capture_at_depth"

    def test_skip_and_limit(self):
        trace = capture_for_caller()
        limited = descend(3)[:2]

        assert trace[0].method.name == "test_skip_and_limit"
        assert len(capture_stack(limit=2)) == 2
        assert [frame.method.name for frame in limited] == ["descend", "descend"]

    def test_excessive_skip_returns_empty_trace(self):
        assert capture_stack(skip=10_000) == ()

    def test_frames_are_immutable(self):
        frame = capture_stack()[0]

        with pytest.raises(AttributeError):
            frame.line_number = 0


class TestDeclaringTypes:
    """Resolution of declaring types and modules."""

    def test_module_level_function_gets_module_scope(self):
        declaring_type = descend(0)[0].declaring_type

        assert declaring_type.is_module_scope
        assert declaring_type.full_name == __name__
        assert declaring_type.module.name == __name__
        assert declaring_type.cls is None

    def test_method_resolves_its_class(self):
        frame = Service().run()[0]

        assert frame.declaring_type.cls is Service
        assert frame.declaring_type.full_name == f"{__name__}.Service"
        assert frame.method.qualname == "Service.run"
        assert frame.method.parameters == ("self",)
        assert frame.module == ModuleRef(__name__, distribution_for(__name__))

    def test_classmethod_resolves_its_class(self):
        assert Service.build()[0].declaring_type.cls is Service

    def test_nested_class_keeps_its_owner(self):
        declaring_type = Service.Inner().run()[0].declaring_type

        assert declaring_type.cls is Service.Inner
        assert declaring_type.is_nested
        assert declaring_type.declaring_type.cls is Service
        assert declaring_type.full_name == f"{__name__}.Service.Inner"

    def test_lambda_belongs_to_the_enclosing_class(self):
        method = Service().with_lambda()[0].method

        assert method.name == "<lambda>"
        assert method.declaring_type.cls is Service
        assert clean_method_name(method) == "with_lambda"
        assert clean_class_name(method, include_namespace=False) == "Service"

    def test_comprehension_belongs_to_the_enclosing_method(self):
        trace = Service().with_comprehension()
        method = trace[0].method

        # Own frame or inlined, the comprehension reports its method
        assert clean_method_name(method) == "with_comprehension"
        assert method.declaring_type.cls is Service

    def test_local_class_resolves_through_self(self):
        class Local:
            def run(self):
                return capture_stack()

        declaring_type = Local().run()[0].declaring_type

        assert declaring_type.cls is Local
        assert declaring_type.name == Local.__qualname__
        assert clean_class_name(Local().run()[0].method, include_namespace=False) == (
            "TestDeclaringTypes.test_local_class_resolves_through_self.Local"
        )

    def test_code_without_module_is_unresolved(self):
        namespace = {"capture_stack": capture_stack}
        exec("trace = capture_stack()", namespace)
        frame = namespace["trace"][0]

        assert frame.method.name == "<module>"
        assert frame.declaring_type is None
        assert frame.module is None


class TestResumableFrames:
    """Generators and coroutines are flagged as resumable."""

    def test_plain_method_is_not_resumable(self):
        assert not Service().run()[0].is_resumable

    def test_generator_is_resumable(self):
        trace = next(Service().lines())

        assert trace[0].is_resumable
        assert trace[0].method.name == "lines"

    def test_coroutine_is_resumable_after_await(self):
        trace = asyncio.run(Service().settle())

        assert trace[0].is_resumable
        assert trace[0].method.name == "settle"
        assert trace[0].declaring_type.cls is Service


class TestDescriptors:
    """Hand-built descriptors."""

    def test_prefixes_walk_up_the_package_tree(self):
        assert ModuleRef("app.services.orders").prefixes == ("app.services.orders", "app.services", "app")

    def test_nested_full_name_uses_separator(self):
        outer = TypeRef(name="Worker", namespace="app")
        inner = TypeRef(name="<>c", declaring_type=outer, nested_separator="+")

        assert inner.full_name == "app.Worker+<>c"
        assert inner.is_nested
        assert not outer.is_nested

    def test_subtype_check_needs_a_class(self):
        assert TypeRef(name="Service", cls=Service).is_subtype_of(object)
        assert not TypeRef(name="Service").is_subtype_of(object)
        assert not TypeRef(name="Service", cls=Service).is_subtype_of(None)

    def test_signature_rendering(self):
        method = MethodRef(name="submit", parameters=("self", "order_id"))

        assert method.signature == "submit(self, order_id)"
        assert str(method) == "submit(self, order_id)"

    def test_frame_module_prefers_declaring_type(self):
        module = ModuleRef("app.services")
        method = MethodRef(name="run", declaring_type=TypeRef(name="Worker", module=module), module=ModuleRef("other"))

        assert StackFrame(method).module is module
        assert StackFrame(None).module is None
