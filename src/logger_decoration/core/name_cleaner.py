#!/usr/bin/env python3
"""Readable caller names from compiler-generated method and type names.

Two families of synthetic names are undone here:

Marker-shaped names, produced for state machines and closures::

    <FetchOrders>d__3.MoveNext      -> FetchOrders
    <Main>b__2                      -> Main
    Worker+<>c__DisplayClass4_0     -> Worker

Python's own synthetic code names::

    Worker.run.<locals>.<lambda>    -> run
    build.<locals>.Local            -> build.Local
"""

import sys
from typing import Final

from logger_decoration.core.frame_classifier import CORE_RUNTIME_MODULES
from logger_decoration.core.frames import LOCALS_MARKER, MethodRef, TypeRef

# Method that resumes a state machine after a suspension point
CONTINUATION_ENTRY_POINT: Final = "MoveNext"

MARKER_OPEN: Final = "<"
MARKER_CLOSE: Final = ">"
CLOSURE_SEPARATOR: Final = "__"
CLOSURE_CONTAINER_MARKER: Final = "<>"
NESTED_CLOSURE_CONTAINER: Final = "+<>"

LOCALS_SEGMENT: Final = f".{LOCALS_MARKER}"
PYTHON_ANONYMOUS_NAMES: Final = frozenset({"<lambda>", "<genexpr>", "<listcomp>", "<setcomp>", "<dictcomp>"})

RESERVED_DISPLAY_PREFIXES: Final = ("_",)
RESERVED_DISPLAY_NAMES: Final = frozenset({"python"})


def _is_state_machine(method: MethodRef, caller_type: TypeRef | None) -> bool:
    return (
        method.name == CONTINUATION_ENTRY_POINT
        and caller_type is not None
        and caller_type.is_nested
        and caller_type.name.startswith(MARKER_OPEN)
    )


def _enclosing_function(qualname: str) -> str | None:
    """Name of the function whose ``<locals>`` hold the given qualified name."""
    parts = qualname.split(".")
    for index in range(len(parts) - 1, 0, -1):
        if parts[index] == LOCALS_MARKER:
            return parts[index - 1]
    return None


def _namespace_from_module(caller_type: TypeRef) -> str | None:
    module = caller_type.module
    if module is None or not module.display_name:
        return None
    if module.name in CORE_RUNTIME_MODULES or module.name.split(".", 1)[0] in sys.stdlib_module_names:
        return None
    display_name = module.display_name
    if (
        display_name.startswith(RESERVED_DISPLAY_PREFIXES)
        or display_name.lower() in RESERVED_DISPLAY_NAMES
        or display_name == module.name
    ):
        return None
    return display_name


def clean_method_name(
    method: MethodRef | None,
    include_signature: bool = False,
    clean_async_continuation: bool = True,
    clean_anonymous_delegate: bool = True,
) -> str | None:
    """Turn a raw method name into the name a developer would recognize.

    Args:
        method: Method to name, or None
        include_signature: Render ``name(params)`` when no cleaning applied
        clean_async_continuation: Replace state-machine entry points by the original method
        clean_anonymous_delegate: Replace closure and lambda names by their enclosing method

    Returns:
        str | None: The cleaned method name, None when ``method`` is None
    """
    if method is None:
        return None

    method_name = method.name
    caller_type = method.declaring_type
    if clean_async_continuation and _is_state_machine(method, caller_type):
        # <FetchOrders>d__3 declared inside the class that owns FetchOrders
        end_index = caller_type.name.find(MARKER_CLOSE, 1)
        if end_index > 1:
            method_name = caller_type.name[1:end_index]
            if method_name.startswith(MARKER_OPEN):
                # Local functions and anonymous tasks
                method_name = method_name[1:]

    if clean_anonymous_delegate:
        if (
            method_name.startswith(MARKER_OPEN)
            and CLOSURE_SEPARATOR in method_name
            and MARKER_CLOSE in method_name
        ):
            method_name = method_name[1 : method_name.index(MARKER_CLOSE)]
        elif method_name in PYTHON_ANONYMOUS_NAMES:
            method_name = _enclosing_function(method.qualname) or method_name

    if include_signature and method_name == method.name:
        method_name = method.signature

    return method_name


def clean_class_name(
    method: MethodRef | None,
    include_namespace: bool = True,
    clean_async_continuation: bool = True,
    clean_anonymous_delegate: bool = True,
) -> str | None:
    """Name of the class a developer would say the method belongs to.

    Args:
        method: Method whose declaring type is named, or None
        include_namespace: Render the full name instead of the simple name
        clean_async_continuation: Name the owner of a state machine instead of the machine
        clean_anonymous_delegate: Name the owner of a closure container instead of the container

    Returns:
        str | None: The cleaned class name, None when nothing can be resolved
    """
    if method is None or method.declaring_type is None:
        return None

    caller_type = method.declaring_type
    if (
        clean_async_continuation
        and _is_state_machine(method, caller_type)
        and caller_type.name.find(MARKER_CLOSE, 1) > 1
    ):
        caller_type = caller_type.declaring_type

    class_name = caller_type.full_name if include_namespace else caller_type.name
    if clean_anonymous_delegate:
        if CLOSURE_CONTAINER_MARKER in class_name:
            if caller_type.is_nested:
                owner = caller_type
                while owner.is_nested and CLOSURE_CONTAINER_MARKER in owner.name:
                    owner = owner.declaring_type
                class_name = owner.full_name if include_namespace else owner.name
            else:
                index = class_name.find(NESTED_CLOSURE_CONTAINER)
                if index >= 0:
                    class_name = class_name[:index]
        elif LOCALS_SEGMENT in class_name:
            class_name = class_name.replace(LOCALS_SEGMENT, "")

    if include_namespace and "." not in class_name:
        namespace = _namespace_from_module(caller_type)
        if namespace:
            class_name = f"{namespace}.{class_name}"

    return class_name
