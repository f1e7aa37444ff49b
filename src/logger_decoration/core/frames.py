#!/usr/bin/env python3
"""Stack frame descriptors and live stack capture.

The call-site algorithm never touches interpreter frames directly. It works on
immutable descriptors (``StackFrame``, ``MethodRef``, ``TypeRef``, ``ModuleRef``)
which can be produced by :func:`capture_stack` from the running interpreter or
built by hand, e.g. from a trace recorded elsewhere.

Vocabulary used throughout the package:
- module ("assembly"): the unit a frame's code was loaded from
- type: the class that declares a method, or a module scope for plain functions
- method: the code object that was executing
"""

import inspect
import sys
from functools import lru_cache
from importlib import metadata
from types import CodeType, FrameType
from typing import Any

import attrs

# Code flags of frames that can be suspended and resumed
_RESUMABLE_FLAGS = (
    inspect.CO_GENERATOR | inspect.CO_COROUTINE | inspect.CO_ITERABLE_COROUTINE | inspect.CO_ASYNC_GENERATOR
)

LOCALS_MARKER = "<locals>"


@attrs.frozen
class ModuleRef:
    """Identity of the module a frame belongs to.

    ``display_name`` is the installed distribution that ships the module, when
    there is one. It plays the role of an assembly display name.
    """

    name: str
    display_name: str | None = None

    @property
    def prefixes(self) -> tuple[str, ...]:
        """The module name followed by each of its parent packages."""
        parts = self.name.split(".")
        return tuple(".".join(parts[:i]) for i in range(len(parts), 0, -1))


@attrs.frozen
class TypeRef:
    """Declaring type of a method.

    ``cls`` holds the live class when the descriptor was captured from the
    interpreter; it is what subtype checks run against. Module-level code gets
    a module scope type (``is_module_scope``) named after its module.
    """

    name: str
    namespace: str = ""
    declaring_type: "TypeRef | None" = None
    module: ModuleRef | None = None
    cls: type | None = None
    is_module_scope: bool = False
    nested_separator: str = "."

    @property
    def is_nested(self) -> bool:
        return self.declaring_type is not None

    @property
    def full_name(self) -> str:
        if self.declaring_type is not None:
            return f"{self.declaring_type.full_name}{self.nested_separator}{self.name}"
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    def is_subtype_of(self, other: type | None) -> bool:
        """True when this type is ``other`` or derives from it."""
        if other is None or self.cls is None:
            return False
        try:
            return self.cls is other or issubclass(self.cls, other)
        except TypeError:
            return False


@attrs.frozen
class MethodRef:
    """A resolved method: its name, qualified name and declaring type."""

    name: str
    qualname: str = ""
    parameters: tuple[str, ...] = ()
    declaring_type: TypeRef | None = None
    module: ModuleRef | None = None

    @property
    def signature(self) -> str:
        return f"{self.name}({', '.join(self.parameters)})"

    def __str__(self) -> str:
        return self.signature


@attrs.frozen
class StackFrame:
    """Immutable snapshot of one element of a captured trace."""

    method: MethodRef | None
    file_name: str = ""
    line_number: int = 0
    is_resumable: bool = False

    @property
    def declaring_type(self) -> TypeRef | None:
        return self.method.declaring_type if self.method is not None else None

    @property
    def module(self) -> ModuleRef | None:
        if self.method is None:
            return None
        if self.method.declaring_type is not None and self.method.declaring_type.module is not None:
            return self.method.declaring_type.module
        return self.method.module


@lru_cache(maxsize=1)
def _distributions_by_package() -> dict[str, list[str]]:
    return dict(metadata.packages_distributions())


@lru_cache(maxsize=512)
def distribution_for(module_name: str) -> str | None:
    """Name of the installed distribution providing ``module_name``, if any."""
    top_level = module_name.split(".", 1)[0]
    distributions = _distributions_by_package().get(top_level)
    return distributions[0] if distributions else None


def _module_scope_type(module: ModuleRef) -> TypeRef:
    namespace, _, name = module.name.rpartition(".")
    return TypeRef(name=name, namespace=namespace, module=module, is_module_scope=True)


def _type_chain(cls: type, module: ModuleRef) -> TypeRef:
    """Build a TypeRef for ``cls`` including the classes it is nested in."""
    qualname = getattr(cls, "__qualname__", cls.__name__)
    owners = qualname.split(".")[:-1]
    declaring = None
    if owners and LOCALS_MARKER not in owners:
        scope: Any = sys.modules.get(module.name)
        parents = []
        for part in owners:
            scope = getattr(scope, part, None)
            if not isinstance(scope, type):
                parents = []
                break
            parents.append(scope)
        for parent in parents:
            declaring = TypeRef(
                name=parent.__name__,
                namespace=module.name if declaring is None else "",
                declaring_type=declaring,
                module=module,
                cls=parent,
            )
    if declaring is None and owners:
        # Local classes keep their enclosing function path in the qualified name
        return TypeRef(name=qualname, namespace=module.name, module=module, cls=cls)
    return TypeRef(
        name=cls.__name__,
        namespace=module.name if declaring is None else "",
        declaring_type=declaring,
        module=module,
        cls=cls,
    )


def _resolve_from_globals(qualname: str, f_globals: dict[str, Any]) -> type | None:
    """Walk a qualified name through module globals, returning the innermost class."""
    found = None
    scope: Any = None
    for index, part in enumerate(qualname.split(".")[:-1]):
        if part == LOCALS_MARKER:
            break
        scope = f_globals.get(part) if index == 0 else getattr(scope, part, None)
        if not isinstance(scope, type):
            break
        found = scope
    return found


def _resolve_from_locals(qualname: str, f_locals: dict[str, Any]) -> type | None:
    """Find the declaring class through ``self`` or ``cls`` when globals do not reach it."""
    owner_qualname = qualname.rpartition(".")[0]
    if not owner_qualname:
        return None
    candidates = []
    if (zelf := f_locals.get("self")) is not None:
        candidates.append(type(zelf))
    if isinstance(cls_obj := f_locals.get("cls"), type):
        candidates.append(cls_obj)
    for candidate in candidates:
        for klass in getattr(candidate, "__mro__", ()):
            if getattr(klass, "__qualname__", None) == owner_qualname:
                return klass
    return None


def _parameters(code: CodeType) -> tuple[str, ...]:
    count = code.co_argcount + code.co_kwonlyargcount
    return tuple(code.co_varnames[:count])


def frame_from_raw(raw_frame: FrameType) -> StackFrame:
    """Describe one live interpreter frame.

    Robust to interpreter teardown: missing attributes leave the matching
    descriptor fields empty, which the classifier treats as hidden.
    """
    f_code: CodeType | None = getattr(raw_frame, "f_code", None)
    if f_code is None:
        return StackFrame(method=None)

    f_globals: dict[str, Any] = getattr(raw_frame, "f_globals", None) or {}
    file_name = f_code.co_filename
    line_number = getattr(raw_frame, "f_lineno", None) or 0
    is_resumable = bool(f_code.co_flags & _RESUMABLE_FLAGS)

    module_name = f_globals.get("__name__")
    if not isinstance(module_name, str):
        method = MethodRef(name=f_code.co_name, qualname=f_code.co_qualname, parameters=_parameters(f_code))
        return StackFrame(method=method, file_name=file_name, line_number=line_number, is_resumable=is_resumable)

    module = ModuleRef(name=module_name, display_name=distribution_for(module_name))
    qualname = f_code.co_qualname
    cls = _resolve_from_globals(qualname, f_globals)
    owner = qualname.rpartition(".")[0]
    if owner and not owner.endswith(LOCALS_MARKER) and getattr(cls, "__qualname__", None) != owner:
        # Methods of local classes: globals only reach the enclosing class, if any
        f_locals: dict[str, Any] = getattr(raw_frame, "f_locals", None) or {}
        cls = _resolve_from_locals(qualname, f_locals) or cls

    declaring_type = _type_chain(cls, module) if cls is not None else _module_scope_type(module)
    method = MethodRef(
        name=f_code.co_name,
        qualname=qualname,
        parameters=_parameters(f_code),
        declaring_type=declaring_type,
        module=module,
    )
    return StackFrame(method=method, file_name=file_name, line_number=line_number, is_resumable=is_resumable)


def capture_stack(skip: int = 0, limit: int | None = None) -> tuple[StackFrame, ...]:
    """Capture the current stack, innermost frame first.

    Index 0 is the frame that called ``capture_stack`` (plus ``skip``).

    Args:
        skip: Number of additional innermost frames to leave out
        limit: Maximum number of frames to capture

    Returns:
        tuple: StackFrame descriptors ordered innermost-first
    """
    try:
        raw_frame: FrameType | None = sys._getframe(1 + skip)
    except ValueError:
        return ()

    frames = []
    try:
        while raw_frame is not None and (limit is None or len(frames) < limit):
            frames.append(frame_from_raw(raw_frame))
            raw_frame = raw_frame.f_back
    finally:
        # Break reference cycle: frame -> f_locals -> frame
        del raw_frame
    return tuple(frames)
