"""Call-site resolution: frame descriptors, classification, name cleaning and resolution."""

from logger_decoration.core.call_site import CallerInfo, CallSiteInformation
from logger_decoration.core.frame_classifier import FrameClassifier
from logger_decoration.core.frames import MethodRef, ModuleRef, StackFrame, TypeRef, capture_stack
from logger_decoration.core.hidden_registry import HiddenSetRegistry
from logger_decoration.core.name_cleaner import clean_class_name, clean_method_name
from logger_decoration.core.stack_resolver import ResolvedIndices, StackResolver

__all__ = [
    "CallSiteInformation",
    "CallerInfo",
    "FrameClassifier",
    "HiddenSetRegistry",
    "MethodRef",
    "ModuleRef",
    "ResolvedIndices",
    "StackFrame",
    "StackResolver",
    "TypeRef",
    "capture_stack",
    "clean_class_name",
    "clean_method_name",
]
