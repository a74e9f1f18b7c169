"""Request resolution, inference, and handler discovery."""

from dpgen.analysis.context import GenerationContext, WellKnownTypes, build_context
from dpgen.analysis.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSink,
    MismatchedIdentifiers,
    NotAStaticReadonlyField,
    UnexpectedFieldType,
)
from dpgen.analysis.handlers import ChangeHandlerKind, DiscoveredHandlers, discover_handlers
from dpgen.analysis.inference import apply_inference, infer
from dpgen.analysis.model import CallShape, GenerationRequest, InferenceResult
from dpgen.analysis.resolver import resolve_requests

__all__ = [
    "CallShape",
    "ChangeHandlerKind",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSink",
    "DiscoveredHandlers",
    "GenerationContext",
    "GenerationRequest",
    "InferenceResult",
    "MismatchedIdentifiers",
    "NotAStaticReadonlyField",
    "UnexpectedFieldType",
    "WellKnownTypes",
    "apply_inference",
    "build_context",
    "discover_handlers",
    "infer",
    "resolve_requests",
]
