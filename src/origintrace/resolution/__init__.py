"""
Origin-resolution engine.

Analyzer-agnostic: everything here talks to the program model through the
interfaces in ``origintrace.core.interfaces``.
"""

from .target import select_target_node
from .walker import MAX_TRACE_STEPS, SymbolOriginWalker, TraceState
from .composite import resolve_composite_property
from .paths import format_origin_path
from .tracer import OriginTracer, trace_origin

__all__ = [
    "select_target_node",
    "MAX_TRACE_STEPS",
    "SymbolOriginWalker",
    "TraceState",
    "resolve_composite_property",
    "format_origin_path",
    "OriginTracer",
    "trace_origin",
]
