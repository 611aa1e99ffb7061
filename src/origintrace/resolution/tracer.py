"""
Origin tracer - resolves a reference to the file of its original definition.

This module composes the resolution pipeline:

    target selection -> symbol origin walk -> primary declaration -> path

Every failure along the way (no target node, unbound reference, no
declarations, an exception raised by the host) is logged at DEBUG level and
reported to the caller as an absent result. Nothing raised inside the
pipeline crosses ``trace_origin``.

Usage:
    >>> from origintrace import Project, trace_origin
    >>> project = Project()
    >>> project.create_source_file("/src/a.ts", "export const Foo = 1;")
    >>> index = project.create_source_file("/src/index.ts", "import { Foo } from './a'; Foo;")
    >>> trace_origin(index.find_identifier("Foo"))
    '/src/a.ts'
"""

import logging
from typing import Any, Mapping, Optional, Union

from origintrace.core.interfaces import ISemanticHost, ISyntaxNode
from origintrace.core.models import NOT_FOUND, OriginResult, TraceOriginOptions
from origintrace.resolution.paths import format_origin_path
from origintrace.resolution.target import select_target_node
from origintrace.resolution.walker import MAX_TRACE_STEPS, SymbolOriginWalker, TraceState

logger = logging.getLogger(__name__)

OptionsLike = Union[TraceOriginOptions, Mapping[str, Any], None]


class OriginTracer:
    """
    Traces references against one semantic host.

    Attributes:
        host: Semantic host answering binding queries
        max_steps: Step budget per trace, shared by nested composite walks
    """

    def __init__(self, host: ISemanticHost, max_steps: int = MAX_TRACE_STEPS):
        self.host = host
        self.max_steps = max_steps

    def resolve(self, node: Optional[ISyntaxNode], options: OptionsLike = None) -> OriginResult:
        """
        Resolve node to its origin.

        Args:
            node: Any reference node owned by this tracer's host
            options: TraceOriginOptions, a mapping with a 'relative' key, or None

        Returns:
            OriginResult; ``found`` is False when no origin can be determined
        """
        try:
            return self._resolve(node, TraceOriginOptions.from_value(options))
        except Exception as e:
            logger.debug(f"Host fault while tracing origin: {e}", exc_info=True)
            return NOT_FOUND

    def _resolve(self, node: Optional[ISyntaxNode], options: TraceOriginOptions) -> OriginResult:
        target = select_target_node(node)
        if target is None:
            logger.debug("No target node to resolve")
            return NOT_FOUND

        walker = SymbolOriginWalker(self.host, TraceState(max_steps=self.max_steps))
        symbol = walker.walk(target)
        if symbol is None:
            logger.debug(f"Unbound reference: {target.kind}")
            return NOT_FOUND

        declarations = symbol.get_declarations()
        if not declarations:
            logger.debug(f"Symbol '{symbol.name}' has no declarations")
            return NOT_FOUND

        declaration = declarations[0]
        path = format_origin_path(
            declaration.get_owning_file_location(),
            target.get_source_file_path(),
            relative=options.relative,
        )
        logger.debug(f"Traced '{symbol.name}' to {path} in {walker.state.steps} steps")
        return OriginResult(path=path, declaration=declaration)


def trace_origin(node: Optional[ISyntaxNode], options: OptionsLike = None) -> Optional[str]:
    """
    Return the file path of the original declaration node resolves to.

    Args:
        node: Any node that ultimately resolves to a symbol
        options: ``relative=True`` yields a path relative to the directory of
            the file containing node; otherwise the path is absolute

    Returns:
        Origin path, or None if no origin can be determined
    """
    if node is None:
        return None
    try:
        host = node.get_host()
    except Exception as e:
        logger.debug(f"Node has no semantic host: {e}")
        return None
    return OriginTracer(host).resolve(node, options).path
