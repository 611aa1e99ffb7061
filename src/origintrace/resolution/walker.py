"""
Symbol origin walker.

The walker repeatedly unwinds one indirection at a time until it reaches a
symbol that is an original definition:

    1. Composite property: the current node is ``obj`` in ``obj.prop`` and
       ``prop`` is contributed to ``obj`` by a merge or spread.
    2. Alias: imports, export specifiers, ``export default name``.
    3. Reassignment: ``const Alias = Foo``.

Rules are tried in that order on every step. Iteration is bounded by a step
budget shared by every walk of one trace, including the nested walks started
by composite property resolution, so cyclic re-export graphs and
self-referencing merges always terminate.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from origintrace.core.interfaces import ISemanticHost, ISymbol, ISyntaxNode
from origintrace.resolution.composite import resolve_composite_property
from origintrace.resolution.target import is_property_access_object

logger = logging.getLogger(__name__)

MAX_TRACE_STEPS = 30


@dataclass
class TraceState:
    """
    Step budget for one trace.

    Attributes:
        max_steps: Total number of walker steps allowed for the trace
        steps: Steps consumed so far
    """
    max_steps: int = MAX_TRACE_STEPS
    steps: int = 0

    @property
    def exhausted(self) -> bool:
        return self.steps >= self.max_steps

    def consume_step(self) -> bool:
        """
        Consume one step of the budget.

        Returns:
            False if the budget was already exhausted, True otherwise
        """
        if self.exhausted:
            return False
        self.steps += 1
        return True


class SymbolOriginWalker:
    """
    Follows a node's binding to the symbol of its original definition.

    Each call to ``walk`` keeps its own visited set: a symbol is expanded at
    most once per walk, and meeting it again ends the walk with the symbol
    reached just before the cycle closed.

    Thread Safety:
        Not thread-safe. Create one walker per trace.
    """

    def __init__(self, host: ISemanticHost, state: Optional[TraceState] = None):
        self.host = host
        self.state = state if state is not None else TraceState()

    def walk(self, node: ISyntaxNode) -> Optional[ISymbol]:
        """
        Walk from node to its terminal symbol.

        Args:
            node: Target node, already normalized by the target selector

        Returns:
            The terminal symbol, the last symbol reached before a cycle or
            the budget ran out, or None if node binds nothing
        """
        visited: Dict[int, ISymbol] = {}
        current: Optional[ISyntaxNode] = node
        symbol = self.host.get_binding(node)
        last_good: Optional[ISymbol] = None

        while self.state.consume_step():
            if symbol is None or id(symbol) in visited:
                return last_good
            visited[id(symbol)] = symbol
            last_good = symbol

            step = self._next_step(current, symbol)
            if step is None:
                return symbol
            current, symbol = step

        logger.debug(
            f"Trace budget of {self.state.max_steps} steps exhausted "
            f"at '{last_good.name if last_good else None}'"
        )
        return last_good

    def _next_step(
        self, current: Optional[ISyntaxNode], symbol: ISymbol
    ) -> Optional[Tuple[Optional[ISyntaxNode], Optional[ISymbol]]]:
        """Apply the first matching rule; None means symbol is terminal."""
        if current is not None and is_property_access_object(current):
            property_name = current.get_parent().get_property_name()
            if property_name:
                contributor = resolve_composite_property(symbol, property_name, self)
                if contributor is not None and contributor is not symbol:
                    logger.debug(f"'{symbol.name}.{property_name}' contributed by '{contributor.name}'")
                    return _primary_node(contributor), contributor

        if symbol.is_alias():
            aliased = symbol.get_aliased_symbol()
            if aliased is None:
                logger.debug(f"Alias '{symbol.name}' does not resolve")
                return current, None
            return _primary_node(aliased), aliased

        declarations = symbol.get_declarations()
        if declarations and declarations[0].kind.is_variable_style:
            initializer = declarations[0].get_initializer()
            if initializer is not None:
                assigned = self.host.get_binding(initializer)
                if assigned is not None:
                    return initializer, assigned

        return None


def _primary_node(symbol: ISymbol) -> Optional[ISyntaxNode]:
    declarations = symbol.get_declarations()
    return declarations[0].node if declarations else None
