"""
Structural type evaluation.

Computes the member view of a value that composite property resolution
needs: which declarations contribute each property name. Only the shapes
that matter for origin tracing are modelled:

    - module namespaces (exports, including star re-exports)
    - object literals (pairs, shorthand, methods, spreads; later wins)
    - ``Object.assign(...)`` (intersection in argument order)
    - ``Object.freeze(x)`` (same as ``x``)
    - class static members, enum members, namespace exports
    - aliases and variable initializers, followed to their values

Everything else evaluates to the empty type.
"""

import logging
from typing import Dict, Optional, Set, Tuple, TYPE_CHECKING

from origintrace.core.models import DeclarationKind
from origintrace.host.nodes import SyntaxNode
from origintrace.host.symbols import EMPTY_TYPE, HostDeclaration, HostSymbol, StructuralType

if TYPE_CHECKING:
    from origintrace.host.binder import Binder

logger = logging.getLogger(__name__)

# Nested declaration evaluations allowed before a value is treated as opaque
MAX_TYPE_DEPTH = 50


def _members(symbols: Dict[str, HostSymbol]) -> StructuralType:
    return StructuralType({
        name: symbol.get_declarations()[:1]
        for name, symbol in symbols.items()
        if symbol.get_declarations()
    })


class TypeEvaluator:
    """
    Evaluates structural types over a binder's symbols.

    Evaluation is cycle-safe: a declaration already being evaluated further
    up the stack evaluates to the empty type. Evaluation is also depth-bounded:
    past MAX_TYPE_DEPTH nested declarations the value evaluates to the empty
    type, so long spread or alias chains degrade to a composite miss.
    """

    def __init__(self, binder: 'Binder'):
        self.binder = binder
        self._active: Set[Tuple[str, tuple]] = set()

    def type_of_symbol(self, symbol: Optional[HostSymbol]) -> StructuralType:
        if symbol is None:
            return EMPTY_TYPE
        if symbol.is_alias():
            return self.type_of_symbol(symbol.get_aliased_symbol())
        return StructuralType.spread([self.type_of_declaration(d) for d in symbol.get_declarations()])

    def type_of_declaration(self, declaration: HostDeclaration) -> StructuralType:
        key = (declaration.get_owning_file_location(), declaration.node.key)
        if key in self._active:
            logger.debug(f"Cyclic type reference through {declaration}")
            return EMPTY_TYPE
        if len(self._active) >= MAX_TYPE_DEPTH:
            logger.debug(f"Type depth limit of {MAX_TYPE_DEPTH} reached at {declaration}")
            return EMPTY_TYPE
        self._active.add(key)
        try:
            return self._evaluate_declaration(declaration)
        finally:
            self._active.discard(key)

    def _evaluate_declaration(self, declaration: HostDeclaration) -> StructuralType:
        kind = declaration.kind
        node = declaration.node

        if kind is DeclarationKind.SOURCE_FILE:
            return _members(self.binder.get_module_exports(node.source_file))
        if kind is DeclarationKind.CLASS:
            return _members(self.binder.class_static_members(node))
        if kind is DeclarationKind.ENUM:
            return _members(self.binder.enum_members(node))
        if kind is DeclarationKind.NAMESPACE:
            return _members(self.binder.namespace_exports(node))
        if kind is DeclarationKind.PROPERTY and node.kind == 'shorthand_property_identifier':
            return self.type_of_symbol(self.binder.lookup_name(node, node.text))
        if declaration.get_initializer() is not None:
            return self.type_of_expression(declaration.get_initializer())

        symbol = self.binder.symbol_for_declaration_node(node)
        if symbol is not None and symbol.is_alias():
            return self.type_of_symbol(symbol.get_aliased_symbol())
        return EMPTY_TYPE

    def type_of_expression(self, node: Optional[SyntaxNode]) -> StructuralType:
        """
        Evaluate the structural type of an expression.

        Args:
            node: Expression node

        Returns:
            StructuralType; EMPTY_TYPE for shapes that are not modelled
        """
        if node is None:
            return EMPTY_TYPE
        kind = node.kind

        if kind in node.config['wrapper_expression_types']:
            return self.type_of_expression(self.binder.unwrap_expression(node))
        if kind == 'object':
            return self._object_type(node)
        if kind == 'call_expression':
            return self._call_type(node)
        if kind == 'class':
            return _members(self.binder.class_static_members(node))
        if node.is_identifier() or node.is_property_access():
            return self.type_of_symbol(self.binder.get_binding(node))
        return EMPTY_TYPE

    def _object_type(self, node: SyntaxNode) -> StructuralType:
        parts = []
        for child in node.get_named_children():
            if child.kind in ('pair', 'shorthand_property_identifier', 'method_definition'):
                symbol = self.binder.symbol_for_declaration_node(child)
                if symbol is not None:
                    parts.append(StructuralType({symbol.name: symbol.get_declarations()}))
            elif child.kind == 'spread_element':
                inner = child.get_named_children()
                if inner:
                    parts.append(self.type_of_expression(inner[0]))
        return StructuralType.spread(parts)

    def _call_type(self, node: SyntaxNode) -> StructuralType:
        callee = node.get_child_by_field('function')
        arguments_node = node.get_child_by_field('arguments')
        if callee is None or arguments_node is None or not callee.is_property_access():
            return EMPTY_TYPE

        receiver = callee.get_object_operand()
        if receiver is None or receiver.text != 'Object':
            return EMPTY_TYPE

        arguments = [a for a in arguments_node.get_named_children() if a.kind != 'comment']
        method = callee.get_property_name()
        if method == 'assign':
            return StructuralType.intersection([self.type_of_expression(a) for a in arguments])
        if method == 'freeze' and arguments:
            return self.type_of_expression(arguments[0])
        return EMPTY_TYPE
