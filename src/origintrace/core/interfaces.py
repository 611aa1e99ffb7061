"""
Abstract interfaces for origintrace components.

This module defines the capability surface the resolution engine consumes
from a semantic host. The engine is analyzer-agnostic: any parser or type
checker can drive it by implementing these interfaces in an adapter.

Design Philosophy:
    - Dependency Inversion: The engine depends on these abstractions only
    - Interface Segregation: Nodes, symbols, declarations and types are
      queried separately
    - Read-only: The engine never mutates or constructs host entities

When to implement each interface:
    - ISyntaxNode: Wrapping the syntax tree nodes of a parser
    - ISymbol / IDeclaration / IStructuralType: Exposing a binder's results
    - ISemanticHost: Answering "which symbol does this node bind to"
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .models import DeclarationKind


class ISyntaxNode(ABC):
    """A position in parsed source, owned by a semantic host.

    Nodes are compared by value: two wrappers of the same parsed node must
    be equal.
    """

    @property
    @abstractmethod
    def kind(self) -> str:
        """Grammar-specific node kind."""
        pass  # pragma: no cover

    @abstractmethod
    def is_identifier(self) -> bool:
        """True if this node is a plain name reference."""
        pass  # pragma: no cover

    @abstractmethod
    def is_property_access(self) -> bool:
        """True if this node is a dotted access (``object.property``)."""
        pass  # pragma: no cover

    @abstractmethod
    def get_parent(self) -> Optional['ISyntaxNode']:
        """Return the parent node, or None for the root."""
        pass  # pragma: no cover

    @abstractmethod
    def get_object_operand(self) -> Optional['ISyntaxNode']:
        """Return the object half of a dotted access, None for other nodes."""
        pass  # pragma: no cover

    @abstractmethod
    def get_property_name(self) -> Optional[str]:
        """Return the property name of a dotted access, None for other nodes."""
        pass  # pragma: no cover

    @abstractmethod
    def get_first_descendant_identifier(self) -> Optional['ISyntaxNode']:
        """Return the first name reference below this node in source order."""
        pass  # pragma: no cover

    @abstractmethod
    def get_source_file_path(self) -> str:
        """Return the absolute path of the file containing this node."""
        pass  # pragma: no cover

    @abstractmethod
    def get_host(self) -> 'ISemanticHost':
        """Return the semantic host that owns this node."""
        pass  # pragma: no cover


class IStructuralType(ABC):
    """Member view of a value's type, used for composite resolution."""

    @abstractmethod
    def get_property(self, name: str) -> Optional[List['IDeclaration']]:
        """Return the declarations contributing ``name``, or None.

        When several merged sources contribute the same name, the order of
        the returned list is the host's; callers take the first entry.
        """
        pass  # pragma: no cover


class IDeclaration(ABC):
    """A binding site."""

    @property
    @abstractmethod
    def kind(self) -> DeclarationKind:
        """Syntactic kind of this declaration."""
        pass  # pragma: no cover

    @property
    @abstractmethod
    def node(self) -> ISyntaxNode:
        """Node of the declaration itself; binds back to its symbol."""
        pass  # pragma: no cover

    @abstractmethod
    def get_initializer(self) -> Optional[ISyntaxNode]:
        """Return the initializer expression of a variable-style binding."""
        pass  # pragma: no cover

    @abstractmethod
    def get_structural_type(self) -> IStructuralType:
        """Return the structural type of the declared value."""
        pass  # pragma: no cover

    @abstractmethod
    def get_owning_file_location(self) -> str:
        """Return the absolute path of the file declaring this binding."""
        pass  # pragma: no cover


class ISymbol(ABC):
    """An abstract named binding.

    Symbols are compared by identity; a host must hand out the same object
    for the same binding for cycle detection to work.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name the symbol is bound under."""
        pass  # pragma: no cover

    @abstractmethod
    def is_alias(self) -> bool:
        """True if this symbol stands in for another symbol."""
        pass  # pragma: no cover

    @abstractmethod
    def get_aliased_symbol(self) -> Optional['ISymbol']:
        """Return the symbol this alias stands for, None if unresolved."""
        pass  # pragma: no cover

    @abstractmethod
    def get_declarations(self) -> Sequence[IDeclaration]:
        """Return declarations in order; the first is canonical."""
        pass  # pragma: no cover


class ISemanticHost(ABC):
    """Program-wide symbol table queried by the resolution engine.

    Example implementation:
        >>> class MyHost(ISemanticHost):
        ...     def get_binding(self, node):
        ...         return self.symbols_by_node.get(node)
    """

    @abstractmethod
    def get_binding(self, node: ISyntaxNode) -> Optional[ISymbol]:
        """Return the symbol ``node`` binds to, or None if it binds nothing.

        Declaration nodes bind to the symbol they declare.
        """
        pass  # pragma: no cover
