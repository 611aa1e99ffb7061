"""
Symbols, declarations and structural types produced by the binder.

Symbols are identity objects: the binder creates exactly one HostSymbol per
binding and caches it, so the resolution engine can detect cycles by
identity.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TYPE_CHECKING

from origintrace.core.interfaces import IDeclaration, IStructuralType, ISymbol
from origintrace.core.models import DeclarationKind

if TYPE_CHECKING:
    from origintrace.host.nodes import SyntaxNode

logger = logging.getLogger(__name__)

_UNRESOLVED = object()


class StructuralType(IStructuralType):
    """
    Ordered mapping from member name to contributing declarations.

    Attributes:
        members: Member name -> declarations, in contribution order
    """

    def __init__(self, members: Optional[Dict[str, List['HostDeclaration']]] = None):
        self.members: Dict[str, List['HostDeclaration']] = members if members is not None else {}

    def __repr__(self) -> str:
        return f"StructuralType({sorted(self.members)})"

    def get_property(self, name: str) -> Optional[List['HostDeclaration']]:
        declarations = self.members.get(name)
        return list(declarations) if declarations else None

    def get_property_names(self) -> List[str]:
        return list(self.members)

    @classmethod
    def spread(cls, types: Iterable['StructuralType']) -> 'StructuralType':
        """Object spread: a later member replaces an earlier one."""
        members: Dict[str, List['HostDeclaration']] = {}
        for structural_type in types:
            for name, declarations in structural_type.members.items():
                members[name] = list(declarations)
        return cls(members)

    @classmethod
    def intersection(cls, types: Iterable['StructuralType']) -> 'StructuralType':
        """Intersection: every contributor is kept, in argument order."""
        members: Dict[str, List['HostDeclaration']] = {}
        for structural_type in types:
            for name, declarations in structural_type.members.items():
                members.setdefault(name, []).extend(declarations)
        return cls(members)


class HostDeclaration(IDeclaration):
    """
    A binding site in a parsed source file.

    Attributes:
        name: Declared name
    """

    def __init__(
        self,
        kind: DeclarationKind,
        node: 'SyntaxNode',
        name: str,
        initializer: Optional['SyntaxNode'] = None,
    ):
        self._kind = kind
        self._node = node
        self.name = name
        self._initializer = initializer

    def __repr__(self) -> str:
        return f"HostDeclaration({self._kind.value}, {self.name!r}, {self.get_owning_file_location()}:{self._node.line})"

    @property
    def kind(self) -> DeclarationKind:
        return self._kind

    @property
    def node(self) -> 'SyntaxNode':
        return self._node

    @property
    def line(self) -> int:
        return self._node.line

    def get_initializer(self) -> Optional['SyntaxNode']:
        return self._initializer

    def get_structural_type(self) -> StructuralType:
        return self._node.get_host().types.type_of_declaration(self)

    def get_owning_file_location(self) -> str:
        return self._node.get_source_file_path()


class HostSymbol(ISymbol):
    """
    A named binding.

    Alias symbols carry a target resolver that yields the next symbol in
    the alias chain; it is evaluated lazily because the target module may
    not have been bound yet.
    """

    def __init__(
        self,
        name: str,
        declarations: Optional[Sequence[HostDeclaration]] = None,
        target_resolver: Optional[Callable[[], Optional['HostSymbol']]] = None,
    ):
        self._name = name
        self._declarations: List[HostDeclaration] = list(declarations or [])
        self._target_resolver = target_resolver
        self._target = _UNRESOLVED

    def __repr__(self) -> str:
        flag = "alias " if self.is_alias() else ""
        return f"HostSymbol({flag}{self._name!r}, {len(self._declarations)} declarations)"

    @property
    def name(self) -> str:
        return self._name

    def add_declaration(self, declaration: HostDeclaration) -> None:
        """Merge another declaration (overloads, interface merging)."""
        self._declarations.append(declaration)

    def is_alias(self) -> bool:
        return self._target_resolver is not None

    def get_immediate_target(self) -> Optional['HostSymbol']:
        """Return the next symbol in the alias chain (one hop)."""
        if self._target_resolver is None:
            return None
        if self._target is _UNRESOLVED:
            self._target = self._target_resolver()
        return self._target

    def get_aliased_symbol(self) -> Optional['HostSymbol']:
        """
        Follow the alias chain to the first non-alias symbol.

        Returns:
            The aliased symbol; UNKNOWN_SYMBOL if the chain is broken or
            circular; None if this symbol is not an alias
        """
        if not self.is_alias():
            return None
        seen = {id(self)}
        target = self.get_immediate_target()
        while target is not None and target.is_alias():
            if id(target) in seen:
                logger.debug(f"Circular alias chain through '{self._name}'")
                return UNKNOWN_SYMBOL
            seen.add(id(target))
            target = target.get_immediate_target()
        if target is None:
            logger.debug(f"Alias '{self._name}' does not resolve")
            return UNKNOWN_SYMBOL
        return target

    def get_declarations(self) -> List[HostDeclaration]:
        return list(self._declarations)


EMPTY_TYPE = StructuralType()

# Target of unresolvable aliases (missing module, missing export, alias cycle)
UNKNOWN_SYMBOL = HostSymbol("unknown")
