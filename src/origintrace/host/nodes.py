"""
Syntax node wrappers over tree-sitter trees.

tree-sitter hands out a fresh Python object every time a node is visited,
so wrappers compare by value: two SyntaxNode objects are equal when they
wrap the same node of the same file (same byte range and node type).
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, TYPE_CHECKING

from origintrace.core.interfaces import ISyntaxNode
from origintrace.core.models import ParsedSource
from origintrace.parsers.language_configs import get_config_for_language

if TYPE_CHECKING:
    from origintrace.host.project import Project


class SyntaxNode(ISyntaxNode):
    """A tree-sitter node bound to the source file it belongs to."""

    __slots__ = ('_node', '_source_file')

    def __init__(self, ts_node: Any, source_file: 'SourceFile'):
        self._node = ts_node
        self._source_file = source_file

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def key(self):
        """Position key, unique per node within one file."""
        return (self._node.start_byte, self._node.end_byte, self._node.type)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        return self._source_file is other._source_file and self.key == other.key

    def __hash__(self) -> int:
        return hash((self._source_file.path, self.key))

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind!r}, {self.text[:40]!r}, {self._source_file.path}:{self.line})"

    # ------------------------------------------------------------------
    # Basic accessors
    # ------------------------------------------------------------------

    @property
    def kind(self) -> str:
        return self._node.type

    @property
    def text(self) -> str:
        return self._source_file.slice(self._node.start_byte, self._node.end_byte)

    @property
    def line(self) -> int:
        """1-indexed start line."""
        return self._node.start_point[0] + 1

    @property
    def column(self) -> int:
        """1-indexed start column (in bytes)."""
        return self._node.start_point[1] + 1

    @property
    def source_file(self) -> 'SourceFile':
        return self._source_file

    @property
    def config(self) -> Dict[str, Any]:
        return self._source_file.config

    def get_parent(self) -> Optional['SyntaxNode']:
        parent = self._node.parent
        return SyntaxNode(parent, self._source_file) if parent is not None else None

    def get_children(self) -> List['SyntaxNode']:
        return [SyntaxNode(child, self._source_file) for child in self._node.children]

    def get_named_children(self) -> List['SyntaxNode']:
        return [SyntaxNode(child, self._source_file) for child in self._node.named_children]

    def get_child_by_field(self, field_name: str) -> Optional['SyntaxNode']:
        child = self._node.child_by_field_name(field_name)
        return SyntaxNode(child, self._source_file) if child is not None else None

    def has_child_of_kind(self, kind: str) -> bool:
        """True if a direct child (named or anonymous) has the given type."""
        return any(child.type == kind for child in self._node.children)

    def get_first_child_of_kind(self, *kinds: str) -> Optional['SyntaxNode']:
        for child in self._node.children:
            if child.type in kinds:
                return SyntaxNode(child, self._source_file)
        return None

    def iter_descendants(self) -> Iterator['SyntaxNode']:
        """Yield all descendants in source order (pre-order), excluding self."""
        stack = list(reversed(self._node.children))
        while stack:
            current = stack.pop()
            yield SyntaxNode(current, self._source_file)
            stack.extend(reversed(current.children))

    def get_first_descendant(self, predicate: Callable[['SyntaxNode'], bool]) -> Optional['SyntaxNode']:
        for descendant in self.iter_descendants():
            if predicate(descendant):
                return descendant
        return None

    def get_first_descendant_by_kind(self, kind: str) -> Optional['SyntaxNode']:
        return self.get_first_descendant(lambda n: n.kind == kind)

    def get_descendants_of_kind(self, kind: str) -> List['SyntaxNode']:
        return [n for n in self.iter_descendants() if n.kind == kind]

    # ------------------------------------------------------------------
    # ISyntaxNode
    # ------------------------------------------------------------------

    def is_identifier(self) -> bool:
        return self.kind in self.config['identifier_types']

    def is_property_access(self) -> bool:
        return self.kind in self.config['property_access_types']

    def get_object_operand(self) -> Optional['SyntaxNode']:
        if not self.is_property_access():
            return None
        return self.get_child_by_field('object')

    def get_property_name(self) -> Optional[str]:
        if not self.is_property_access():
            return None
        prop = self.get_child_by_field('property')
        return prop.text if prop is not None else None

    def get_first_descendant_identifier(self) -> Optional['SyntaxNode']:
        return self.get_first_descendant(lambda n: n.is_identifier())

    def get_source_file_path(self) -> str:
        return self._source_file.path

    def get_host(self) -> 'Project':
        return self._source_file.project


class SourceFile:
    """
    A parsed file registered in a Project.

    Attributes:
        path: Canonical absolute POSIX path
        language: Grammar name
        project: Owning project
    """

    def __init__(self, parsed: ParsedSource, project: 'Project'):
        self._parsed = parsed
        self.path = parsed.filepath
        self.language = parsed.language
        self.project = project
        self.config = get_config_for_language(parsed.language)
        self.root = SyntaxNode(parsed.tree.root_node, self)

    def __repr__(self) -> str:
        return f"SourceFile({self.path!r})"

    def get_file_path(self) -> str:
        return self.path

    def get_full_text(self) -> str:
        return self._parsed.content.decode('utf-8', errors='replace')

    def slice(self, start_byte: int, end_byte: int) -> str:
        return self._parsed.content[start_byte:end_byte].decode('utf-8', errors='replace')

    def get_first_descendant(self, predicate: Callable[[SyntaxNode], bool]) -> Optional[SyntaxNode]:
        return self.root.get_first_descendant(predicate)

    def get_first_descendant_by_kind(self, kind: str) -> Optional[SyntaxNode]:
        return self.root.get_first_descendant_by_kind(kind)

    def get_descendants_of_kind(self, kind: str) -> List[SyntaxNode]:
        return self.root.get_descendants_of_kind(kind)

    def find_identifier(self, text: str) -> Optional[SyntaxNode]:
        """Return the first identifier spelled ``text`` in source order."""
        return self.root.get_first_descendant(lambda n: n.kind == 'identifier' and n.text == text)

    def find_property_access(self) -> Optional[SyntaxNode]:
        """Return the first dotted access expression in source order."""
        return self.root.get_first_descendant(lambda n: n.is_property_access())

    def get_node_at(self, line: int, column: int) -> Optional[SyntaxNode]:
        """
        Return the smallest node covering a position.

        Args:
            line: 1-indexed line
            column: 1-indexed column (in bytes)

        Returns:
            The innermost node at the position, or None outside the file
        """
        point = (line - 1, column - 1)
        ts_node = self.root._node.descendant_for_point_range(point, point)
        return SyntaxNode(ts_node, self) if ts_node is not None else None
