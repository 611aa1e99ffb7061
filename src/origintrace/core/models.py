"""
Core data models for origintrace.

This module defines the value types shared by the resolution engine and the
semantic host: declaration kinds, trace options, trace results, and the
outcome of parsing a single source file.

All models are designed for:
- Immutability (frozen dataclasses where appropriate)
- Type safety (comprehensive type hints)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from origintrace.core.interfaces import IDeclaration


class DeclarationKind(Enum):
    """
    Syntactic kind of a binding site.

    Import and export kinds usually declare aliases; whether a symbol is an
    alias is reported by the host. VARIABLE is the only variable-style kind,
    i.e. the only kind whose initializer is followed as a reassignment.
    """
    IMPORT_SPECIFIER = "import_specifier"
    DEFAULT_IMPORT = "default_import"
    NAMESPACE_IMPORT = "namespace_import"
    EXPORT_SPECIFIER = "export_specifier"
    NAMESPACE_EXPORT = "namespace_export"
    EXPORT_ASSIGNMENT = "export_assignment"
    VARIABLE = "variable"
    PARAMETER = "parameter"
    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    NAMESPACE = "namespace"
    PROPERTY = "property"
    METHOD = "method"
    SOURCE_FILE = "source_file"

    def __str__(self) -> str:
        """String representation for serialization."""
        return self.value

    @property
    def is_variable_style(self) -> bool:
        """True for kinds whose initializer is a plain reassignment."""
        return self is DeclarationKind.VARIABLE


@dataclass(frozen=True)
class TraceOriginOptions:
    """
    Options for a single ``trace_origin`` call.

    Attributes:
        relative: If True, the origin is reported relative to the directory
            of the file containing the reference node. If False, the origin
            is reported as an absolute path.
    """
    relative: bool = False

    @classmethod
    def from_value(
        cls, value: Union['TraceOriginOptions', Mapping[str, Any], None]
    ) -> 'TraceOriginOptions':
        """
        Coerce None, a mapping, or an options instance into options.

        Args:
            value: Options as passed by a caller

        Returns:
            TraceOriginOptions instance

        Raises:
            TypeError: If value is of an unsupported type
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(relative=bool(value.get('relative', False)))
        raise TypeError(f"Unsupported trace options: {type(value).__name__}")


@dataclass(frozen=True)
class OriginResult:
    """
    Outcome of one trace.

    Either both fields are set (the origin was found) or both are None.

    Attributes:
        path: Formatted origin path, absolute or relative
        declaration: The terminal declaration the path was taken from
    """
    path: Optional[str] = None
    declaration: Optional['IDeclaration'] = None

    @property
    def found(self) -> bool:
        """Check if an origin was determined."""
        return self.path is not None


NOT_FOUND = OriginResult()


@dataclass(frozen=True)
class ParsedSource:
    """
    Represents a single parsed source file.

    Attributes:
        filepath: Canonical absolute path of the source file
        language: Grammar name used for parsing (typescript, tsx, javascript)
        content: Raw file content
        tree: tree-sitter tree, None if parsing failed
        parse_time: Time taken to parse this file (seconds)
        error: None if parsing succeeded, error message if failed
    """
    filepath: str
    language: str
    content: bytes = b""
    tree: Any = None
    parse_time: float = 0.0
    error: Optional[str] = None

    def __post_init__(self):
        """
        Validate parsed source data.

        Raises:
            ValueError: If validation fails
        """
        if not self.filepath:
            raise ValueError("ParsedSource filepath cannot be empty")
        if not self.language:
            raise ValueError("ParsedSource language cannot be empty")
        if self.parse_time < 0:
            raise ValueError(f"parse_time must be >= 0, got {self.parse_time}")

    @property
    def is_successful(self) -> bool:
        """
        Check if the file was parsed successfully.

        Returns:
            True if no error occurred, False otherwise
        """
        return self.error is None and self.tree is not None
