"""
Core data models and interfaces for origintrace.

This module provides the value types and the semantic-host capability
interfaces shared by the resolution engine and host adapters.
"""

from .models import (
    DeclarationKind,
    TraceOriginOptions,
    OriginResult,
    ParsedSource,
)
from .interfaces import (
    ISyntaxNode,
    ISymbol,
    IDeclaration,
    IStructuralType,
    ISemanticHost,
)

__all__ = [
    "DeclarationKind",
    "TraceOriginOptions",
    "OriginResult",
    "ParsedSource",
    "ISyntaxNode",
    "ISymbol",
    "IDeclaration",
    "IStructuralType",
    "ISemanticHost",
]
