"""
TypeScript/JavaScript semantic host.

This module provides an in-memory program model over tree-sitter trees that
implements the interfaces the resolution engine consumes: syntax nodes,
symbols with alias chains, declarations and structural types.
"""

from .nodes import SyntaxNode, SourceFile
from .symbols import HostSymbol, HostDeclaration, StructuralType
from .module_resolution import (
    CompilerOptions,
    ModuleResolver,
    PathAlias,
    load_compiler_options,
)
from .binder import Binder, ModuleRecord
from .types import TypeEvaluator
from .loader import discover_source_files, parallel_load_files
from .project import Project

__all__ = [
    "SyntaxNode",
    "SourceFile",
    "HostSymbol",
    "HostDeclaration",
    "StructuralType",
    "CompilerOptions",
    "ModuleResolver",
    "PathAlias",
    "load_compiler_options",
    "Binder",
    "ModuleRecord",
    "TypeEvaluator",
    "discover_source_files",
    "parallel_load_files",
    "Project",
]
