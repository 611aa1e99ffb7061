"""
origintrace - find the file where a TypeScript/JavaScript symbol is declared.

Given a reference anywhere in a program, origintrace follows imports,
re-exports, barrel files, path aliases, reassignments and merged objects
back to the original declaration and reports the file it lives in.

Usage:
    from origintrace import Project, trace_origin

    project = Project({"baseUrl": "/root"})
    project.create_source_file("/root/src/a.ts", "export const Foo = 1;")
    index = project.create_source_file("/root/src/index.ts", "import { Foo } from './a'; Foo;")

    trace_origin(index.find_identifier("Foo"))                    # '/root/src/a.ts'
    trace_origin(index.find_identifier("Foo"), {"relative": True})  # './a.ts'
"""

__version__ = "0.1.0"
__author__ = "origintrace Contributors"


# Lazy imports to avoid loading the tree-sitter grammars at import time
def __getattr__(name: str):
    """Lazy import heavy modules only when accessed."""
    if name == "trace_origin":
        from origintrace.resolution.tracer import trace_origin

        return trace_origin
    elif name == "OriginTracer":
        from origintrace.resolution.tracer import OriginTracer

        return OriginTracer
    elif name == "Project":
        from origintrace.host.project import Project

        return Project
    elif name == "CompilerOptions":
        from origintrace.host.module_resolution import CompilerOptions

        return CompilerOptions
    elif name == "TreeSitterParser":
        from origintrace.parsers.treesitter_parser import TreeSitterParser

        return TreeSitterParser
    elif name == "TraceOriginOptions":
        from origintrace.core.models import TraceOriginOptions

        return TraceOriginOptions
    elif name == "OriginResult":
        from origintrace.core.models import OriginResult

        return OriginResult
    elif name == "ISemanticHost":
        from origintrace.core.interfaces import ISemanticHost

        return ISemanticHost
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "__version__",
    "__author__",
    "trace_origin",
    "OriginTracer",
    "Project",
    "CompilerOptions",
    "TreeSitterParser",
    "TraceOriginOptions",
    "OriginResult",
    "ISemanticHost",
]
