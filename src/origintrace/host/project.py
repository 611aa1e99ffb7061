"""
Project - an in-memory TypeScript/JavaScript program.

The Project is the semantic host the resolution engine runs against. It
owns the parsed source files, resolves module specifiers with the
project's compiler options, and answers binding queries through its
binder and type evaluator.

Usage:
    >>> project = Project({"baseUrl": "/root", "paths": {"@lib/*": ["src/lib/*"]}})
    >>> project.create_source_file("/root/src/lib/a.ts", "export const Foo = 1;")
    >>> index = project.create_source_file("/root/src/index.ts", "import { Foo } from '@lib/a'; Foo;")
    >>> symbol = project.get_binding(index.find_identifier("Foo"))
"""

import dataclasses
import logging
import posixpath
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from origintrace.core.exceptions import ConfigurationError, HostError, ParseError
from origintrace.core.interfaces import ISemanticHost, ISyntaxNode
from origintrace.core.models import ParsedSource
from origintrace.host.binder import Binder
from origintrace.host.loader import ProgressCallback, discover_source_files, parallel_load_files
from origintrace.host.module_resolution import (
    CompilerOptions,
    ModuleResolver,
    canonical_path,
    load_compiler_options,
)
from origintrace.host.nodes import SourceFile, SyntaxNode
from origintrace.host.symbols import HostSymbol
from origintrace.host.types import TypeEvaluator
from origintrace.parsers.treesitter_parser import TreeSitterParser

logger = logging.getLogger(__name__)


class Project(ISemanticHost):
    """
    In-memory program of parsed source files.

    Attributes:
        compiler_options: Module resolution settings (baseUrl, paths)

    Thread Safety:
        Not thread-safe. Loading from a directory parses in parallel but
        registers files from the calling thread.
    """

    def __init__(self, compiler_options: Union[CompilerOptions, Mapping[str, Any], None] = None):
        if compiler_options is None:
            compiler_options = CompilerOptions()
        elif isinstance(compiler_options, Mapping):
            compiler_options = CompilerOptions.from_dict(compiler_options)
        elif not isinstance(compiler_options, CompilerOptions):
            raise ConfigurationError(
                f"Unsupported compiler options: {type(compiler_options).__name__}"
            )

        self.compiler_options = compiler_options
        self._files: Dict[str, SourceFile] = {}
        self._parser = TreeSitterParser()
        self._resolver = ModuleResolver(compiler_options, self._files.__contains__)
        self._binder = Binder(self)
        self._types = TypeEvaluator(self._binder)

    def __repr__(self) -> str:
        return f"Project({len(self._files)} files)"

    @classmethod
    def from_tsconfig(cls, config_path: Union[str, Path], load_files: bool = True, **load_kwargs) -> 'Project':
        """
        Create a project from a tsconfig.json / jsconfig.json.

        Args:
            config_path: Path to the config file
            load_files: Load every source file below the config's directory
            **load_kwargs: Passed to add_source_files_from_directory

        Returns:
            Project configured with the file's compiler options

        Raises:
            ConfigurationError: If the config file cannot be loaded
        """
        options = load_compiler_options(str(config_path))
        project = cls(options)
        if load_files:
            project.add_source_files_from_directory(
                posixpath.dirname(canonical_path(str(config_path))), **load_kwargs
            )
        return project

    # ------------------------------------------------------------------
    # Source files
    # ------------------------------------------------------------------

    @property
    def binder(self) -> Binder:
        return self._binder

    @property
    def types(self) -> TypeEvaluator:
        return self._types

    def create_source_file(self, file_path: str, text: str, overwrite: bool = False) -> SourceFile:
        """
        Add a source file from in-memory text.

        Args:
            file_path: Path to register the file under (made absolute)
            text: Source text
            overwrite: Replace an existing file at the same path

        Returns:
            The registered SourceFile

        Raises:
            HostError: If the path is taken and overwrite is False
            ParseError: If the file type is unsupported
        """
        path = canonical_path(file_path)
        if path in self._files and not overwrite:
            raise HostError(f"Source file already exists: {path}")
        return self._register(self._parser.parse_source(path, text))

    def add_source_file_at_path(self, file_path: Union[str, Path]) -> SourceFile:
        """
        Read, parse and add a source file from disk.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ParseError: If the file cannot be read or parsed
        """
        parsed = self._parser.parse_file(str(file_path))
        return self._register(dataclasses.replace(parsed, filepath=canonical_path(str(file_path))))

    def add_source_files_from_directory(
        self,
        root: Union[str, Path],
        parallel: bool = False,
        max_workers: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[SourceFile]:
        """
        Add every supported source file below a directory.

        Files that fail to parse are skipped and reported through the
        progress callback ('load_error' events).

        Args:
            root: Directory to load
            parallel: Parse files with a thread pool
            max_workers: Worker count when parallel (default: CPU count - 1)
            progress_callback: Called with (event_type, data) per file

        Returns:
            The added source files, in path order
        """
        files = discover_source_files(root)
        parsed_sources, errors = parallel_load_files(
            files,
            max_workers=max_workers if parallel else 1,
            progress_callback=progress_callback,
        )

        added = []
        for parsed in parsed_sources:
            added.append(self._register(
                dataclasses.replace(parsed, filepath=canonical_path(parsed.filepath))
            ))
        logger.info(f"Loaded {len(added)} source files from {root} ({errors} errors)")
        return added

    def _register(self, parsed: ParsedSource) -> SourceFile:
        if not parsed.is_successful:
            raise ParseError(parsed.filepath, parsed.language, parsed.error or "no syntax tree")
        source_file = SourceFile(parsed, self)
        self._files[source_file.path] = source_file
        self._binder.invalidate()
        logger.debug(f"Registered {source_file.path}")
        return source_file

    def get_source_file(self, file_path: str) -> Optional[SourceFile]:
        return self._files.get(canonical_path(file_path))

    def get_source_file_or_throw(self, file_path: str) -> SourceFile:
        """
        Return a registered source file.

        Raises:
            HostError: If no file is registered at the path
        """
        source_file = self.get_source_file(file_path)
        if source_file is None:
            raise HostError(f"Source file not found in project: {file_path}")
        return source_file

    def get_source_files(self) -> List[SourceFile]:
        return list(self._files.values())

    def get_node_at(self, file_path: str, line: int, column: int) -> Optional[SyntaxNode]:
        """Return the innermost node at a 1-indexed position of a file."""
        return self.get_source_file_or_throw(file_path).get_node_at(line, column)

    # ------------------------------------------------------------------
    # Semantic queries
    # ------------------------------------------------------------------

    def resolve_module(self, specifier: str, importer_path: str) -> Optional[SourceFile]:
        """
        Resolve a module specifier to a source file of this project.

        Args:
            specifier: Specifier as written in the import
            importer_path: Path of the importing file

        Returns:
            The target SourceFile, or None if it is not part of the project
        """
        resolved = self._resolver.resolve(specifier, canonical_path(importer_path))
        return self._files.get(resolved) if resolved is not None else None

    def get_binding(self, node: ISyntaxNode) -> Optional[HostSymbol]:
        """
        Return the symbol node binds to.

        Raises:
            HostError: If node does not belong to this project
        """
        if not isinstance(node, SyntaxNode) or node.get_host() is not self:
            raise HostError(f"Node does not belong to this project: {node!r}")
        if self._files.get(node.source_file.path) is not node.source_file:
            raise HostError(f"Node belongs to a replaced version of {node.source_file.path}")
        return self._binder.get_binding(node)
