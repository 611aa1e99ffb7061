"""
Module specifier resolution for TypeScript/JavaScript projects.

Resolves the string in ``import ... from '<specifier>'`` to a file of the
project, the way the TypeScript compiler does for bundler-style projects:

    1. Relative specifiers (./foo, ../bar) against the importing file
    2. ``paths`` aliases from the compiler options (e.g. "@lib/*")
    3. Non-relative specifiers against ``baseUrl``

Each candidate is probed as-is, with the supported extensions appended,
with a ``.js`` extension swapped for its TypeScript counterpart, and as a
directory containing an ``index`` file. Bare package specifiers that match
none of the above are left unresolved.

Usage:
    >>> options = load_compiler_options("/repo/tsconfig.json")
    >>> resolver = ModuleResolver(options, file_exists=lambda p: p in files)
    >>> resolver.resolve("@lib/a", "/repo/src/index.ts")
    '/repo/src/lib/a.ts'
"""

import json
import logging
import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from origintrace.core.exceptions import ConfigurationError
from origintrace.parsers.language_configs import RESOLUTION_EXTENSIONS, get_language_for_file

logger = logging.getLogger(__name__)

# Runtime extension in a specifier -> TypeScript sources it may refer to
_SOURCE_EXTENSION_SUBSTITUTES: Dict[str, List[str]] = {
    '.js': ['.ts', '.tsx', '.d.ts'],
    '.jsx': ['.tsx'],
    '.mjs': ['.mts', '.d.mts'],
    '.cjs': ['.cts', '.d.cts'],
}


def canonical_path(path: str) -> str:
    """
    Convert a path to the canonical absolute POSIX form used by the host.

    Args:
        path: Absolute or relative path, with either separator

    Returns:
        Normalized absolute path with forward slashes
    """
    posix = path.replace('\\', '/')
    if not posixpath.isabs(posix) and not (len(posix) > 1 and posix[1] == ':'):
        posix = Path(os.path.abspath(path)).as_posix()
    return posixpath.normpath(posix)


@dataclass
class PathAlias:
    """Configuration for a single ``paths`` entry.

    Attributes:
        pattern: The alias pattern (e.g., "@lib/*", "#config").
        targets: Replacement paths (e.g., ["src/lib/*"]).
        is_wildcard: Whether the pattern contains a wildcard.
        prefix: Part before the wildcard.
        suffix: Part after the wildcard.
    """

    pattern: str
    targets: List[str]
    is_wildcard: bool = False
    prefix: str = ""
    suffix: str = ""

    def __post_init__(self):
        """Parse pattern into prefix/suffix."""
        if self.pattern.count("*") > 1:
            raise ConfigurationError(f"Path alias '{self.pattern}' can have at most one '*'")
        if "*" in self.pattern:
            self.is_wildcard = True
            idx = self.pattern.index("*")
            self.prefix = self.pattern[:idx]
            self.suffix = self.pattern[idx + 1:]
        else:
            self.prefix = self.pattern

    def matches(self, specifier: str) -> Optional[str]:
        """Check if specifier matches this alias, return captured wildcard portion.

        Args:
            specifier: The import specifier to check.

        Returns:
            The wildcard portion if matched ("" for exact patterns), None otherwise.
        """
        if not self.is_wildcard:
            return "" if specifier == self.pattern else None

        if not specifier.startswith(self.prefix) or not specifier.endswith(self.suffix):
            return None
        if len(specifier) < len(self.prefix) + len(self.suffix):
            return None

        return specifier[len(self.prefix):len(specifier) - len(self.suffix)]

    def apply(self, wildcard_part: str) -> List[str]:
        """Substitute the captured wildcard portion into every target."""
        results = []
        for target in self.targets:
            if "*" in target:
                idx = target.index("*")
                results.append(target[:idx] + wildcard_part + target[idx + 1:])
            else:
                results.append(target)
        return results


@dataclass
class CompilerOptions:
    """
    The subset of tsconfig ``compilerOptions`` that affects module resolution.

    Attributes:
        base_url: Absolute directory non-relative specifiers resolve against
        paths: Alias pattern -> target list, relative to ``paths_base``
        config_dir: Directory of the tsconfig that declared ``paths``
    """
    base_url: Optional[str] = None
    paths: Dict[str, List[str]] = field(default_factory=dict)
    config_dir: Optional[str] = None

    def __post_init__(self):
        if self.base_url is not None:
            self.base_url = canonical_path(self.base_url)
        if self.config_dir is not None:
            self.config_dir = canonical_path(self.config_dir)
        for pattern, targets in self.paths.items():
            if isinstance(targets, str) or not all(isinstance(t, str) for t in targets):
                raise ConfigurationError(f"Targets of path alias '{pattern}' must be a list of strings")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'CompilerOptions':
        """
        Create options from a dict, accepting tsconfig (camelCase) keys.

        Args:
            data: e.g. {"baseUrl": "/root", "paths": {"@lib/*": ["src/lib/*"]}}

        Returns:
            CompilerOptions instance
        """
        data = dict(data or {})
        return cls(
            base_url=data.get('base_url', data.get('baseUrl')),
            paths=dict(data.get('paths') or {}),
            config_dir=data.get('config_dir', data.get('configDir')),
        )

    @property
    def paths_base(self) -> Optional[str]:
        """Directory ``paths`` targets are relative to."""
        return self.base_url or self.config_dir

    @property
    def path_aliases(self) -> List[PathAlias]:
        """Aliases ordered by specificity (longest prefix first)."""
        aliases = [PathAlias(pattern, list(targets)) for pattern, targets in self.paths.items()]
        return sorted(aliases, key=lambda a: (not a.is_wildcard, len(a.prefix)), reverse=True)


def load_compiler_options(config_path: str) -> CompilerOptions:
    """
    Load compiler options from a tsconfig.json or jsconfig.json.

    Comments and trailing commas are accepted. ``extends`` chains are
    followed; options of the extending file win, and ``paths`` is replaced
    as a whole rather than merged.

    Args:
        config_path: Path to the config file

    Returns:
        CompilerOptions with absolute base_url and config_dir

    Raises:
        ConfigurationError: If a config file is missing, malformed, or
            extends itself
    """
    options, _ = _load_config_chain(canonical_path(config_path), set())
    return options


def _load_config_chain(config_path: str, seen: Set[str]):
    if config_path in seen:
        raise ConfigurationError(f"Circular 'extends' in {config_path}")
    seen.add(config_path)

    config_file = Path(config_path)
    if not config_file.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")
    try:
        data = json.loads(strip_jsonc(config_file.read_text(encoding='utf-8')))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    config_dir = posixpath.dirname(config_path)
    base = CompilerOptions()
    extends = data.get('extends')
    if isinstance(extends, str):
        if extends.startswith(('.', '/')):
            parent_path = posixpath.normpath(posixpath.join(config_dir, extends))
            if not parent_path.endswith('.json'):
                parent_path += '.json'
            base, _ = _load_config_chain(parent_path, seen)
        else:
            logger.warning(f"Ignoring package 'extends' ({extends}) in {config_path}")

    compiler_options = data.get('compilerOptions') or {}
    base_url = base.base_url
    if 'baseUrl' in compiler_options:
        base_url = posixpath.join(config_dir, compiler_options['baseUrl'])
    paths, paths_dir = base.paths, base.config_dir
    if 'paths' in compiler_options:
        paths, paths_dir = dict(compiler_options['paths']), config_dir

    options = CompilerOptions(base_url=base_url, paths=paths, config_dir=paths_dir or config_dir)
    logger.debug(f"Loaded compiler options from {config_path}: {options}")
    return options, data


def strip_jsonc(text: str) -> str:
    """
    Remove comments and trailing commas from JSON-with-comments text.

    Args:
        text: tsconfig-style JSON

    Returns:
        Strict JSON text
    """
    out: List[str] = []
    i, n = 0, len(text)
    in_string = False
    while i < n:
        char = text[i]
        if in_string:
            out.append(char)
            if char == '\\' and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
        elif char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif text.startswith('//', i):
            end = text.find('\n', i)
            i = n if end == -1 else end
        elif text.startswith('/*', i):
            end = text.find('*/', i + 2)
            i = n if end == -1 else end + 2
        elif char == ',':
            j = i + 1
            while j < n and text[j] in ' \t\r\n':
                j += 1
            if j < n and text[j] in '}]':
                i += 1
                continue
            out.append(char)
            i += 1
        else:
            out.append(char)
            i += 1
    return ''.join(out)


class ModuleResolver:
    """
    Maps import specifiers to project files.

    Args:
        options: Compiler options (baseUrl and paths)
        file_exists: Predicate telling whether a canonical path is a project file

    Raises:
        ConfigurationError: If ``paths`` is set without a directory to resolve
            its targets against
    """

    def __init__(self, options: CompilerOptions, file_exists: Callable[[str], bool]):
        self.options = options
        if options.paths and options.paths_base is None:
            raise ConfigurationError("'paths' requires 'baseUrl' or the directory of the config file declaring it")
        self._file_exists = file_exists
        self._aliases = options.path_aliases

    def resolve(self, specifier: str, importer: str) -> Optional[str]:
        """
        Resolve a module specifier.

        Args:
            specifier: Raw specifier, e.g. './a', '@lib/a', 'react'
            importer: Canonical path of the importing file

        Returns:
            Canonical path of the target file, or None if unresolved
        """
        if specifier.startswith(('./', '../')) or specifier in ('.', '..'):
            return self._try_path(posixpath.join(posixpath.dirname(importer), specifier))
        if specifier.startswith('/'):
            return self._try_path(specifier)

        for alias in self._aliases:
            wildcard = alias.matches(specifier)
            if wildcard is None:
                continue
            for target in alias.apply(wildcard):
                resolved = self._try_path(posixpath.join(self.options.paths_base, target))
                if resolved is not None:
                    return resolved

        if self.options.base_url:
            resolved = self._try_path(posixpath.join(self.options.base_url, specifier))
            if resolved is not None:
                return resolved

        logger.debug(f"Unresolved module '{specifier}' imported from {importer}")
        return None

    def _try_path(self, path: str) -> Optional[str]:
        """Try a path as a file, with extensions, and as a directory index."""
        path = posixpath.normpath(path)

        if get_language_for_file(path) is not None and self._file_exists(path):
            return path

        stem, extension = posixpath.splitext(path)
        for substitute in _SOURCE_EXTENSION_SUBSTITUTES.get(extension, []):
            if self._file_exists(stem + substitute):
                return stem + substitute

        for extension in RESOLUTION_EXTENSIONS:
            if self._file_exists(path + extension):
                return path + extension

        for extension in RESOLUTION_EXTENSIONS:
            candidate = posixpath.join(path, 'index' + extension)
            if self._file_exists(candidate):
                return candidate

        return None
