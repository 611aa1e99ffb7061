"""
Parsers for origintrace.

This module provides source parsing using tree-sitter grammars for
TypeScript, TSX and JavaScript.
"""

from .treesitter_parser import TreeSitterParser, ThreadLocalParserFactory
from .language_configs import (
    get_language_for_file,
    get_config_for_language,
    get_supported_extensions,
    EXTENSION_MAP,
    LANGUAGE_CONFIGS,
    RESOLUTION_EXTENSIONS,
)

__all__ = [
    "TreeSitterParser",
    "ThreadLocalParserFactory",
    "get_language_for_file",
    "get_config_for_language",
    "get_supported_extensions",
    "EXTENSION_MAP",
    "LANGUAGE_CONFIGS",
    "RESOLUTION_EXTENSIONS",
]
