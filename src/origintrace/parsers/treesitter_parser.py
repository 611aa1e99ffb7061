"""
TreeSitterParser - TypeScript/JavaScript source parser.

This module parses source files into tree-sitter syntax trees for the
semantic host. Binding and type evaluation happen later, on demand, in
``origintrace.host``; the parser only produces trees.

Supported Grammars:
    - TypeScript (.ts, .mts, .cts, .d.ts)
    - TSX (.tsx)
    - JavaScript (.js, .jsx, .mjs, .cjs)

Performance:
    - Caches parsers per grammar for speed
    - Handles large files (up to 10MB with warnings)

Usage:
    >>> parser = TreeSitterParser()
    >>> parsed = parser.parse_source("/src/a.ts", "export const Foo = 1;")
    >>> parsed.tree.root_node.type
    'program'
"""

import logging
import time
import threading
from pathlib import Path
from typing import Any, Dict, List, Union

from tree_sitter_languages import get_parser

from origintrace.core.models import ParsedSource
from origintrace.parsers.language_configs import (
    get_language_for_file,
    get_supported_extensions,
)

# Configure logging
logger = logging.getLogger(__name__)


class TreeSitterParser:
    """
    tree-sitter based parser for the TypeScript family of grammars.

    Attributes:
        MAX_FILE_SIZE_MB: Maximum file size before warning (10 MB)
        _parsers: Cache of tree-sitter parsers by grammar

    Thread Safety:
        This class is NOT thread-safe. Create separate instances for
        concurrent parsing, or use ThreadLocalParserFactory.
    """

    MAX_FILE_SIZE_MB = 10

    def __init__(self):
        """Initialize the parser with an empty parser cache."""
        self._parsers: Dict[str, Any] = {}
        logger.debug("TreeSitterParser initialized")

    def can_parse(self, filepath: str) -> bool:
        """
        Determine if this parser can handle the given file.

        Args:
            filepath: Path to the file to check

        Returns:
            True if the file extension is supported, False otherwise
        """
        return get_language_for_file(filepath) is not None

    def parse_source(self, filepath: str, content: Union[str, bytes]) -> ParsedSource:
        """
        Parse in-memory source text.

        Args:
            filepath: Path the source is registered under
            content: Source text

        Returns:
            ParsedSource with the syntax tree, or with ``error`` set
        """
        start_time = time.time()
        if isinstance(content, str):
            content = content.encode('utf-8')

        language = get_language_for_file(filepath)
        if language is None:
            error_msg = f"Unsupported file type: {Path(filepath).suffix}"
            logger.warning(f"{error_msg} - {filepath}")
            return ParsedSource(
                filepath=filepath,
                language="unknown",
                content=content,
                parse_time=time.time() - start_time,
                error=error_msg,
            )

        try:
            parser = self._get_parser(language)
            tree = parser.parse(content)
        except Exception as e:  # pragma: no cover
            error_msg = f"Parsing error: {str(e)}"
            logger.error(f"{error_msg}: {filepath}", exc_info=True)
            return ParsedSource(
                filepath=filepath,
                language=language,
                content=content,
                parse_time=time.time() - start_time,
                error=error_msg,
            )

        parse_time = time.time() - start_time
        if tree.root_node.has_error:
            logger.debug(f"Syntax errors in {filepath}; continuing with partial tree")
        logger.debug(f"Parsed {filepath} in {parse_time:.3f}s")

        return ParsedSource(
            filepath=filepath,
            language=language,
            content=content,
            tree=tree,
            parse_time=parse_time,
        )

    def parse_file(self, filepath: str) -> ParsedSource:
        """
        Read and parse a source file from disk.

        Args:
            filepath: Path to the file to parse

        Returns:
            ParsedSource with the syntax tree, or with ``error`` set

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        file_path = Path(filepath)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")

        file_size_mb = file_path.stat().st_size / (1024 * 1024)
        if file_size_mb > self.MAX_FILE_SIZE_MB:
            logger.warning(
                f"Large file ({file_size_mb:.2f}MB): {filepath}. "
                f"Parsing may be slow."
            )

        language = get_language_for_file(filepath) or "unknown"
        try:
            content = file_path.read_bytes()
        except OSError as e:
            error_msg = f"Error reading file: {str(e)}"
            logger.error(f"{error_msg}: {filepath}")
            return ParsedSource(filepath=filepath, language=language, error=error_msg)

        if self._is_binary_file(content):
            error_msg = "Binary file detected - cannot parse"
            logger.error(f"{error_msg}: {filepath}")
            return ParsedSource(filepath=filepath, language=language, error=error_msg)

        return self.parse_source(filepath, content)

    def get_supported_extensions(self) -> List[str]:
        """
        Return list of file extensions this parser supports.

        Returns:
            Sorted list of file extensions (with leading dots)
        """
        return sorted(list(get_supported_extensions()))

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _is_binary_file(self, content: bytes) -> bool:
        """
        Check if file content is binary (not text).

        Args:
            content: File content as bytes

        Returns:
            True if file appears to be binary, False otherwise
        """
        sample = content[:8192]

        if b'\x00' in sample:
            return True

        try:
            sample.decode('utf-8')
            return False
        except UnicodeDecodeError:
            text_chars = sum(1 for b in sample if 32 <= b < 127 or b in (9, 10, 13))
            if len(sample) == 0:
                return False
            # If less than 70% are text characters, consider it binary
            return text_chars / len(sample) < 0.7

    def _get_parser(self, language: str):
        """
        Get or create a tree-sitter parser for the given grammar.

        Args:
            language: Grammar name (e.g., 'typescript', 'tsx')

        Returns:
            Tree-sitter parser instance
        """
        if language not in self._parsers:
            logger.debug(f"Creating new parser for language: {language}")
            self._parsers[language] = get_parser(language)
        return self._parsers[language]


# ===========================================================================
# Thread-Safe Parser Factory for Parallel Loading
# ===========================================================================


class ThreadLocalParserFactory:
    """
    Factory that provides thread-local TreeSitterParser instances.

    Thread Safety:
        This class IS thread-safe. It uses thread-local storage to ensure
        each thread gets its own independent TreeSitterParser instance.

    Usage:
        factory = ThreadLocalParserFactory()
        # In each thread:
        parser = factory.get_parser()
        parsed = parser.parse_file(filepath)
    """

    def __init__(self):
        """Initialize the factory with thread-local storage."""
        self._local = threading.local()

    def get_parser(self) -> TreeSitterParser:
        """
        Get or create a TreeSitterParser for the current thread.

        Returns:
            TreeSitterParser instance unique to the calling thread
        """
        if not hasattr(self._local, 'parser'):
            self._local.parser = TreeSitterParser()
        return self._local.parser
