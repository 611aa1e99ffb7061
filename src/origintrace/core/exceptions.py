"""Custom exceptions for origintrace.

This module defines a hierarchy of exceptions raised by the semantic host
and its loaders. The resolution engine never lets any of them escape
``trace_origin``: they are logged and collapsed into an absent result.

Usage:
    from origintrace.core.exceptions import ParseError, HostError

    try:
        project.add_source_file_at_path("bad_file.ts")
    except ParseError as e:
        print(f"Failed to parse {e.filepath}: {e.details}")
"""


class OriginTraceException(Exception):
    """Base exception for all origintrace operations.

    All custom exceptions in origintrace inherit from this class,
    allowing for broad exception catching when needed.
    """
    pass


class ParseError(OriginTraceException):
    """Raised when a source file cannot be read or parsed.

    Attributes:
        filepath: Path to the file that failed to parse
        language: Detected grammar of the file
        details: Specific error details
    """

    def __init__(self, filepath: str, language: str, details: str):
        self.filepath = filepath
        self.language = language
        self.details = details
        super().__init__(f"Failed to parse {filepath} ({language}): {details}")


class HostError(OriginTraceException):
    """Raised when the semantic host is queried outside its contract.

    This covers failures such as:
    - A node that belongs to a different project
    - A source file that is not part of the program
    """
    pass


class ConfigurationError(OriginTraceException):
    """Raised when configuration is invalid.

    This covers failures related to:
    - Unreadable or malformed tsconfig.json files
    - Invalid path alias patterns
    - Invalid trace options
    """
    pass
