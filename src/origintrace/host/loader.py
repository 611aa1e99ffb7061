"""
Parallel source loading for origintrace.

This module provides thread-safe parallel file parsing to speed up loading
large projects into a Project. It uses ThreadPoolExecutor for concurrent
parsing while maintaining proper progress reporting and error handling.

Performance:
    - Utilizes multiple CPU cores for parsing
    - Thread-local parsers avoid contention

Usage:
    >>> from origintrace.host.loader import discover_source_files, parallel_load_files
    >>> parsed, errors = parallel_load_files(discover_source_files("src"), max_workers=4)
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from origintrace.core.models import ParsedSource
from origintrace.parsers.language_configs import get_language_for_file
from origintrace.parsers.treesitter_parser import ThreadLocalParserFactory

logger = logging.getLogger(__name__)

# Directories never descended into by discover_source_files
SKIPPED_DIRECTORIES = {'node_modules', 'dist', 'build', 'coverage'}

ProgressCallback = Callable[[str, Dict[str, Any]], None]


@dataclass
class LoadResult:
    """
    Result of loading a single file.

    Attributes:
        filepath: Path to the loaded file
        parsed: Parsed source (None if loading failed)
        success: True if parsing succeeded, False otherwise
        error: Error message if loading failed, None otherwise
    """
    filepath: str
    parsed: Optional[ParsedSource]
    success: bool
    error: Optional[str] = None


@dataclass
class ParallelProgress:
    """
    Thread-safe progress tracking for parallel operations.

    Attributes:
        total: Total number of items to process
        _completed: Number of completed items (access via .completed property)
        _errors: Number of errors encountered (access via .errors property)
    """
    total: int
    _completed: int = 0
    _errors: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @property
    def completed(self) -> int:
        """Get the number of completed items (thread-safe)."""
        with self._lock:
            return self._completed

    @property
    def errors(self) -> int:
        """Get the number of errors encountered (thread-safe)."""
        with self._lock:
            return self._errors

    def increment_completed(self) -> int:
        """Increment the completed count and return new value (thread-safe)."""
        with self._lock:
            self._completed += 1
            return self._completed

    def increment_errors(self) -> int:
        """Increment the error count and return new value (thread-safe)."""
        with self._lock:
            self._errors += 1
            return self._errors


def discover_source_files(root: Union[str, Path]) -> List[Path]:
    """
    Find all supported source files below a directory.

    Hidden directories and dependency/build output directories are skipped.

    Args:
        root: Directory to search

    Returns:
        Sorted list of file paths

    Raises:
        NotADirectoryError: If root is not a directory
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = [
            d for d in dirnames
            if not d.startswith('.') and d not in SKIPPED_DIRECTORIES
        ]
        for filename in filenames:
            if get_language_for_file(filename) is not None:
                found.append(Path(dirpath) / filename)
    return sorted(found)


def load_file_worker(filepath: Path, parser_factory: ThreadLocalParserFactory) -> LoadResult:
    """
    Worker function for parallel file loading.

    Args:
        filepath: Path to file to parse
        parser_factory: Thread-local parser factory

    Returns:
        LoadResult with the parsed source or error information
    """
    parser = parser_factory.get_parser()
    try:
        parsed = parser.parse_file(str(filepath))
        return LoadResult(
            filepath=str(filepath),
            parsed=parsed if parsed.is_successful else None,
            success=parsed.is_successful,
            error=parsed.error,
        )
    except Exception as e:
        return LoadResult(
            filepath=str(filepath),
            parsed=None,
            success=False,
            error=str(e),
        )


def parallel_load_files(
    files: List[Path],
    max_workers: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> Tuple[List[ParsedSource], int]:
    """
    Parse multiple files in parallel using ThreadPoolExecutor.

    Args:
        files: List of file paths to parse
        max_workers: Number of worker threads. If None, defaults to
                    (CPU count - 1) to leave one core free for the main thread.
        progress_callback: Optional callback for progress events.
                          Called with (event_type, data) for each event.
                          Event types: 'file_loaded', 'load_error'

    Returns:
        Tuple of (parsed_sources, error_count). Parsed sources are returned
        in the order of ``files`` so loading is deterministic.
    """
    if not files:
        return [], 0

    parser_factory = ThreadLocalParserFactory()
    progress = ParallelProgress(total=len(files))
    results: Dict[str, ParsedSource] = {}
    results_lock = threading.Lock()

    def emit(event_type: str, data: dict):
        """Emit a progress event if callback is provided."""
        if progress_callback:
            try:
                progress_callback(event_type, data)
            except Exception as e:
                logger.debug(f"Progress callback failed: {e}")

    if max_workers is None:
        cpu_count = os.cpu_count() or 4
        max_workers = max(1, min(cpu_count - 1, 32))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_file = {
            executor.submit(load_file_worker, f, parser_factory): f
            for f in files
        }

        for future in as_completed(future_to_file):
            filepath = future_to_file[future]
            try:
                result = future.result()
                completed = progress.increment_completed()

                if result.success:
                    with results_lock:
                        results[result.filepath] = result.parsed
                    emit("file_loaded", {
                        "path": result.filepath,
                        "index": completed,
                        "total": progress.total,
                    })
                else:
                    progress.increment_errors()
                    logger.warning(f"Skipping {result.filepath}: {result.error}")
                    emit("load_error", {
                        "path": result.filepath,
                        "error": result.error,
                    })

            except Exception as e:  # pragma: no cover
                progress.increment_completed()
                progress.increment_errors()
                emit("load_error", {
                    "path": str(filepath),
                    "error": str(e),
                })

    ordered = [results[str(f)] for f in files if str(f) in results]
    return ordered, progress.errors
