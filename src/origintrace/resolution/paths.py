"""Formatting of resolved origin locations."""

import posixpath


def format_origin_path(origin_path: str, reference_path: str, relative: bool = False) -> str:
    """
    Format the file of a resolved declaration for output.

    Args:
        origin_path: Absolute path of the file declaring the origin
        reference_path: Absolute path of the file containing the reference
        relative: Report origin_path relative to reference_path's directory

    Returns:
        Absolute path, or a relative path starting with ``./`` or ``../``

    Examples:
        >>> format_origin_path("/root/src/a.ts", "/root/src/index.ts", relative=True)
        './a.ts'
        >>> format_origin_path("/root/src/lib/a.ts", "/root/src/app/b.ts", relative=True)
        '../lib/a.ts'
    """
    origin = _to_posix(origin_path)
    if not relative:
        return origin

    reference_dir = posixpath.dirname(_to_posix(reference_path))
    relative_path = posixpath.relpath(origin, reference_dir)
    if not relative_path.startswith(('./', '../')):
        relative_path = './' + relative_path
    return relative_path


def _to_posix(path: str) -> str:
    return posixpath.normpath(path.replace('\\', '/'))
