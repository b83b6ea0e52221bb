"""
File operations for layerlint.

Reading and filtering helpers shared by the index and the extractor.
"""

from pathlib import Path, PurePosixPath

from .exceptions import FileAccessError


def read_source_file(filepath: Path, encoding: str = "utf-8", errors: str = "replace") -> str:
    """
    Read a source file as text.

    Args:
        filepath: File to read
        encoding: Text encoding
        errors: How to handle encoding errors

    Returns:
        File contents as string

    Raises:
        FileAccessError: If file cannot be read
    """
    try:
        with open(filepath, encoding=encoding, errors=errors) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileAccessError(filepath, f"Encoding error: {e}")
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")


def should_skip_file(relpath: str, exclude_patterns: list[str]) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    Args:
        relpath: POSIX path relative to the project root
        exclude_patterns: List of glob patterns to exclude

    Returns:
        True if file should be skipped
    """
    path = PurePosixPath(relpath)
    for pattern in exclude_patterns:
        if path.match(pattern):
            return True
        # "build/*" style patterns also exclude everything below that folder
        if pattern.endswith("/*") and pattern[:-2] in path.parts[:-1]:
            return True
    return False
