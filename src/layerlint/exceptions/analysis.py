"""Analysis-related exceptions: file access and parsing."""

from pathlib import Path
from typing import Optional

from .base import LayerlintError


class AnalysisError(LayerlintError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": filepath, "reason": reason},
        )
        self.filepath = filepath


class ParsingError(AnalysisError):
    """Raised when file content cannot be structurally parsed."""

    def __init__(self, filepath: Path, language: str, reason: str, line: Optional[int] = None):
        super().__init__(
            f"Failed to parse {language} file: {filepath}",
            details={"filepath": filepath, "language": language, "reason": reason, "line": line},
        )
        self.filepath = filepath
        self.language = language
        self.line = line
