"""Exception hierarchy for layerlint."""

from .analysis import AnalysisError, FileAccessError, ParsingError
from .base import LayerlintError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    PolicyError,
)

__all__ = [
    "LayerlintError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "PolicyError",
]
