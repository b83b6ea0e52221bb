"""Configuration exceptions: run settings, paths, architecture policy."""

from pathlib import Path
from typing import Any, Optional

from .base import LayerlintError


class ConfigurationError(LayerlintError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": path, "reason": reason})
        self.path = path


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": value, "reason": reason},
        )
        self.key = key
        self.value = value


class PolicyError(ConfigurationError):
    """Raised when the architecture policy is malformed or self-inconsistent.

    This is the only hard failure of a conformance run: it is raised before
    any scanning begins.
    """

    def __init__(self, reason: str, source: Optional[Path] = None, layer: Optional[str] = None):
        super().__init__(
            f"Invalid policy: {reason}",
            details={"reason": reason, "source": source, "layer": layer},
        )
        self.source = source
        self.layer = layer
