"""Base exception for layerlint."""

from typing import Mapping, Optional


class LayerlintError(Exception):
    """Base exception for all layerlint errors.

    ``details`` locate the failure (file, layer, config key). Entries whose
    value is None are dropped, so subclasses can pass optional context
    straight through. A ``reason`` entry is the short cause that reports
    show next to a file; without one the message stands in.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, object]] = None):
        super().__init__(message)
        self.message = message
        self.details = {k: str(v) for k, v in (details or {}).items() if v is not None}

    @property
    def reason(self) -> str:
        return self.details.get("reason", self.message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
