"""Base formatter interface for layerlint report rendering."""

from abc import ABC, abstractmethod

from ..conformance.models import ConformanceReport


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def render(self, report: ConformanceReport) -> None:
        """Write the report to stdout."""
        output = self.format(report)
        if output:
            print(output)

    @abstractmethod
    def format(self, report: ConformanceReport) -> str:
        """Return formatted string representation of the report."""
