"""Violation and report models for a conformance run."""

from dataclasses import dataclass
from typing import Any, Optional

from ..models import Severity, ViolationKind


@dataclass(frozen=True)
class Violation:
    """One reported deviation from the policy.

    Violations are immutable facts: produced once per run, then only
    collected, sorted and rendered.
    """

    kind: ViolationKind
    severity: Severity
    path: str
    line_start: int
    line_end: int
    message: str
    feature: Optional[str] = None
    units: tuple[str, ...] = ()  # qualified names of the offending units
    scope: Optional[str] = None  # dependency violations: cross-layer / cross-feature

    @property
    def sort_key(self) -> tuple:
        return (self.feature or "", self.path, self.line_start, self.kind.value, self.message)

    @property
    def location(self) -> str:
        if self.line_start == self.line_end:
            return f"{self.path}:{self.line_start}"
        return f"{self.path}:{self.line_start}-{self.line_end}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.label,
            "severity": self.severity.value,
            "path": self.path,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "message": self.message,
            "feature": self.feature,
            "units": list(self.units),
            "scope": self.scope,
        }


@dataclass(frozen=True)
class ConformanceReport:
    """Outcome of one run: sorted violations plus inventory counts."""

    violations: tuple[Violation, ...] = ()
    files_indexed: int = 0
    unit_count: int = 0
    edge_count: int = 0

    @property
    def findings(self) -> list[Violation]:
        """Architecture findings, excluding files skipped due to errors."""
        return [v for v in self.violations if not v.kind.is_file_error]

    @property
    def skipped(self) -> list[Violation]:
        """Parse and I/O failures: one entry per skipped file."""
        return [v for v in self.violations if v.kind.is_file_error]

    @property
    def error_count(self) -> int:
        return sum(1 for v in self.violations if v.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for v in self.violations if v.severity is Severity.WARNING)

    def failed(self, fail_on_warnings: bool = False) -> bool:
        """Whether the run should exit non-zero."""
        if self.error_count:
            return True
        return fail_on_warnings and self.warning_count > 0

    def summary(self) -> dict[str, int]:
        return {
            "files_indexed": self.files_indexed,
            "units": self.unit_count,
            "edges": self.edge_count,
            "violations": len(self.findings),
            "files_skipped": len(self.skipped),
            "errors": self.error_count,
            "warnings": self.warning_count,
        }
