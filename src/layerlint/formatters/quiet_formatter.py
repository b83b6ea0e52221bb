"""Quiet formatter: one location per line."""

from ..conformance.models import ConformanceReport
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render ``path:line Kind`` for every violation."""

    def format(self, report: ConformanceReport) -> str:
        return "\n".join(f"{v.path}:{v.line_start} {v.kind.label}" for v in report.violations)
