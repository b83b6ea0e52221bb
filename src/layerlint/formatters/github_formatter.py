"""GitHub Actions formatter: workflow command annotations."""

from ..conformance.models import ConformanceReport
from ..models import Severity
from .base import BaseFormatter


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class GithubFormatter(BaseFormatter):
    """Output ``::error`` / ``::warning`` annotations, one per violation."""

    def format(self, report: ConformanceReport) -> str:
        lines: list[str] = []
        for v in report.violations:
            level = "error" if v.severity is Severity.ERROR else "warning"
            props = ",".join(
                [
                    f"file={_escape_property(v.path)}",
                    f"line={v.line_start}",
                    f"endLine={v.line_end}",
                    f"title={_escape_property(v.kind.label)}",
                ]
            )
            lines.append(f"::{level} {props}::{_escape_data(v.message)}")
        return "\n".join(lines)
