"""JSON formatter for layerlint.

Output is deterministic: keys are sorted and nothing run-specific (times,
absolute paths) is included, so identical projects give identical bytes.
"""

import json

from ..conformance.models import ConformanceReport
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the report as a single JSON document."""

    def format(self, report: ConformanceReport) -> str:
        data = {
            "summary": report.summary(),
            "violations": [v.to_dict() for v in report.findings],
            "skipped_files": [
                {
                    "path": v.path,
                    "kind": v.kind.label,
                    "severity": v.severity.value,
                    "line": v.line_start,
                    "reason": v.message,
                }
                for v in report.skipped
            ],
        }
        return json.dumps(data, indent=2, sort_keys=True)
