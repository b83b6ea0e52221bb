"""Conformance Engine: evaluates the graph and inventory against a policy."""

from __future__ import annotations

from typing import Sequence

from ..graph.models import DependencyGraph
from ..logging_config import get_logger
from ..policy.models import Policy
from ..scanning.index import SourceIndex
from ..scanning.syntax import ExtractedFile
from .models import ConformanceReport
from .rules import (
    check_dependencies,
    check_file_errors,
    check_file_sizes,
    check_naming,
    check_structure,
)

logger = get_logger(__name__)


class ConformanceEngine:
    """Stateless evaluator; one instance may serve any number of runs."""

    def __init__(self, policy: Policy):
        self.policy = policy

    def evaluate(
        self,
        index: SourceIndex,
        extracted: Sequence[ExtractedFile],
        graph: DependencyGraph,
    ) -> ConformanceReport:
        policy = self.policy
        violations = [
            *check_dependencies(graph, policy),
            *check_naming(graph.units, policy),
            *check_file_sizes(index, extracted, policy),
            *check_structure(index, policy),
            *check_file_errors(index, extracted, policy),
        ]
        violations.sort(key=lambda v: v.sort_key)

        report = ConformanceReport(
            violations=tuple(violations),
            files_indexed=len(index.files),
            unit_count=len(graph.units),
            edge_count=graph.edge_count,
        )
        logger.info(
            f"{len(report.findings)} violations, {len(report.skipped)} files skipped "
            f"({report.error_count} errors, {report.warning_count} warnings)"
        )
        return report
