"""Conformance pipeline runner: Index -> Extract -> Build -> Evaluate."""

from pathlib import Path
from typing import Iterable, Optional

from ..config import AnalysisConfig
from ..conformance.engine import ConformanceEngine
from ..conformance.models import ConformanceReport
from ..exceptions import InvalidPathError
from ..graph.builder import build_dependency_graph
from ..logging_config import get_logger
from ..policy.models import Policy
from ..scanning.index import SourceIndexer
from ..scanning.syntax_extractor import SyntaxExtractor

logger = get_logger(__name__)


class ConformancePipeline:
    """Runs one conformance check over a project root.

    Each stage consumes only the finished, immutable output of the previous
    one; no stage re-enters an earlier one.
    """

    def __init__(self, root: Path, policy: Policy, settings: Optional[AnalysisConfig] = None):
        self.root = Path(root)
        self.policy = policy
        self.settings = settings or AnalysisConfig()

    def run(self, file_paths: Optional[Iterable[str]] = None) -> ConformanceReport:
        """Run every stage and return the sorted report.

        Args:
            file_paths: Optional paths relative to the root; skips the walk.

        Raises:
            InvalidPathError: If the root is not a directory
        """
        if not self.root.is_dir():
            raise InvalidPathError(self.root, "not a directory")

        index = SourceIndexer(self.root, self.policy, self.settings).build(file_paths)
        logger.info("Stage 'index' complete")

        extracted = SyntaxExtractor(self.policy, self.settings).extract_all(index)
        logger.info("Stage 'extract' complete")

        graph = build_dependency_graph(extracted, index, self.policy)
        logger.info("Stage 'build' complete")

        report = ConformanceEngine(self.policy).evaluate(index, extracted, graph)
        logger.info("Stage 'evaluate' complete")
        return report
