"""SyntaxExtractor: produces FileSyntax and SourceUnits for indexed files.

Usage:
    extractor = SyntaxExtractor(policy, settings)
    results = extractor.extract_all(index)
    # results is list[ExtractedFile], sorted by path

Failure isolation:
    A file that cannot be read or parsed yields an ExtractedFile carrying
    the error and no units. The rest of the project is still extracted.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Optional

from ..config import AnalysisConfig
from ..exceptions import FileAccessError, ParsingError
from ..file_ops import read_source_file
from ..logging_config import get_logger
from ..models import UNCLASSIFIED
from ..policy.models import Policy
from .dart import DartParser
from .index import IndexedFile, SourceIndex
from .languages import LanguageConfig, get_language_config
from .syntax import Declaration, ExtractedFile, SourceUnit

logger = get_logger(__name__)

# language name -> parser factory; each parser exposes parse(text, path) -> FileSyntax
PARSERS: dict[str, Callable[[], DartParser]] = {
    "dart": DartParser,
}

# Below this many files a pool costs more than it saves
_PARALLEL_MIN_FILES = 10


class SyntaxExtractor:
    """Extracts structural facts from source files.

    Attributes:
        parsed_count: Files parsed successfully in the last extract_all()
        failed_count: Files that produced a parse or access error
    """

    def __init__(self, policy: Policy, settings: Optional[AnalysisConfig] = None) -> None:
        self.policy = policy
        self.settings = settings or AnalysisConfig()
        self.language: LanguageConfig = get_language_config(policy.language)
        self._parser = PARSERS[policy.language]()
        self.parsed_count = 0
        self.failed_count = 0

    def extract(self, root: Path, indexed: IndexedFile) -> ExtractedFile:
        """Extract one file. Never raises for per-file problems."""
        try:
            text = read_source_file(root / indexed.path)
            syntax = self._parser.parse(text, indexed.path)
        except (FileAccessError, ParsingError) as e:
            logger.debug(f"Extraction failed for {indexed.path}: {e}")
            return ExtractedFile(path=indexed.path, error=e)
        except RecursionError as e:
            return ExtractedFile(
                path=indexed.path,
                error=ParsingError(Path(indexed.path), self.language.name, f"too deeply nested: {e}"),
            )

        units = tuple(self._unit(indexed, decl) for decl in syntax.declarations)
        return ExtractedFile(path=indexed.path, syntax=syntax, units=units)

    def extract_all(self, index: SourceIndex) -> list[ExtractedFile]:
        """Extract every indexed file, in parallel for larger projects.

        Returns:
            One ExtractedFile per indexed file, sorted by path
        """
        files = list(index.files)
        results: list[ExtractedFile] = []

        if len(files) < _PARALLEL_MIN_FILES or self.settings.effective_workers == 1:
            for indexed in files:
                results.append(self.extract(index.root, indexed))
        else:
            executor = ThreadPoolExecutor(max_workers=self.settings.effective_workers)
            try:
                futures = {executor.submit(self.extract, index.root, f): f for f in files}
                for future in as_completed(futures):
                    results.append(future.result())
            except BaseException:
                # Interrupted: drop queued work, partial results are discarded
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown(wait=True)

        results.sort(key=lambda r: r.path)
        self.parsed_count = sum(1 for r in results if r.ok)
        self.failed_count = len(results) - self.parsed_count
        if self.failed_count:
            logger.warning(f"{self.failed_count}/{len(results)} files could not be analyzed")
        logger.debug(
            f"Extracted {sum(len(r.units) for r in results)} units from {self.parsed_count} files"
        )
        return results

    def _unit(self, indexed: IndexedFile, decl: Declaration) -> SourceUnit:
        return SourceUnit(
            name=decl.name,
            kind=decl.kind,
            path=indexed.path,
            feature=indexed.feature,
            layer=indexed.layer,
            start_line=decl.start_line,
            end_line=decl.end_line,
            references=decl.references,
            naming_ok=self._naming_ok(indexed.layer, decl),
        )

    def _naming_ok(self, layer: str, decl: Declaration) -> bool:
        if layer == UNCLASSIFIED or not decl.kind.is_class_like:
            return True
        if self.language.is_private(decl.name):
            return True
        return self.policy.rule(layer).naming.matches(decl.name)

