"""Source Index: discovers features, typed folders and part-file groups.

The index walks the project once and records, for every source file under
the features directory, which feature it belongs to and which layer its
folder declares. It never reads file contents; that is the extractor's job.

Layout (defaults):
    <root>/lib/features/<feature>/<typed folder>/.../<file>.dart
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

from ..config import AnalysisConfig
from ..file_ops import should_skip_file
from ..logging_config import get_logger
from ..models import UNCLASSIFIED
from ..policy.models import Policy
from .languages import LanguageConfig, get_language_config

logger = get_logger(__name__)


@dataclass(frozen=True)
class IndexedFile:
    """One source file and its folder-declared classification."""

    path: str  # POSIX path relative to the project root
    feature: Optional[str]  # None when the file sits directly in the features dir
    layer: str  # declared layer name or UNCLASSIFIED

    @property
    def is_classified(self) -> bool:
        return self.layer != UNCLASSIFIED


@dataclass(frozen=True)
class PartGroup:
    """A primary file and its ``<stem><part_suffix>`` sibling."""

    primary: str
    part: str


@dataclass(frozen=True)
class AccessFailure:
    path: str
    reason: str


@dataclass(frozen=True)
class SourceIndex:
    """Immutable inventory of a project's source files."""

    root: Path
    files: tuple[IndexedFile, ...] = ()
    part_groups: tuple[PartGroup, ...] = ()
    # "<stem><part_suffix>" files whose primary does not exist
    orphan_parts: tuple[str, ...] = ()
    access_failures: tuple[AccessFailure, ...] = ()

    @cached_property
    def _by_path(self) -> dict[str, IndexedFile]:
        return {f.path: f for f in self.files}

    @cached_property
    def _part_owner(self) -> dict[str, str]:
        return {g.part: g.primary for g in self.part_groups}

    def get(self, path: str) -> Optional[IndexedFile]:
        return self._by_path.get(path)

    def group_key(self, path: str) -> str:
        """Primary path of the part group containing ``path`` (or the path itself)."""
        return self._part_owner.get(path, path)

    @property
    def features(self) -> list[str]:
        return sorted({f.feature for f in self.files if f.feature is not None})


class SourceIndexer:
    """Builds a SourceIndex for one project root under one policy."""

    def __init__(self, root: Path, policy: Policy, settings: Optional[AnalysisConfig] = None):
        self.root = Path(root)
        self.policy = policy
        self.settings = settings or AnalysisConfig()
        self.language: LanguageConfig = get_language_config(policy.language)
        self.features_root = self.root.joinpath(*policy.features_dir_parts)

    def build(self, file_paths: Optional[Iterable[str]] = None) -> SourceIndex:
        """Index the project.

        Args:
            file_paths: Optional pre-discovered paths relative to the root.
                When given, no directory walk happens. Order does not matter;
                the resulting index is always sorted by path.
        """
        if not self.features_root.is_dir():
            logger.warning(
                f"Features directory not found: {self.features_root} "
                "(check features_dir in the policy)"
            )
            return SourceIndex(root=self.root)

        candidates = self._walk() if file_paths is None else file_paths

        files: dict[str, IndexedFile] = {}
        failures: list[AccessFailure] = []
        for relpath in candidates:
            relpath = PurePosixPath(relpath).as_posix()
            if relpath in files or not self._accepts(relpath):
                continue

            if len(files) >= self.settings.max_files:
                logger.warning(f"Reached max files limit ({self.settings.max_files})")
                break

            try:
                size = (self.root / relpath).stat().st_size
            except OSError as e:
                failures.append(AccessFailure(relpath, f"Cannot stat file: {e}"))
                continue
            if size > self.settings.max_file_size_bytes:
                logger.warning(f"Skipped (size): {relpath} ({size} bytes)")
                continue

            indexed = self._classify(relpath)
            if indexed is not None:
                files[relpath] = indexed

        ordered = tuple(files[p] for p in sorted(files))
        groups, orphans = self._part_groups(ordered)

        index = SourceIndex(
            root=self.root,
            files=ordered,
            part_groups=groups,
            orphan_parts=orphans,
            access_failures=tuple(sorted(failures, key=lambda f: f.path)),
        )
        logger.info(
            f"Indexed {len(ordered)} files in {len(index.features)} features "
            f"({len(groups)} part groups)"
        )
        return index

    # ── Discovery ──────────────────────────────────────────────

    def _walk(self) -> list[str]:
        found: list[str] = []
        skip_dirs = set(self.language.skip_dirs)
        for dirpath, dirnames, filenames in os.walk(
            self.features_root, followlinks=self.settings.follow_symlinks
        ):
            dirnames[:] = sorted(
                d
                for d in dirnames
                if d not in skip_dirs
                and (self.settings.allow_hidden_files or not d.startswith("."))
            )
            base = Path(dirpath)
            for name in sorted(filenames):
                full = base / name
                if full.is_symlink() and not self.settings.follow_symlinks:
                    continue
                found.append(full.relative_to(self.root).as_posix())
        return found

    def _accepts(self, relpath: str) -> bool:
        path = PurePosixPath(relpath)
        if path.suffix not in self.language.extensions:
            return False
        if not self.settings.allow_hidden_files and any(p.startswith(".") for p in path.parts):
            return False
        if should_skip_file(relpath, self.settings.exclude_patterns):
            logger.debug(f"Skipped (pattern): {relpath}")
            return False
        return True

    # ── Classification ─────────────────────────────────────────

    def _classify(self, relpath: str) -> Optional[IndexedFile]:
        parts = PurePosixPath(relpath).parts
        prefix = self.policy.features_dir_parts
        if parts[: len(prefix)] != prefix:
            logger.debug(f"Outside features dir: {relpath}")
            return None

        inner = parts[len(prefix) :]
        if len(inner) == 1:
            # Directly in the features dir: belongs to no feature
            return IndexedFile(path=relpath, feature=None, layer=UNCLASSIFIED)

        feature = inner[0]
        layer = self.policy.layer_for_dirs(tuple(inner[1:-1])) or UNCLASSIFIED
        return IndexedFile(path=relpath, feature=feature, layer=layer)

    def _part_groups(
        self, files: tuple[IndexedFile, ...]
    ) -> tuple[tuple[PartGroup, ...], tuple[str, ...]]:
        if not self.language.has_part_directives:
            return (), ()
        suffix = self.policy.part_suffix
        paths = {f.path for f in files}
        groups: list[PartGroup] = []
        orphans: list[str] = []
        for f in files:
            path = PurePosixPath(f.path)
            if not path.stem.endswith(suffix) or path.stem == suffix:
                continue
            primary = path.with_name(path.stem[: -len(suffix)] + path.suffix).as_posix()
            if primary in paths:
                groups.append(PartGroup(primary=primary, part=f.path))
            else:
                orphans.append(f.path)
        return tuple(groups), tuple(orphans)
