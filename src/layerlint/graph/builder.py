"""Dependency graph construction from extracted type references."""

from __future__ import annotations

from typing import Callable, Iterable

from ..logging_config import get_logger
from ..policy.models import Policy
from ..scanning.index import SourceIndex
from ..scanning.languages import get_language_config
from ..scanning.syntax import ExtractedFile, SourceUnit
from .models import DependencyEdge, DependencyGraph

logger = get_logger(__name__)


def build_dependency_graph(
    extracted: Iterable[ExtractedFile], index: SourceIndex, policy: Policy
) -> DependencyGraph:
    """Resolve every candidate reference against the declared units.

    Names match exactly (case-sensitive). References to names declared
    nowhere in the index are library types and are dropped. Files that
    failed extraction contribute no units, so nothing resolves to them.
    """
    language = get_language_config(policy.language)

    units = sorted(
        (u for result in extracted for u in result.units),
        key=lambda u: (u.path, u.start_line, u.name),
    )
    by_name: dict[str, list[SourceUnit]] = {}
    for unit in units:
        by_name.setdefault(unit.name, []).append(unit)

    edges: dict[tuple[str, str], DependencyEdge] = {}
    unresolved = 0

    for unit in units:
        group = index.group_key(unit.path)
        for ref in unit.references:
            candidates = by_name.get(ref.name)
            if not candidates:
                unresolved += 1
                continue

            if language.is_private(ref.name):
                # Library-private: only visible inside its own file or part group
                continue

            for target in _narrow(unit, candidates, index, policy):
                if index.group_key(target.path) == group:
                    # References inside one logical file are self-references
                    continue
                key = (unit.qualified_name, target.qualified_name)
                if key in edges:
                    continue
                edges[key] = DependencyEdge(source=unit, target=target, line=ref.line)

    ordered = tuple(
        sorted(
            edges.values(),
            key=lambda e: (
                e.source.path, e.source.start_line, e.source.name, e.target.path, e.target.name
            ),
        )
    )
    logger.debug(
        f"Graph: {len(units)} units, {len(ordered)} edges, {unresolved} unresolved references"
    )
    return DependencyGraph(units=tuple(units), edges=ordered, unresolved_count=unresolved)


def _narrow(
    unit: SourceUnit, candidates: list[SourceUnit], index: SourceIndex, policy: Policy
) -> list[SourceUnit]:
    """Pick the closest declaration among same-named candidates.

    Preference: same file or part group, same feature, common feature.
    When none of these singles anything out every candidate is kept.
    """
    if len(candidates) == 1:
        return candidates

    group = index.group_key(unit.path)
    tiers: list[Callable[[SourceUnit], bool]] = [
        lambda c: index.group_key(c.path) == group,
        lambda c: c.feature is not None and c.feature == unit.feature,
        lambda c: c.feature == policy.common_feature,
    ]
    for matches in tiers:
        narrowed = [c for c in candidates if matches(c)]
        if narrowed:
            return narrowed

    logger.debug(
        f"Ambiguous reference {candidates[0].name} in {unit.path}: "
        f"{len(candidates)} declarations"
    )
    return candidates
