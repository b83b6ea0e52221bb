"""Individual conformance checks.

Each check is a plain function over the immutable run inputs that returns
a list of Violations. None of them mutate anything, so the engine may run
them in any order.
"""

from __future__ import annotations

import posixpath
from typing import Iterable, Optional

from ..exceptions import AnalysisError, ParsingError
from ..graph.models import DependencyEdge, DependencyGraph
from ..models import UNCLASSIFIED, ViolationKind
from ..policy.models import Policy
from ..scanning.index import SourceIndex
from ..scanning.syntax import ExtractedFile, FileSyntax, SourceUnit
from .models import Violation

CROSS_LAYER = "cross-layer"
CROSS_FEATURE = "cross-feature"


def _violation(
    policy: Policy,
    kind: ViolationKind,
    path: str,
    line_start: int,
    line_end: int,
    message: str,
    **extra,
) -> Violation:
    return Violation(
        kind=kind,
        severity=policy.severity_for(kind),
        path=path,
        line_start=line_start,
        line_end=line_end,
        message=message,
        **extra,
    )


# ── Dependencies ───────────────────────────────────────────────


def check_dependencies(graph: DependencyGraph, policy: Policy) -> list[Violation]:
    """One IllegalDependency per edge that breaks the layer or feature rules."""
    violations = []
    for edge in graph.edges:
        if policy.is_business_object(edge.target_layer):
            continue

        reasons = []
        scopes = []

        layer_reason = _layer_reason(edge, policy)
        if layer_reason:
            reasons.append(layer_reason)
            scopes.append(CROSS_LAYER)

        feature_reason = _feature_reason(edge, policy)
        if feature_reason:
            reasons.append(feature_reason)
            scopes.append(CROSS_FEATURE)

        if not reasons:
            continue

        source, target = edge.source, edge.target
        violations.append(
            _violation(
                policy,
                ViolationKind.ILLEGAL_DEPENDENCY,
                source.path,
                edge.line,
                edge.line,
                f"{source.name} ({_where(source)}) depends on "
                f"{target.name} ({_where(target)}): " + "; ".join(reasons),
                feature=source.feature,
                units=(source.qualified_name, target.qualified_name),
                scope="+".join(scopes),
            )
        )
    return violations


def _where(unit: SourceUnit) -> str:
    feature = unit.feature if unit.feature is not None else "no feature"
    return f"{unit.layer}, {feature}"


def _layer_reason(edge: DependencyEdge, policy: Policy) -> Optional[str]:
    # Unclassified files are reported once as structure problems
    if UNCLASSIFIED in (edge.source_layer, edge.target_layer):
        return None
    if policy.is_allowed(edge.source_layer, edge.target_layer):
        return None
    return f"{edge.source_layer} may not depend on {edge.target_layer}"


def _feature_reason(edge: DependencyEdge, policy: Policy) -> Optional[str]:
    source_feature, target_feature = edge.source_feature, edge.target_feature
    if target_feature is None or source_feature == target_feature:
        return None

    target_rule = policy.layers.get(edge.target_layer)
    if target_rule is not None and target_rule.feature_private:
        return f"{edge.target_layer} is private to feature '{target_feature}'"

    if target_feature == policy.common_feature:
        return None
    source_name = f"feature '{source_feature}'" if source_feature else "a file outside any feature"
    return f"{source_name} may not depend on feature '{target_feature}'"


# ── Naming ─────────────────────────────────────────────────────


def check_naming(units: Iterable[SourceUnit], policy: Policy) -> list[Violation]:
    """One NamingViolation per unit whose name breaks its folder's layer rule."""
    violations = []
    for unit in units:
        if unit.naming_ok:
            continue
        rule = policy.rule(unit.layer)
        message = (
            f"{unit.name} is in a {unit.layer} folder ({rule.folder}) "
            f"and must have {rule.naming.describe()}"
        )
        probable = [name for name in policy.layers_matching_name(unit.name) if name != unit.layer]
        if probable:
            message += f"; the name suggests {' or '.join(probable)} (misplaced file?)"
        violations.append(
            _violation(
                policy,
                ViolationKind.NAMING,
                unit.path,
                unit.start_line,
                unit.end_line,
                message,
                feature=unit.feature,
                units=(unit.qualified_name,),
            )
        )
    return violations


# ── File size and part files ───────────────────────────────────


def check_file_sizes(
    index: SourceIndex, extracted: Iterable[ExtractedFile], policy: Policy
) -> list[Violation]:
    """Size limits per logical file plus the part-file convention.

    A logical file is a primary file together with its parts. When the
    combined size exceeds the threshold the split must be valid: exactly
    one part, the ``<stem><part_suffix>`` sibling, linked both ways by
    ``part`` / ``part of`` directives.
    """
    syntax_by_path = {r.path: r.syntax for r in extracted if r.syntax is not None}
    sibling_of = {g.primary: g.part for g in index.part_groups}
    orphans = set(index.orphan_parts)
    threshold = policy.threshold

    declared_parts: set[str] = set()
    violations = []

    for indexed in index.files:
        path = indexed.path
        syntax = syntax_by_path.get(path)
        if syntax is None or index.group_key(path) != path:
            # Unparsed files are reported elsewhere; grouped parts are checked with their primary
            continue

        if path in orphans:
            primary = _primary_name(path, policy)
            violations.append(
                _violation(
                    policy,
                    ViolationKind.PART_FILE_CONVENTION,
                    path,
                    1,
                    1,
                    f"part file has no primary file (expected {primary} next to it)",
                    feature=indexed.feature,
                )
            )

        # Parts that are not indexed (generated code, excluded files) are not splits
        resolved = [p for p in (_resolve_uri(path, uri) for uri in syntax.parts) if index.get(p)]
        declared_parts.update(resolved)
        sibling = sibling_of.get(path)
        split = set(resolved) | ({sibling} if sibling else set())

        if not split:
            if syntax.line_count > threshold:
                violations.append(_size_violation(policy, indexed.feature, syntax, threshold))
            continue

        combined = syntax.line_count + sum(
            syntax_by_path[p].line_count for p in sorted(split) if p in syntax_by_path
        )
        problem = _split_problem(path, sibling, resolved, syntax_by_path, policy)

        if problem is not None:
            violations.append(
                _violation(
                    policy,
                    ViolationKind.PART_FILE_CONVENTION,
                    path,
                    1,
                    1,
                    problem,
                    feature=indexed.feature,
                )
            )
            if combined > threshold:
                violations.append(
                    _violation(
                        policy,
                        ViolationKind.FILE_SIZE,
                        path,
                        1,
                        syntax.line_count,
                        f"{combined} lines with its parts (limit {threshold}) "
                        "and no valid part-file split",
                        feature=indexed.feature,
                    )
                )
            continue

        # Valid split: each physical file must still fit
        for physical in (syntax, syntax_by_path.get(sibling)):
            if physical is not None and physical.line_count > threshold:
                violations.append(_size_violation(policy, indexed.feature, physical, threshold))

    violations.extend(_stray_parts(index, syntax_by_path, declared_parts, orphans, policy))
    return violations


def _size_violation(
    policy: Policy, feature: Optional[str], syntax: FileSyntax, threshold: int
) -> Violation:
    return _violation(
        policy,
        ViolationKind.FILE_SIZE,
        syntax.path,
        1,
        syntax.line_count,
        f"{syntax.line_count} lines (limit {threshold}); split it into "
        f"{_part_name(syntax.path, policy)}",
        feature=feature,
    )


def _split_problem(
    path: str,
    sibling: Optional[str],
    declared: list[str],
    syntax_by_path: dict[str, FileSyntax],
    policy: Policy,
) -> Optional[str]:
    """Describe what is wrong with a file's split, or None when it is valid."""
    expected = _part_name(path, policy)
    extras = sorted(p for p in declared if p != sibling)

    if extras:
        return (
            f"declares part file(s) {', '.join(extras)}; the only allowed part is {expected}"
        )
    if sibling is None:
        return None
    if sibling not in declared:
        return f"{sibling} exists but is not declared with part '{posixpath.basename(sibling)}'"

    part = syntax_by_path.get(sibling)
    if part is None:
        # The part failed to parse and is reported on its own
        return None
    if part.part_of is None:
        return f"{sibling} does not declare part of '{posixpath.basename(path)}'"
    if _is_uri(part.part_of) and _resolve_uri(sibling, part.part_of) != path:
        return f"{sibling} declares part of '{part.part_of}' instead of this file"
    return None


def _stray_parts(
    index: SourceIndex,
    syntax_by_path: dict[str, FileSyntax],
    declared_parts: set[str],
    orphans: set[str],
    policy: Policy,
) -> list[Violation]:
    """Files that claim to be a part of something that never declared them."""
    violations = []
    grouped = {g.part for g in index.part_groups}
    for indexed in index.files:
        syntax = syntax_by_path.get(indexed.path)
        if syntax is None or syntax.part_of is None:
            continue
        if indexed.path in grouped or indexed.path in orphans or indexed.path in declared_parts:
            continue
        violations.append(
            _violation(
                policy,
                ViolationKind.PART_FILE_CONVENTION,
                indexed.path,
                1,
                1,
                f"declares part of '{syntax.part_of}' but part files must be named "
                f"<primary>{policy.part_suffix} and declared by their primary",
                feature=indexed.feature,
            )
        )
    return violations


def _is_uri(target: str) -> bool:
    return "/" in target or target.endswith(".dart") or ":" in target


def _resolve_uri(from_path: str, uri: str) -> str:
    if ":" in uri:
        # package: URIs cannot be mapped without the pubspec; keep them verbatim
        return uri
    return posixpath.normpath(posixpath.join(posixpath.dirname(from_path), uri))


def _part_name(path: str, policy: Policy) -> str:
    stem, ext = posixpath.splitext(posixpath.basename(path))
    return f"{stem}{policy.part_suffix}{ext}"


def _primary_name(part_path: str, policy: Policy) -> str:
    stem, ext = posixpath.splitext(posixpath.basename(part_path))
    return f"{stem[: -len(policy.part_suffix)]}{ext}"


# ── Structure ──────────────────────────────────────────────────


def check_structure(index: SourceIndex, policy: Policy) -> list[Violation]:
    """StructureViolation for every file outside a feature or a typed folder."""
    violations = []
    for indexed in index.files:
        if indexed.is_classified:
            continue
        if indexed.feature is None:
            message = f"file sits directly in {policy.features_dir}; move it into a feature folder"
        else:
            folders = ", ".join(sorted(rule.folder for rule in policy.layers.values()))
            message = (
                f"file is not under a typed folder of feature '{indexed.feature}' "
                f"(expected one of: {folders})"
            )
        violations.append(
            _violation(
                policy,
                ViolationKind.STRUCTURE,
                indexed.path,
                1,
                1,
                message,
                feature=indexed.feature,
            )
        )
    return violations


# ── Skipped files ──────────────────────────────────────────────


def check_file_errors(
    index: SourceIndex, extracted: Iterable[ExtractedFile], policy: Policy
) -> list[Violation]:
    """One ParseError or IOError per file that could not be analyzed."""
    violations = []
    for failure in index.access_failures:
        violations.append(
            _violation(policy, ViolationKind.IO_ERROR, failure.path, 1, 1, failure.reason)
        )

    for result in extracted:
        if result.error is None:
            continue
        indexed = index.get(result.path)
        kind, line, reason = _describe_error(result.error)
        violations.append(
            _violation(
                policy,
                kind,
                result.path,
                line,
                line,
                reason,
                feature=indexed.feature if indexed else None,
            )
        )
    return violations


def _describe_error(error: AnalysisError) -> tuple[ViolationKind, int, str]:
    if isinstance(error, ParsingError):
        return ViolationKind.PARSE_ERROR, error.line or 1, error.reason
    return ViolationKind.IO_ERROR, 1, error.reason
