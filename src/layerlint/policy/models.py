"""Policy model: layers, naming rules, allowed dependencies.

A Policy is pure configuration plus self-validation. It knows nothing
about any concrete project; the Source Index and Conformance Engine ask it
questions ("which layer owns this folder?", "may X depend on Y?").
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Optional

from ..exceptions import PolicyError
from ..models import DEFAULT_SEVERITIES, Severity, ViolationKind

DEFAULT_THRESHOLD = 400
DEFAULT_COMMON_FEATURE = "common"
DEFAULT_FEATURES_DIR = "lib/features"
DEFAULT_BUSINESS_OBJECT_LAYER = "BUSINESS_OBJECT"
DEFAULT_PART_SUFFIX = "_components"


@dataclass(frozen=True)
class NamingRule:
    """Required shape of a declared type name.

    Any combination of prefix, suffix and a full-match regex. A rule with
    none of them accepts every name.
    """

    prefix: str = ""
    suffix: str = ""
    pattern: Optional[str] = None

    def __post_init__(self) -> None:
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise PolicyError(f"invalid naming pattern {self.pattern!r}: {e}")

    @property
    def is_unconstrained(self) -> bool:
        return not self.prefix and not self.suffix and self.pattern is None

    def matches(self, name: str) -> bool:
        if self.prefix and not name.startswith(self.prefix):
            return False
        if self.suffix and not name.endswith(self.suffix):
            return False
        if self.pattern is not None and re.fullmatch(self.pattern, name) is None:
            return False
        return True

    def describe(self) -> str:
        parts = []
        if self.prefix:
            parts.append(f"prefix '{self.prefix}'")
        if self.suffix:
            parts.append(f"suffix '{self.suffix}'")
        if self.pattern is not None:
            parts.append(f"pattern '{self.pattern}'")
        return " and ".join(parts) if parts else "any name"


@dataclass(frozen=True)
class LayerRule:
    """One layer: where its files live, how its types are named, what it may use."""

    name: str
    folder: str
    naming: NamingRule = field(default_factory=NamingRule)
    allowed: frozenset[str] = frozenset()
    forbidden: frozenset[str] = frozenset()
    # Types in a feature-private layer may only be referenced from the same feature
    feature_private: bool = False

    @property
    def folder_parts(self) -> tuple[str, ...]:
        return tuple(p for p in self.folder.strip("/").split("/"))


@dataclass(frozen=True)
class Policy:
    """The declared architecture: every layer plus global thresholds.

    Validated on construction; a structurally invalid policy raises
    PolicyError before any scanning begins.
    """

    layers: dict[str, LayerRule]
    threshold: int = DEFAULT_THRESHOLD
    common_feature: str = DEFAULT_COMMON_FEATURE
    features_dir: str = DEFAULT_FEATURES_DIR
    business_object_layer: str = DEFAULT_BUSINESS_OBJECT_LAYER
    part_suffix: str = DEFAULT_PART_SUFFIX
    language: str = "dart"
    severities: dict[ViolationKind, Severity] = field(
        default_factory=lambda: dict(DEFAULT_SEVERITIES)
    )

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        if isinstance(self.threshold, bool) or not isinstance(self.threshold, int):
            raise PolicyError(f"threshold must be an integer, got {self.threshold!r}")
        if self.threshold <= 0:
            raise PolicyError(f"threshold must be positive, got {self.threshold}")
        if not self.layers:
            raise PolicyError("policy declares no layers")
        if not self.common_feature.strip():
            raise PolicyError("common_feature must not be empty")
        if not self.features_dir.strip("/ "):
            raise PolicyError("features_dir must not be empty")
        if not self.part_suffix:
            raise PolicyError("part_suffix must not be empty")
        if self.business_object_layer not in self.layers:
            raise PolicyError(
                f"business object layer {self.business_object_layer!r} is not a declared layer"
            )

        seen_folders: dict[tuple[str, ...], str] = {}
        for key, rule in self.layers.items():
            if key != rule.name:
                raise PolicyError(f"layer key {key!r} does not match rule name {rule.name!r}")
            parts = rule.folder_parts
            if not rule.folder.strip("/ ") or any(not p.strip() for p in parts):
                raise PolicyError("layer folder must not be empty", layer=rule.name)
            if parts in seen_folders:
                raise PolicyError(
                    f"folder {rule.folder!r} is declared by both "
                    f"{seen_folders[parts]} and {rule.name}",
                    layer=rule.name,
                )
            seen_folders[parts] = rule.name

            for target in sorted(rule.allowed | rule.forbidden):
                if target not in self.layers:
                    raise PolicyError(f"unknown layer {target!r} referenced", layer=rule.name)
            if self.business_object_layer in rule.forbidden:
                raise PolicyError(
                    f"business objects cannot be forbidden ({self.business_object_layer} "
                    "is always a permitted target)",
                    layer=rule.name,
                )
            overlap = rule.allowed & rule.forbidden
            if overlap:
                raise PolicyError(
                    f"layers both allowed and forbidden: {', '.join(sorted(overlap))}",
                    layer=rule.name,
                )

        missing = set(ViolationKind) - set(self.severities)
        if missing:
            raise PolicyError(
                "no severity for " + ", ".join(sorted(k.value for k in missing))
            )

    # ── Lookups ────────────────────────────────────────────────

    @cached_property
    def _folder_index(self) -> dict[str, list[tuple[tuple[str, ...], str]]]:
        """Last folder segment -> [(segments, layer)], longest first."""
        index: dict[str, list[tuple[tuple[str, ...], str]]] = {}
        for rule in self.layers.values():
            parts = rule.folder_parts
            index.setdefault(parts[-1], []).append((parts, rule.name))
        for entries in index.values():
            entries.sort(key=lambda e: (-len(e[0]), e[1]))
        return index

    def layer_for_dirs(self, dir_parts: tuple[str, ...]) -> Optional[str]:
        """Classify a directory path (relative to its feature root).

        Walks from the innermost directory outward; at each level the
        longest declared folder whose segments end there wins.
        """
        for depth in range(len(dir_parts), 0, -1):
            for folder_parts, layer in self._folder_index.get(dir_parts[depth - 1], ()):
                size = len(folder_parts)
                if size <= depth and tuple(dir_parts[depth - size : depth]) == folder_parts:
                    return layer
        return None

    def rule(self, layer: str) -> LayerRule:
        return self.layers[layer]

    def is_business_object(self, layer: str) -> bool:
        return layer == self.business_object_layer

    def is_allowed(self, from_layer: str, to_layer: str) -> bool:
        """Whether an edge from_layer -> to_layer respects the allow-lists."""
        if self.is_business_object(to_layer):
            return True
        rule = self.layers.get(from_layer)
        if rule is None:
            return False
        return to_layer in rule.allowed and to_layer not in rule.forbidden

    def layers_matching_name(self, name: str) -> list[str]:
        """Layers (with a real naming constraint) whose rule accepts ``name``."""
        return [
            rule.name
            for rule in self.layers.values()
            if not rule.naming.is_unconstrained and rule.naming.matches(name)
        ]

    def severity_for(self, kind: ViolationKind) -> Severity:
        return self.severities[kind]

    @property
    def features_dir_parts(self) -> tuple[str, ...]:
        return tuple(p for p in self.features_dir.strip("/").split("/") if p)

    def to_dict(self) -> dict[str, Any]:
        """Plain representation used by ``layerlint policy --json``."""
        return {
            "threshold": self.threshold,
            "common_feature": self.common_feature,
            "features_dir": self.features_dir,
            "business_object_layer": self.business_object_layer,
            "part_suffix": self.part_suffix,
            "language": self.language,
            "layers": {
                name: {
                    "folder": rule.folder,
                    "naming": rule.naming.describe(),
                    "allowed": sorted(rule.allowed),
                    "forbidden": sorted(rule.forbidden),
                    "feature_private": rule.feature_private,
                }
                for name, rule in sorted(self.layers.items())
            },
            "severity": {kind.value: sev.value for kind, sev in sorted(
                self.severities.items(), key=lambda item: item[0].value
            )},
        }
