"""Data models for the unit dependency graph.

Nodes are SourceUnits; an edge A -> B means A's declaration references
B's declared name. Edges carry both endpoints, so the layer pair and the
feature pair the Conformance Engine consumes are read straight off them.
"""

from dataclasses import dataclass
from typing import Optional

from ..scanning.syntax import SourceUnit


@dataclass(frozen=True)
class DependencyEdge:
    """A resolved reference from one unit to another."""

    source: SourceUnit
    target: SourceUnit
    line: int  # first line in the source declaration that names the target

    @property
    def source_layer(self) -> str:
        return self.source.layer

    @property
    def target_layer(self) -> str:
        return self.target.layer

    @property
    def source_feature(self) -> Optional[str]:
        return self.source.feature

    @property
    def target_feature(self) -> Optional[str]:
        return self.target.feature

    @property
    def cross_feature(self) -> bool:
        return self.source.feature != self.target.feature


@dataclass(frozen=True)
class DependencyGraph:
    """Immutable unit graph for one run.

    Attributes:
        units: Every extracted unit, sorted by (path, line, name)
        edges: Deduplicated edges, sorted by source then target
        unresolved_count: References naming no indexed unit (library types)
    """

    units: tuple[SourceUnit, ...] = ()
    edges: tuple[DependencyEdge, ...] = ()
    unresolved_count: int = 0

    @property
    def edge_count(self) -> int:
        return len(self.edges)
