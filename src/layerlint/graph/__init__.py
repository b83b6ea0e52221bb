"""Unit dependency graph."""

from .builder import build_dependency_graph
from .models import DependencyEdge, DependencyGraph

__all__ = ["DependencyEdge", "DependencyGraph", "build_dependency_graph"]
