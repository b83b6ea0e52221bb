"""
layerlint - Layered-architecture conformance checker

Indexes a feature-first project, extracts declared types and the names
they reference, resolves those references into a dependency graph, and
reports every deviation from a declared layer policy: illegal
dependencies, naming, oversized files, part-file splits and misplaced
files.
"""

__version__ = "0.1.0"

from .api import check
from .conformance.models import ConformanceReport, Violation
from .models import Severity, ViolationKind
from .policy import Policy, default_policy, load_policy

__all__ = [
    "check",  # Main entry point
    "ConformanceReport",
    "Violation",
    "ViolationKind",
    "Severity",
    "Policy",
    "default_policy",
    "load_policy",
]
