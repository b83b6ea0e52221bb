"""Conformance Engine: typed violations against the declared policy."""

from .engine import ConformanceEngine
from .models import ConformanceReport, Violation

__all__ = ["ConformanceEngine", "ConformanceReport", "Violation"]
