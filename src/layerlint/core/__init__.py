"""Pipeline orchestration."""

from .pipeline import ConformancePipeline

__all__ = ["ConformancePipeline"]
