"""
Domain models for the NEC analysis.

Pure data structures with validation, no business logic.
"""

from .events import EventBatch
from .statistics import SelectionStatistics
from .histograms import AxisSpec, HistogramSpec, FillRule
from .errors import ResourceUnavailableError
from .config import AnalysisConfig, CollectionNames

__all__ = [
    "EventBatch",
    "SelectionStatistics",
    "AxisSpec",
    "HistogramSpec",
    "FillRule",
    "ResourceUnavailableError",
    "AnalysisConfig",
    "CollectionNames",
]
