"""
Histogram services.

Services responsible for booking, filling and persisting histograms.
"""

from .registry import HistogramRegistry, create_default_registry
from .writer import HistogramWriter

__all__ = [
    "HistogramRegistry",
    "HistogramWriter",
    "create_default_registry",
]
