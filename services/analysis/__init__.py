"""
Analysis services.

Event selection and histogram accumulation for the NEC observables.
"""

from .nec_analyzer import NECAnalyzer
from .threaded_processor import ThreadedEventProcessor

__all__ = [
    "NECAnalyzer",
    "ThreadedEventProcessor",
]
