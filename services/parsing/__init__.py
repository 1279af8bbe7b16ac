"""
Parsing services.

Services responsible for reading event collections from ROOT files.
"""

from .event_reader import EventReader

__all__ = [
    "EventReader",
]
