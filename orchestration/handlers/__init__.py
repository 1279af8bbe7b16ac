"""
State handlers for pipeline execution.

Each handler implements logic for a specific pipeline state.
"""

from .base import StateHandler
from .open_input_handler import OpenInputHandler
from .open_output_handler import OpenOutputHandler
from .processing_handler import ProcessingHandler
from .writing_handler import WritingHandler

__all__ = [
    "StateHandler",
    "OpenInputHandler",
    "OpenOutputHandler",
    "ProcessingHandler",
    "WritingHandler",
]
