"""
Error types raised by the analysis.
"""


class ResourceUnavailableError(RuntimeError):
    """An input or output resource could not be opened, or the input has no events."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"{location}: {reason}")
