"""
Statistics-related domain models.

Immutable cut-flow counters for the event selection.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SelectionStatistics:
    """
    Cut-flow counters for a set of processed events.

    Counters add up: every event read is either rejected by exactly one gate
    or selected. Instances combine with ``+`` so worker results can be merged
    in any order.
    """

    events_read: int = 0
    failed_availability: int = 0
    failed_q2_window: int = 0
    events_selected: int = 0
    omitted_fills: int = 0

    def __post_init__(self):
        """Validate selection statistics."""
        for name in ("events_read", "failed_availability", "failed_q2_window",
                     "events_selected", "omitted_fills"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        rejected = self.failed_availability + self.failed_q2_window
        if rejected + self.events_selected != self.events_read:
            raise ValueError(
                f"failed_availability ({self.failed_availability}) + failed_q2_window "
                f"({self.failed_q2_window}) + events_selected ({self.events_selected}) "
                f"must equal events_read ({self.events_read})"
            )

    def __add__(self, other: 'SelectionStatistics') -> 'SelectionStatistics':
        if not isinstance(other, SelectionStatistics):
            return NotImplemented
        return SelectionStatistics(
            events_read=self.events_read + other.events_read,
            failed_availability=self.failed_availability + other.failed_availability,
            failed_q2_window=self.failed_q2_window + other.failed_q2_window,
            events_selected=self.events_selected + other.events_selected,
            omitted_fills=self.omitted_fills + other.omitted_fills,
        )

    @property
    def events_skipped(self) -> int:
        """Events rejected by either gate."""
        return self.failed_availability + self.failed_q2_window

    @property
    def selection_efficiency(self) -> float:
        """Selected events as percentage of events read."""
        if self.events_read == 0:
            return 0.0
        return (self.events_selected / self.events_read) * 100

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "events_read": self.events_read,
            "failed_availability": self.failed_availability,
            "failed_q2_window": self.failed_q2_window,
            "events_selected": self.events_selected,
            "events_skipped": self.events_skipped,
            "selection_efficiency": f"{self.selection_efficiency:.1f}%",
            "omitted_fills": self.omitted_fills,
        }
