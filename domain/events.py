"""
Event-related domain models.

Immutable data structures representing batches of events read from a source.
"""

from dataclasses import dataclass
import awkward as ak


@dataclass(frozen=True)
class EventBatch:
    """
    A contiguous range of events from a single input file.

    ``events`` is a record array with one field per collection; each field
    holds a variable-length list of records per event.
    """

    events: ak.Array
    source: str
    entry_start: int
    event_count: int

    def __post_init__(self):
        """Validate the event batch."""
        if self.entry_start < 0:
            raise ValueError(f"entry_start must be non-negative, got {self.entry_start}")
        if self.event_count < 0:
            raise ValueError(f"event_count must be non-negative, got {self.event_count}")
        if self.event_count != len(self.events):
            raise ValueError(
                f"event_count ({self.event_count}) does not match number of events ({len(self.events)})"
            )

    @property
    def entry_stop(self) -> int:
        """Entry index one past the last event in the batch."""
        return self.entry_start + self.event_count

    @property
    def collections(self) -> list[str]:
        """Names of the collections present in the batch."""
        return list(self.events.fields)

    @classmethod
    def from_records(cls, records: list[dict], source: str = "memory", entry_start: int = 0) -> 'EventBatch':
        """
        Create an EventBatch from plain Python records.

        Args:
            records: One dict per event mapping collection name to a list of records
            source: Label of the originating resource
            entry_start: Entry index of the first record

        Returns:
            EventBatch wrapping the records as an awkward array
        """
        events = ak.Array(records)
        return cls(events=events, source=source, entry_start=entry_start, event_count=len(events))
