"""
Pipeline context.

Immutable context object passed between state handlers.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional
from datetime import datetime

from domain.config import AnalysisConfig
from domain.statistics import SelectionStatistics
from services.histograms.registry import HistogramRegistry
from .states import PipelineState


@dataclass(frozen=True)
class PipelineContext:
    """
    Immutable context for pipeline execution.

    Contains all state needed for pipeline execution.
    Each state handler returns a new context with updated fields.
    """

    # Configuration
    config: AnalysisConfig

    # Current state
    current_state: PipelineState

    # Histograms filled by the run
    registry: HistogramRegistry

    # Execution metadata
    start_time: datetime = field(default_factory=datetime.now)

    # Resources
    input_events: dict[str, int] = field(default_factory=dict)  # file -> events in tree
    output_file: Optional[Any] = None

    # Results
    selection_stats: Optional[SelectionStatistics] = None
    histograms_written: int = 0

    # Error tracking
    error_message: Optional[str] = None
    error_details: Optional[dict] = None

    def with_state(self, new_state: PipelineState) -> 'PipelineContext':
        """
        Return new context with updated state.

        Args:
            new_state: New pipeline state

        Returns:
            New PipelineContext with updated state
        """
        return replace(self, current_state=new_state)

    def with_input_events(self, input_events: dict[str, int]) -> 'PipelineContext':
        """Return new context with the event count of every opened input file."""
        return replace(self, input_events=dict(input_events))

    def with_output_file(self, output_file: Optional[Any]) -> 'PipelineContext':
        """Return new context holding the opened (or released) output file."""
        return replace(self, output_file=output_file)

    def with_selection_stats(self, stats: SelectionStatistics) -> 'PipelineContext':
        """Return new context with cut-flow statistics."""
        return replace(self, selection_stats=stats)

    def with_histograms_written(self, count: int) -> 'PipelineContext':
        return replace(self, histograms_written=count)

    def with_error(self, message: str, details: Optional[dict] = None) -> 'PipelineContext':
        """
        Return new context with error information.

        Args:
            message: Error message
            details: Optional error details dict

        Returns:
            New PipelineContext with error information
        """
        return replace(
            self,
            current_state=PipelineState.FAILED,
            error_message=message,
            error_details=details or {}
        )

    @property
    def total_input_events(self) -> int:
        return sum(self.input_events.values())

    @property
    def events_to_process(self) -> dict[str, int]:
        """
        Number of events to read from each input file.

        Files are consumed in configuration order until ``max_events`` is reached.
        """
        remaining = self.config.max_events
        plan = {}
        for path in self.config.input_files:
            n_events = self.input_events.get(path, 0)
            if remaining is not None:
                n_events = min(n_events, remaining)
                remaining -= n_events
            plan[path] = n_events
        return plan

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        return (datetime.now() - self.start_time).total_seconds()

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self.current_state.is_terminal()

    @property
    def is_successful(self) -> bool:
        """Check if pipeline completed successfully."""
        return self.current_state == PipelineState.COMPLETED

    @property
    def has_error(self) -> bool:
        """Check if pipeline failed."""
        return self.current_state == PipelineState.FAILED

    def get_summary(self) -> dict:
        """
        Get summary of pipeline execution.

        Returns:
            Dict with execution summary
        """
        summary = {
            "state": str(self.current_state),
            "elapsed_time_sec": self.elapsed_time,
            "start_time": self.start_time.isoformat(),
            "input_files_count": len(self.input_events),
            "input_events": self.total_input_events,
            "histograms_written": self.histograms_written,
            "has_error": self.has_error,
            "error_message": self.error_message,
            "is_successful": self.is_successful,
        }
        if self.selection_stats is not None:
            summary["selection"] = self.selection_stats.to_dict()
        return summary
