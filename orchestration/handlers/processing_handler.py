"""
ProcessingHandler - Handles PROCESSING state.

Runs the event loop over all inputs and fills the run registry.
"""

from datetime import datetime

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from services.analysis.threaded_processor import ThreadedEventProcessor
from .base import StateHandler


class ProcessingHandler(StateHandler):
    """
    Handler for PROCESSING state.

    Delegates the event loop to ``ThreadedEventProcessor`` and stores the
    combined cut-flow statistics in the context.
    """

    def __init__(self, processor: ThreadedEventProcessor):
        super().__init__()
        self.processor = processor

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        plan = context.events_to_process
        self.logger.info(
            f"Processing {sum(plan.values())} events from {len(plan)} files "
            f"(min Q2 = {context.config.min_q2}, max Q2 = {context.config.max_q2})"
        )

        start = datetime.now()
        stats = self.processor.process_files(plan, context.registry)
        elapsed = (datetime.now() - start).total_seconds()

        self.logger.info(
            f"Processed {stats.events_read} events in {elapsed:.1f}s: "
            f"{stats.failed_availability} missing collections, "
            f"{stats.failed_q2_window} outside Q2 window, "
            f"{stats.events_selected} selected"
        )

        next_state = self._determine_next_state(context)
        self._log_state_exit(context, next_state)
        return context.with_selection_stats(stats), next_state
