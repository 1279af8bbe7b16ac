"""
OpenOutputHandler - Handles OPENING_OUTPUT state.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from services.histograms.writer import HistogramWriter
from .base import StateHandler


class OpenOutputHandler(StateHandler):
    """
    Handler for OPENING_OUTPUT state.

    Creates the output file only after the inputs were verified, so a run
    with unusable inputs leaves no output behind.
    """

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        output_file = HistogramWriter.open(context.config.output_file)
        self.logger.info(f"Opened output file {context.config.output_file}")

        next_state = self._determine_next_state(context)
        self._log_state_exit(context, next_state)
        return context.with_output_file(output_file), next_state
