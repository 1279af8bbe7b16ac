"""
OpenInputHandler - Handles OPENING_INPUT state.

Opens every input file once to check it is readable and count its events.
"""

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from domain.errors import ResourceUnavailableError
from services.parsing.event_reader import EventReader
from .base import StateHandler


class OpenInputHandler(StateHandler):
    """
    Handler for OPENING_INPUT state.

    Fails the run if any input cannot be opened or if the inputs hold no
    events at all.
    """

    def __init__(self, event_reader: EventReader):
        super().__init__()
        self.event_reader = event_reader

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        input_events = {}
        for file_path in context.config.input_files:
            n_events = self.event_reader.count_events(file_path)
            input_events[file_path] = n_events
            self.logger.info(f"Opened input {file_path} ({n_events} events)")

        if sum(input_events.values()) == 0:
            raise ResourceUnavailableError(", ".join(context.config.input_files), "no events found")

        next_state = self._determine_next_state(context)
        self._log_state_exit(context, next_state)
        return context.with_input_events(input_events), next_state
