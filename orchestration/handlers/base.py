"""
Base state handler.

Abstract base class for all state handlers.
"""

from abc import ABC, abstractmethod
import logging

from orchestration.context import PipelineContext
from orchestration.states import PipelineState, NEXT_STATE


class StateHandler(ABC):
    """
    Base class for state handlers.

    Each state handler implements the logic for transitioning
    from one state to the next.
    """

    def __init__(self):
        """Initialize state handler."""
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        """
        Handle the current state and determine next state.

        Args:
            context: Current pipeline context

        Returns:
            Tuple of (updated_context, next_state)

        Raises:
            ResourceUnavailableError: If a required resource cannot be used
        """
        pass

    def _determine_next_state(self, context: PipelineContext) -> PipelineState:
        """Next state on success; the pipeline stages run in a fixed order."""
        return NEXT_STATE.get(context.current_state, PipelineState.COMPLETED)

    def _log_state_entry(self, context: PipelineContext):
        """Log entry to state."""
        self.logger.debug(f"Entering state: {context.current_state}")

    def _log_state_exit(self, context: PipelineContext, next_state: PipelineState):
        """Log exit from state."""
        self.logger.debug(f"Exiting state: {context.current_state} → {next_state}")
