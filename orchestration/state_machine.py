"""
State machine for pipeline execution.

Orchestrates state transitions and handler execution.
"""

import logging
from typing import Dict

from domain.errors import ResourceUnavailableError
from .context import PipelineContext
from .states import PipelineState, NEXT_STATE, is_valid_transition
from .handlers.base import StateHandler


class StateMachine:
    """
    State machine for orchestrating pipeline execution.

    Manages state transitions and delegates work to state handlers.
    """

    def __init__(self, handlers: Dict[PipelineState, StateHandler]):
        """
        Initialize state machine.

        Args:
            handlers: Dict mapping states to their handlers
        """
        self.handlers = handlers
        self.logger = logging.getLogger(self.__class__.__name__)

        self._validate_handlers()

    def _validate_handlers(self):
        """Validate that every working state has a handler."""
        required_states = {
            PipelineState.OPENING_INPUT,
            PipelineState.OPENING_OUTPUT,
            PipelineState.PROCESSING,
            PipelineState.WRITING,
        }

        missing = required_states - set(self.handlers.keys())
        if missing:
            raise ValueError(
                f"Missing handlers for states: {sorted(str(s) for s in missing)}"
            )

    def run(self, initial_context: PipelineContext) -> PipelineContext:
        """
        Run the state machine until a terminal state is reached.

        Args:
            initial_context: Initial pipeline context

        Returns:
            Final pipeline context
        """
        context = initial_context

        self.logger.info("=" * 60)
        self.logger.info("Starting NEC calculation")
        self.logger.info("=" * 60)

        while not context.is_terminal:
            try:
                context = self._execute_state(context)
            except ResourceUnavailableError as e:
                self.logger.error(f"PANIC: {e}")
                context = context.with_error(
                    message=str(e),
                    details={"state": str(context.current_state), "location": e.location}
                )
            except Exception as e:
                self.logger.error(f"Error in state {context.current_state}: {e}", exc_info=True)
                context = context.with_error(
                    message=f"Error in {context.current_state}: {str(e)}",
                    details={"state": str(context.current_state)}
                )

        self._log_final_state(context)
        return context

    def _execute_state(self, context: PipelineContext) -> PipelineContext:
        """
        Execute the current state's handler.

        Args:
            context: Current pipeline context

        Returns:
            Updated pipeline context
        """
        current_state = context.current_state

        self.logger.debug(f"Current state: {current_state}")

        handler = self.handlers.get(current_state)

        if handler is None:
            next_state = NEXT_STATE[current_state]
            self.logger.debug(f"No handler for state {current_state}, moving to {next_state}")
            return context.with_state(next_state)

        updated_context, next_state = handler.handle(context)

        if not is_valid_transition(current_state, next_state):
            self.logger.error(f"Invalid transition: {current_state} → {next_state}")
            return context.with_error(
                message=f"Invalid state transition: {current_state} → {next_state}"
            )

        self.logger.debug(f"Transition: {current_state} → {next_state}")
        return updated_context.with_state(next_state)

    def _log_final_state(self, context: PipelineContext):
        """Log final pipeline state."""
        self.logger.info("=" * 60)

        if context.is_successful:
            self.logger.info("NEC calculation finished!")
        else:
            self.logger.error(f"NEC calculation failed: {context.error_message}")

        self.logger.info(f"Final state: {context.current_state}")
        self.logger.info(f"Elapsed time: {context.elapsed_time:.1f}s")

        summary = context.get_summary()
        for key, value in summary.items():
            self.logger.info(f"  {key}: {value}")

        self.logger.info("=" * 60)
