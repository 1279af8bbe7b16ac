"""
Pipeline states.

Explicit state enumeration for the pipeline state machine.
"""

from enum import Enum, auto


class PipelineState(Enum):
    """
    All possible states in the pipeline execution.

    States represent discrete phases of pipeline execution with
    clear entry/exit conditions and transitions.
    """

    # Initial state
    IDLE = auto()

    # Resource phase
    OPENING_INPUT = auto()
    OPENING_OUTPUT = auto()

    # Event loop
    PROCESSING = auto()

    # Persistence
    WRITING = auto()

    # Terminal states
    COMPLETED = auto()
    FAILED = auto()

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in (PipelineState.COMPLETED, PipelineState.FAILED)

    def __str__(self) -> str:
        """String representation of state."""
        return self.name


# Valid state transitions
VALID_TRANSITIONS = {
    PipelineState.IDLE: {
        PipelineState.OPENING_INPUT,
        PipelineState.FAILED,
    },
    PipelineState.OPENING_INPUT: {
        PipelineState.OPENING_OUTPUT,
        PipelineState.FAILED,
    },
    PipelineState.OPENING_OUTPUT: {
        PipelineState.PROCESSING,
        PipelineState.FAILED,
    },
    PipelineState.PROCESSING: {
        PipelineState.WRITING,
        PipelineState.FAILED,
    },
    PipelineState.WRITING: {
        PipelineState.COMPLETED,
        PipelineState.FAILED,
    },
    PipelineState.COMPLETED: set(),  # Terminal
    PipelineState.FAILED: set(),     # Terminal
}

# Happy-path successor of each non-terminal state
NEXT_STATE = {
    PipelineState.IDLE: PipelineState.OPENING_INPUT,
    PipelineState.OPENING_INPUT: PipelineState.OPENING_OUTPUT,
    PipelineState.OPENING_OUTPUT: PipelineState.PROCESSING,
    PipelineState.PROCESSING: PipelineState.WRITING,
    PipelineState.WRITING: PipelineState.COMPLETED,
}


def is_valid_transition(from_state: PipelineState, to_state: PipelineState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is valid
    """
    return to_state in VALID_TRANSITIONS.get(from_state, set())
