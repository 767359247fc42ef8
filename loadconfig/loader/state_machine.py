"""Load run state machine implementation."""

from enum import Enum, auto
from typing import ClassVar


class LoadState(Enum):
    """Configuration load run states.

    State transitions:
        UNLOADED -> LOADING: Start loading the root configuration file
        LOADING -> LOADED: Every line of the tree was processed without error
        LOADING -> FAILED: At least one line or mandatory file failed
        UNLOADED -> FAILED: The run could not start
    """

    UNLOADED = auto()
    LOADING = auto()
    LOADED = auto()
    FAILED = auto()


class LoadStateError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: LoadState, to_state: LoadState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


class LoadStateMachine:
    """State machine for a single configuration load run."""

    VALID_TRANSITIONS: ClassVar[dict[LoadState, set[LoadState]]] = {
        LoadState.UNLOADED: {LoadState.LOADING, LoadState.FAILED},
        LoadState.LOADING: {LoadState.LOADED, LoadState.FAILED},
        LoadState.LOADED: set(),  # Terminal state
        LoadState.FAILED: set(),  # Terminal state
    }

    def __init__(self) -> None:
        """Initialize the state machine in UNLOADED state."""
        self._state = LoadState.UNLOADED

    @property
    def state(self) -> LoadState:
        """Get the current state."""
        return self._state

    def can_transition(self, to_state: LoadState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: LoadState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            LoadStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            raise LoadStateError(self._state, to_state)
        self._state = to_state

    def is_terminal(self) -> bool:
        """Check if the run has finished."""
        return self._state in (LoadState.LOADED, LoadState.FAILED)

    def is_failed(self) -> bool:
        """Check if the run has failed."""
        return self._state == LoadState.FAILED
