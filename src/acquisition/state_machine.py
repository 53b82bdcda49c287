"""State machine for a single feed acquisition."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class AcquisitionState(str, Enum):
    """State of one acquisition request.

    States follow the pipeline stages in order; there is no backtracking:
    - PENDING: Not yet started
    - RATE_CHECKED: Passed the rate gate
    - INPUT_VALIDATED: Month/day accepted
    - CACHE_HIT: Served from cache
    - FETCHED: Raw payload received from upstream
    - VALIDATED: Payload coerced to a Feed
    - SANITIZED: Feed sanitized
    - CACHED: Feed written back to cache (or write failure tolerated)
    - DONE: Feed returned to the caller
    - FAILED: Failed with a classified error
    """

    PENDING = "PENDING"
    RATE_CHECKED = "RATE_CHECKED"
    INPUT_VALIDATED = "INPUT_VALIDATED"
    CACHE_HIT = "CACHE_HIT"
    FETCHED = "FETCHED"
    VALIDATED = "VALIDATED"
    SANITIZED = "SANITIZED"
    CACHED = "CACHED"
    DONE = "DONE"
    FAILED = "FAILED"


_VALID_TRANSITIONS: dict[AcquisitionState, set[AcquisitionState]] = {
    AcquisitionState.PENDING: {
        AcquisitionState.RATE_CHECKED,
        AcquisitionState.FAILED,
    },
    AcquisitionState.RATE_CHECKED: {
        AcquisitionState.INPUT_VALIDATED,
        AcquisitionState.FAILED,
    },
    # Cache bypass or miss goes straight to the fetch
    AcquisitionState.INPUT_VALIDATED: {
        AcquisitionState.CACHE_HIT,
        AcquisitionState.FETCHED,
        AcquisitionState.FAILED,
    },
    AcquisitionState.CACHE_HIT: {AcquisitionState.DONE, AcquisitionState.FAILED},
    AcquisitionState.FETCHED: {AcquisitionState.VALIDATED, AcquisitionState.FAILED},
    AcquisitionState.VALIDATED: {
        AcquisitionState.SANITIZED,
        AcquisitionState.FAILED,
    },
    AcquisitionState.SANITIZED: {AcquisitionState.CACHED, AcquisitionState.FAILED},
    AcquisitionState.CACHED: {AcquisitionState.DONE, AcquisitionState.FAILED},
    AcquisitionState.DONE: set(),  # Terminal state
    AcquisitionState.FAILED: set(),  # Terminal state
}

# Stage attempted next from each non-terminal state. A cache lookup failing
# from INPUT_VALIDATED is reported as the fetch stage.
_PENDING_STAGE: dict[AcquisitionState, str] = {
    AcquisitionState.PENDING: "rate_check",
    AcquisitionState.RATE_CHECKED: "input_validation",
    AcquisitionState.INPUT_VALIDATED: "fetch",
    AcquisitionState.CACHE_HIT: "respond",
    AcquisitionState.FETCHED: "validation",
    AcquisitionState.VALIDATED: "sanitization",
    AcquisitionState.SANITIZED: "cache_write",
    AcquisitionState.CACHED: "respond",
}


class AcquisitionStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        request_id: str,
        from_state: AcquisitionState,
        to_state: AcquisitionState,
    ) -> None:
        """Initialize the transition error.

        Args:
            request_id: Identifier of the acquisition request.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.request_id = request_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for request '{request_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class AcquisitionStateMachine:
    """Tracks and validates the stages of one acquisition request."""

    def __init__(self, request_id: str) -> None:
        """Initialize the state machine in PENDING state.

        Args:
            request_id: Identifier of the acquisition request.
        """
        self._request_id = request_id
        self._state = AcquisitionState.PENDING
        self._history: list[AcquisitionState] = [AcquisitionState.PENDING]
        self._log = logger.bind(component="acquisition", request_id=request_id)

    @property
    def state(self) -> AcquisitionState:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> tuple[AcquisitionState, ...]:
        """Get every state visited so far, in order."""
        return tuple(self._history)

    @property
    def pending_stage(self) -> str | None:
        """Get the stage the pipeline attempts next, or None when terminal."""
        return _PENDING_STAGE.get(self._state)

    def can_transition(self, to_state: AcquisitionState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid.
        """
        return to_state in _VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: AcquisitionState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            AcquisitionStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.value,
                to_state=to_state.value,
            )
            raise AcquisitionStateTransitionError(
                self._request_id, self._state, to_state
            )

        self._log.debug(
            "acquisition_state_transition",
            from_state=self._state.value,
            to_state=to_state.value,
        )
        self._state = to_state
        self._history.append(to_state)

    def is_terminal(self) -> bool:
        """Check if the current state is terminal."""
        return self._state in (AcquisitionState.DONE, AcquisitionState.FAILED)
