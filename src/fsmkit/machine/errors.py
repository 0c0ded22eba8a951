"""Error codes and exceptions raised by the state machine.

Three families:
- ConfigurationError: caller misuse while building the machine
- LifecycleError: operation invalid for the machine's current phase
- TransitionError: no transition matches the trigger in the current state

None of them are retried; they propagate to whoever called the operation.
"""

from enum import Enum, auto


class ErrorCode(Enum):
    """All error codes raised by the engine."""

    # Configuration
    NO_STATES_DEFINED = auto()
    STATE_EXISTS = auto()
    TRANSITION_EXISTS = auto()
    START_STATE_NOT_MEMBER = auto()
    CANNOT_MODIFY_AFTER_START = auto()
    FOREIGN_STATE = auto()
    # Lifecycle
    ALREADY_STARTED = auto()
    NOT_STARTED = auto()
    COMPLETED = auto()
    BUSY = auto()
    ALREADY_IN_STATE = auto()
    # Transition
    INVALID_TRANSITION = auto()


class StateMachineError(Exception):
    """Base exception for state machine errors.

    Attributes:
        machine: Name of the machine that raised
        message: Human-readable message
        state: Offending state name, if any
        trigger: Offending trigger id, if any
        code: ErrorCode
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        machine: str,
        message: str,
        state: str | None = None,
        trigger: str | None = None,
    ):
        self.machine = machine
        self.message = message
        self.state = state
        self.trigger = trigger
        super().__init__(f"State Machine ({machine}) - {message}")


class ConfigurationError(StateMachineError):
    """Raised when the machine is assembled incorrectly."""


class LifecycleError(StateMachineError):
    """Raised when an operation is invalid for the current phase."""


class TransitionError(StateMachineError):
    """Raised when a trigger cannot be resolved."""


class NoStatesDefinedError(ConfigurationError):
    code = ErrorCode.NO_STATES_DEFINED


class StateExistsError(ConfigurationError):
    code = ErrorCode.STATE_EXISTS


class TransitionExistsError(ConfigurationError):
    code = ErrorCode.TRANSITION_EXISTS


class StartStateNotMemberError(ConfigurationError):
    code = ErrorCode.START_STATE_NOT_MEMBER


class CannotModifyAfterStartError(ConfigurationError):
    code = ErrorCode.CANNOT_MODIFY_AFTER_START


class ForeignStateError(ConfigurationError):
    """Raised when a state owned by another machine is referenced."""

    code = ErrorCode.FOREIGN_STATE


class AlreadyStartedError(LifecycleError):
    code = ErrorCode.ALREADY_STARTED


class NotStartedError(LifecycleError):
    code = ErrorCode.NOT_STARTED


class CompletedError(LifecycleError):
    code = ErrorCode.COMPLETED


class BusyError(LifecycleError):
    """Raised when an external trigger arrives while the queue is draining."""

    code = ErrorCode.BUSY


class AlreadyInStateError(LifecycleError):
    code = ErrorCode.ALREADY_IN_STATE


class InvalidTransitionError(TransitionError):
    code = ErrorCode.INVALID_TRANSITION
