"""Machine module

State machine engine components:
- types: hook capability types, TransitionRecord
- errors: ErrorCode and the exception hierarchy
- transition: Transition
- state: State
- queue: TriggerQueue (pending trigger FIFO + busy flag)
- state_machine: StateMachine orchestrator
"""

from .errors import (
    AlreadyInStateError,
    AlreadyStartedError,
    BusyError,
    CannotModifyAfterStartError,
    CompletedError,
    ConfigurationError,
    ErrorCode,
    ForeignStateError,
    InvalidTransitionError,
    LifecycleError,
    NoStatesDefinedError,
    NotStartedError,
    StartStateNotMemberError,
    StateExistsError,
    StateMachineError,
    TransitionError,
    TransitionExistsError,
)
from .types import EntryHook, ExitHook, TransitionRecord
from .transition import Transition
from .state import State
from .queue import TriggerQueue
from .state_machine import StateMachine

__all__ = [
    # Types
    "EntryHook",
    "ExitHook",
    "TransitionRecord",
    # Errors
    "ErrorCode",
    "StateMachineError",
    "ConfigurationError",
    "LifecycleError",
    "TransitionError",
    "NoStatesDefinedError",
    "StateExistsError",
    "TransitionExistsError",
    "StartStateNotMemberError",
    "CannotModifyAfterStartError",
    "ForeignStateError",
    "AlreadyStartedError",
    "NotStartedError",
    "CompletedError",
    "BusyError",
    "AlreadyInStateError",
    "InvalidTransitionError",
    # Engine
    "Transition",
    "State",
    "TriggerQueue",
    "StateMachine",
]
