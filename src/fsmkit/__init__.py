"""fsmkit - asynchronous finite state machine engine"""

from .core.ids import kebab_case
from .machine import (
    BusyError,
    ErrorCode,
    State,
    StateMachine,
    StateMachineError,
    Transition,
    TransitionRecord,
)

__version__ = "0.1.0"

__all__ = [
    "kebab_case",
    "State",
    "StateMachine",
    "StateMachineError",
    "BusyError",
    "ErrorCode",
    "Transition",
    "TransitionRecord",
]
