"""Transition - immutable trigger/target pair"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .state import State


@dataclass(frozen=True, eq=False)
class Transition:
    """A transition to a target state.

    Attributes:
        trigger_id: Trigger key that selects this transition
            (local key "<state-id>:<trigger>" or bare global trigger id)
        target_state: State entered when the transition fires. Not owned.
    """

    trigger_id: str
    target_state: "State"

    def __repr__(self) -> str:
        return f"Transition({self.trigger_id!r} -> {self.target_state.id!r})"
