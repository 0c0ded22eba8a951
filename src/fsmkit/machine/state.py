"""State - a named node of a state machine

Each state owns its local transition table and optional entry/exit hooks.
Triggers raised through a state are delegated to the owning machine.
"""

import weakref
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from ..core.ids import is_local_key, kebab_case, make_trigger_key
from .errors import (
    CannotModifyAfterStartError,
    ForeignStateError,
    TransitionExistsError,
)
from .transition import Transition
from .types import EntryHook, ExitHook

if TYPE_CHECKING:
    from .state_machine import StateMachine


class State:
    """A state of a StateMachine.

    The back-reference to the machine is weak: a state never keeps its
    machine alive.

    Attributes:
        entry_action: Optional hook awaited whenever the machine enters this state
        exit_action: Optional hook awaited whenever the machine leaves this state;
            a falsy result vetoes the change
    """

    def __init__(
        self,
        state_machine: "StateMachine",
        name: str,
        is_complete: bool = False,
        entry_action: EntryHook | None = None,
        exit_action: ExitHook | None = None,
    ):
        self._machine_ref = weakref.ref(state_machine)
        self._name = name
        self._id = kebab_case(name)
        self._is_complete = is_complete
        self._transitions: dict[str, Transition] = {}
        self.entry_action = entry_action
        self.exit_action = exit_action

    # === Properties ===

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> str:
        """Kebab-case key derived from the name."""
        return self._id

    @property
    def is_complete(self) -> bool:
        return self._is_complete

    @property
    def machine(self) -> "StateMachine":
        machine = self._machine_ref()
        if machine is None:
            raise RuntimeError(f"State '{self._name}' outlived its state machine")
        return machine

    @property
    def transitions(self) -> Mapping[str, Transition]:
        return MappingProxyType(self._transitions)

    # === Transitions ===

    def _local_key(self, trigger_id: str) -> str:
        if is_local_key(trigger_id):
            return trigger_id
        return make_trigger_key(self._id, trigger_id)

    def add_transition(self, trigger_id: str, target_state: "State") -> Transition:
        """Add a local transition from this state to a target state.

        Args:
            trigger_id: Trigger that fires the transition (normalized here)
            target_state: State to enter; must belong to the same machine

        Returns:
            The new Transition

        Raises:
            CannotModifyAfterStartError: machine already started
            ForeignStateError: target belongs to another machine
            TransitionExistsError: trigger already registered on this state
        """
        machine = self.machine
        local_key = make_trigger_key(self._id, trigger_id)

        if machine.started:
            raise CannotModifyAfterStartError(
                machine.name,
                f"Cannot add transition after start: {local_key}.",
                self._name,
                trigger_id,
            )
        if target_state.machine is not machine:
            raise ForeignStateError(
                machine.name,
                f"Target state ({target_state.name}) belongs to another machine.",
                target_state.name,
                trigger_id,
            )
        if local_key in self._transitions:
            raise TransitionExistsError(
                machine.name,
                f"Transition exists: {local_key}.",
                self._name,
                trigger_id,
            )

        transition = Transition(local_key, target_state)
        self._transitions[local_key] = transition
        return transition

    def get_transition(self, trigger_id: str) -> Transition | None:
        """Look up a local transition.

        Accepts either a bare trigger id ("next") or a full local key
        ("idle:next").
        """
        return self._transitions.get(self._local_key(trigger_id))

    def has_transition(self, trigger_id: str) -> bool:
        return self._local_key(trigger_id) in self._transitions

    # === Triggers ===

    async def trigger(self, trigger_id: str, send_global: bool = False) -> None:
        """Trigger the machine as an external caller.

        Rejected with BusyError while the machine is draining its queue.
        """
        await self.machine.trigger(trigger_id, send_global)

    async def trigger_internal(self, trigger_id: str, send_global: bool = False) -> None:
        """Trigger the machine from inside this state's own entry/exit hook.

        Never rejected as busy. While the machine is busy the trigger is only
        queued and this returns immediately; it runs after the transition in
        flight completes.
        """
        await self.machine._dispatch(trigger_id, send_global, internal=True)

    def __repr__(self) -> str:
        return f"State({self._name!r}, id={self._id!r}, is_complete={self._is_complete})"
