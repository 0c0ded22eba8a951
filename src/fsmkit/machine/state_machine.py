"""StateMachine - the orchestrator

Responsibilities:
- Registry of states and global transitions
- Lifecycle pointers: start / current / previous state
- Trigger resolution: local transition first, then global
- State change: exit hooks (may veto), commit, entry hooks
- Single-flight processing: one transition in flight, the rest queued FIFO

Concurrency model: cooperative, single event loop. The only suspension points
are hook invocations. The queue's processing flag is the busy flag and the
only mutual exclusion used.
"""

from collections import deque
from types import MappingProxyType
from typing import Any, Mapping

from ..config import HISTORY_MAX_LENGTH, METRICS_ENABLED
from ..core.ids import kebab_case, make_trigger_key, split_trigger_key
from ..telemetry import format_machine_log, get_logger, metrics
from .errors import (
    AlreadyInStateError,
    AlreadyStartedError,
    BusyError,
    CannotModifyAfterStartError,
    CompletedError,
    ForeignStateError,
    InvalidTransitionError,
    NoStatesDefinedError,
    NotStartedError,
    StartStateNotMemberError,
    StateExistsError,
    TransitionExistsError,
)
from .queue import TriggerQueue
from .state import State
from .transition import Transition
from .types import EntryHook, ExitHook, TransitionRecord, call_hook

logger = get_logger(__name__)


class StateMachine:
    """Finite state machine driven by triggers.

    States and transitions are registered first, then ``start()`` enters the
    start state and ``trigger()`` moves the machine along.

    Usage:
        machine = StateMachine("door")
        closed = machine.create_state("closed")
        opened = machine.create_state("opened")
        closed.add_transition("open", opened)
        opened.add_transition("close", closed)

        await machine.start()
        await machine.trigger("open")
        assert machine.current_state is opened

    Attributes:
        name: Display name
        context: Value passed by reference to every hook call
    """

    def __init__(
        self,
        name: str,
        context: Any = None,
        entry_action: EntryHook | None = None,
        exit_action: ExitHook | None = None,
    ):
        self._name = name
        self._id = kebab_case(name)
        self._context = context
        self._entry_action = entry_action
        self._exit_action = exit_action

        self._states: dict[str, State] = {}
        self._transitions: dict[str, Transition] = {}

        self._start_state: State | None = None
        self._current_state: State | None = None
        self._previous_state: State | None = None

        self._queue = TriggerQueue(self._id)
        self._history: deque[TransitionRecord] = deque(maxlen=HISTORY_MAX_LENGTH)

    # === Properties ===

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> str:
        """Kebab-case id derived from the name. Not guaranteed unique."""
        return self._id

    @property
    def context(self) -> Any:
        return self._context

    @property
    def entry_action(self) -> EntryHook | None:
        return self._entry_action

    @property
    def exit_action(self) -> ExitHook | None:
        return self._exit_action

    @property
    def started(self) -> bool:
        return self._current_state is not None

    @property
    def is_complete(self) -> bool:
        """Whether the current state is a completed state."""
        return self._current_state is not None and self._current_state.is_complete

    @property
    def busy(self) -> bool:
        """Whether the trigger queue is being drained."""
        return self._queue.is_processing

    @property
    def start_state(self) -> State | None:
        return self._start_state

    @property
    def current_state(self) -> State | None:
        return self._current_state

    @property
    def previous_state(self) -> State | None:
        return self._previous_state

    @property
    def states(self) -> Mapping[str, State]:
        """Registered states keyed by id, in registration order."""
        return MappingProxyType(self._states)

    @property
    def global_transitions(self) -> Mapping[str, Transition]:
        return MappingProxyType(self._transitions)

    @property
    def pending(self) -> tuple[str, ...]:
        """Trigger keys waiting to be processed, oldest first."""
        return self._queue.pending

    @property
    def history(self) -> list[TransitionRecord]:
        return list(self._history)

    # === Registration ===

    def _ensure_modifiable(self, what: str, state: str | None = None, trigger: str | None = None) -> None:
        if self.started:
            raise CannotModifyAfterStartError(
                self._name, f"Cannot add {what} after the machine has started.", state, trigger
            )

    def _ensure_owned(self, state: State, trigger: str | None = None) -> None:
        if state.machine is not self:
            raise ForeignStateError(
                self._name, f"State ({state.name}) belongs to another machine.", state.name, trigger
            )

    def add_state(self, state: State) -> None:
        """Register a state.

        Raises:
            CannotModifyAfterStartError: machine already started
            ForeignStateError: state was created for another machine
            StateExistsError: a state with the same id is registered
        """
        self._ensure_modifiable(f"state ({state.name})", state=state.name)
        self._ensure_owned(state)
        if state.id in self._states:
            raise StateExistsError(self._name, f"State exists: {state.id}.", state.name)
        self._states[state.id] = state
        logger.debug(self._log(f"Added state {state.id}"))

    def create_state(
        self,
        name: str,
        is_complete: bool = False,
        entry_action: EntryHook | None = None,
        exit_action: ExitHook | None = None,
    ) -> State:
        """Create a state and register it with this machine.

        Args:
            name: Unique display name
            is_complete: Whether entering this state completes the machine
            entry_action: Optional hook awaited on entry
            exit_action: Optional hook awaited on exit, may veto

        Returns:
            The new State
        """
        state = State(self, name, is_complete, entry_action, exit_action)
        self.add_state(state)
        return state

    def add_global_transition(self, trigger_id: str, target_state: State) -> Transition:
        """Register a transition that applies from any state.

        Global transitions are consulted only when the current state has no
        local transition for the trigger.
        """
        key = kebab_case(trigger_id)
        self._ensure_modifiable(f"global transition ({key})", trigger=trigger_id)
        self._ensure_owned(target_state, trigger_id)
        if key in self._transitions:
            raise TransitionExistsError(
                self._name, f"Transition exists: {key}.", target_state.name, trigger_id
            )
        transition = Transition(key, target_state)
        self._transitions[key] = transition
        logger.debug(self._log(f"Added global transition {key} → {target_state.id}"))
        return transition

    def get_state_by_id(self, state_id: str) -> State | None:
        """Look up a state by id. The argument is normalized first."""
        return self._states.get(kebab_case(state_id))

    def get_state_by_name(self, name: str) -> State | None:
        for state in self._states.values():
            if state.name == name:
                return state
        return None

    # === Lifecycle ===

    async def start(self, start_state: State | None = None) -> None:
        """Start the machine by entering the start state.

        Returns once the start state's entry hooks, and any transitions they
        trigger, have completed.

        Entering the start state does not mark the machine busy. An external
        trigger() issued while a start entry hook is suspended is accepted
        and drains the queue alongside that hook.

        Args:
            start_state: Defaults to the first registered state

        Raises:
            AlreadyStartedError: machine already started
            NoStatesDefinedError: no states registered
            StartStateNotMemberError: start_state not registered here
        """
        if self._current_state is not None:
            raise AlreadyStartedError(self._name, "The state machine has already started.")

        if not self._states:
            raise NoStatesDefinedError(
                self._name, "No states have been defined. The state machine cannot be started."
            )

        if start_state is None:
            start_state = next(iter(self._states.values()))
        elif self._states.get(start_state.id) is not start_state:
            raise StartStateNotMemberError(
                self._name,
                f"Start state ({start_state.name}) is not part of this machine.",
                start_state.name,
            )

        self._start_state = start_state
        logger.info(self._log(f"Starting in {start_state.id}"))
        await self._change_state(start_state)

    async def reset(self, restart: bool = False) -> None:
        """Return the machine to the unstarted phase.

        Clears current/previous state, pending triggers and history.

        Args:
            restart: Start again from the original start state afterwards

        Raises:
            BusyError: triggers are being processed
        """
        if self.busy:
            raise BusyError(self._name, "Cannot reset while processing triggers.")

        self._previous_state = None
        self._current_state = None
        self._queue.clear()
        self._history.clear()
        logger.info(self._log(f"Reset (restart={restart})"))

        if restart:
            await self.start(self._start_state)

    async def goto_previous(self) -> None:
        """Change back to the previous state, if one is recorded.

        Like start(), this does not mark the machine busy.
        """
        if self._previous_state is not None:
            await self._change_state(self._previous_state)

    # === Triggers ===

    async def trigger(self, trigger_id: str, send_global: bool = False) -> None:
        """Emit a trigger as an external caller.

        Returns once the resolved transition, and any transitions chained from
        its hooks, have completed.

        Args:
            trigger_id: Trigger id (normalized here)
            send_global: Resolve against global transitions only

        Raises:
            NotStartedError, CompletedError, BusyError,
            InvalidTransitionError, AlreadyInStateError
        """
        await self._dispatch(trigger_id, send_global, internal=False)

    async def _dispatch(self, trigger_id: str, send_global: bool = False, *, internal: bool = False) -> None:
        if self._current_state is None:
            raise NotStartedError(
                self._name, "Not started. Call start() before trigger().", trigger=trigger_id
            )

        if self._current_state.is_complete:
            raise CompletedError(
                self._name,
                f"The state machine is complete: currentState: {self._current_state.name}.",
                self._current_state.name,
                trigger_id,
            )

        was_busy = self._queue.is_processing
        if was_busy and not internal:
            logger.warning(self._log(f"Rejected trigger {trigger_id}: busy"))
            if METRICS_ENABLED:
                metrics.inc("trigger.busy_rejected", {"machine": self._id})
            raise BusyError(
                self._name,
                f"Busy processing a transition - triggerId: {trigger_id}.",
                self._current_state.name,
                trigger_id,
            )

        if send_global:
            key = kebab_case(trigger_id)
        else:
            key = make_trigger_key(self._current_state.id, trigger_id)
        self._queue.enqueue(key)

        # The active processor picks it up
        if was_busy:
            return

        await self._process_queue()

    async def _process_queue(self) -> None:
        self._queue.set_processing(True)
        try:
            while self._queue:
                key = self._queue.dequeue()
                await self._transition_handler(key)
        finally:
            self._queue.set_processing(False)
            # Only non-empty when a transition failed
            if self._queue:
                discarded = self._queue.clear()
                logger.warning(self._log(f"Discarded {discarded} pending trigger(s) after failure"))
                if METRICS_ENABLED:
                    metrics.inc("queue.discarded", {"machine": self._id}, discarded)

    async def _transition_handler(self, key: str) -> None:
        """Resolve a trigger key to a transition and perform it.

        Local transitions on the current state win over global ones with the
        same trigger id.
        """
        if self._current_state is None:
            raise NotStartedError(self._name, "Not started. Call start() before trigger().", trigger=key)

        state_id, trigger_id = split_trigger_key(key)

        transition = None
        if state_id is not None:
            transition = self._current_state.get_transition(key)
        if transition is None:
            transition = self._transitions.get(trigger_id)

        if transition is None:
            if METRICS_ENABLED:
                metrics.inc("transition.invalid", {"machine": self._id})
            raise InvalidTransitionError(
                self._name,
                f"Invalid Transition - triggerId: {key}.",
                self._current_state.name,
                trigger_id,
            )

        await self._change_state(transition.target_state, key)

    async def _change_state(self, new_state: State, trigger: str | None = None) -> bool:
        """Change to a new state.

        1. Exit hooks of the current state, then of the machine. The machine
           hook's result replaces the state hook's result.
        2. On allow: commit previous/current, then entry hooks of the new
           state, then of the machine.

        Returns:
            False when the exit was vetoed
        """
        current = self._current_state
        if new_state is current:
            raise AlreadyInStateError(
                self._name, f"Already in state: currentState: {current.name}.", current.name, trigger
            )

        allow_exit = True
        if current is not None and current.exit_action is not None:
            allow_exit = bool(await call_hook(current.exit_action, current, self._context))
        if current is not None and self._exit_action is not None:
            allow_exit = bool(await call_hook(self._exit_action, current, self._context))

        from_id = current.id if current is not None else None
        if not allow_exit:
            self._history.append(TransitionRecord(trigger, from_id, new_state.id, success=False))
            logger.debug(self._log(f"Exit from {from_id} vetoed | target={new_state.id} | trigger={trigger}"))
            if METRICS_ENABLED:
                metrics.inc("transition.vetoed", {"machine": self._id})
            return False

        self._previous_state = current
        self._current_state = new_state
        self._history.append(TransitionRecord(trigger, from_id, new_state.id))
        if METRICS_ENABLED:
            metrics.inc("transition.ok", {"machine": self._id})
        logger.info(self._log(f"{from_id or '(none)'} → {new_state.id} | trigger={trigger}"))

        if new_state.entry_action is not None:
            await call_hook(new_state.entry_action, new_state, self._context)
        if self._entry_action is not None:
            await call_hook(self._entry_action, new_state, self._context)
        return True

    # === Debugging ===

    def get_history_log(self) -> str:
        """Render the transition history (debugging aid)."""
        if not self._history:
            return "  (no history)"
        return "\n".join(f"  {entry}" for entry in self._history)

    def _log(self, msg: str) -> str:
        return format_machine_log("SM", self._id, msg)

    def __repr__(self) -> str:
        current = self._current_state.id if self._current_state else None
        return f"StateMachine({self._name!r}, current={current!r}, busy={self.busy})"
