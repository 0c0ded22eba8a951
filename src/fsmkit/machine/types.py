"""State machine data types

Contains:
- EntryHook / ExitHook: caller-supplied hook capabilities
- TransitionRecord: transition history entry
- call_hook: invokes a hook that may be sync or async
"""

import inspect
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Awaitable, Callable

if TYPE_CHECKING:
    from .state import State


# Entry hook: (state, context) -> awaitable, result ignored
EntryHook = Callable[["State", Any], Awaitable[None] | None]

# Exit hook: (state, context) -> awaitable bool, truthy allows the exit
ExitHook = Callable[["State", Any], Awaitable[bool] | bool]


async def call_hook(hook: EntryHook | ExitHook, state: "State", context: Any) -> Any:
    """Invoke a hook and await its result if it is awaitable.

    Exceptions raised by the hook propagate to the caller.
    """
    result = hook(state, context)
    if inspect.isawaitable(result):
        result = await result
    return result


@dataclass
class TransitionRecord:
    """Transition history entry

    Records every state change attempt, committed or vetoed.
    """
    trigger: str | None       # trigger key, None for start/goto_previous
    from_state: str | None    # state id before, None when starting
    to_state: str             # requested target state id
    success: bool = True      # False when an exit hook vetoed
    timestamp: float = field(default_factory=lambda: datetime.now().timestamp())

    def __str__(self) -> str:
        ts = datetime.fromtimestamp(self.timestamp).strftime("%H:%M:%S")
        mark = "✓" if self.success else "✗"
        trigger = self.trigger or "-"
        return f"{ts} | {mark} {self.from_state or '(none)'} → {self.to_state} [{trigger}]"

    def to_dict(self) -> dict:
        """Convert to a serializable dict."""
        return {
            "trigger": self.trigger,
            "from_state": self.from_state,
            "to_state": self.to_state,
            "success": self.success,
            "timestamp": self.timestamp,
        }
