"""Identifier utilities

Turns caller-facing display names into canonical lookup keys and builds the
state-scoped trigger keys used by local transitions.

Key formats:
- state / machine id: kebab-case of the display name ("My First State" -> "my-first-state")
- global trigger key: kebab-case of the trigger id ("Go Next" -> "go-next")
- local trigger key:  "<state-id>:<trigger-id>" ("my-first-state:go-next")
"""

import pydash

from ..config import TRIGGER_KEY_SEPARATOR


def kebab_case(name: str) -> str:
    """Normalize a display name into its canonical lookup key.

    Deterministic and stateless. Case, spacing, punctuation, accents and
    apostrophes collapse to the same key ("Café" and "cafe" are one id).

    Args:
        name: Display name

    Returns:
        Lowercase ASCII words joined with "-"
    """
    return pydash.kebab_case(name)


def make_trigger_key(state_id: str, trigger_id: str) -> str:
    """Create a local (state-scoped) trigger key.

    Args:
        state_id: Owning state id (already normalized)
        trigger_id: Trigger id (normalized here)

    Returns:
        Key like "idle:go-next"
    """
    return f"{state_id}{TRIGGER_KEY_SEPARATOR}{kebab_case(trigger_id)}"


def split_trigger_key(key: str) -> tuple[str | None, str]:
    """Split a trigger key into (state_id, trigger_id).

    Normalized ids never contain the separator, so the first separator is
    always the boundary.

    Returns:
        (state_id, trigger_id) for local keys, (None, trigger_id) for global keys
    """
    state_id, sep, trigger_id = key.partition(TRIGGER_KEY_SEPARATOR)
    if not sep:
        return None, key
    return state_id, trigger_id


def is_local_key(key: str) -> bool:
    """Check if a trigger key is state-scoped."""
    return TRIGGER_KEY_SEPARATOR in key


def short_id(identifier: str, length: int = 16) -> str:
    """Get a short display version of an id for logging."""
    return identifier[:length]
