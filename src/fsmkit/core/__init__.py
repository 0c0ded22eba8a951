"""Core module - identifier normalization"""

from .ids import kebab_case, make_trigger_key, split_trigger_key

__all__ = [
    "kebab_case",
    "make_trigger_key",
    "split_trigger_key",
]
