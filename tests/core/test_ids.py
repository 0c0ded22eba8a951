"""Tests for core.ids - identifier normalization"""

import pytest

from fsmkit.core.ids import (
    is_local_key,
    kebab_case,
    make_trigger_key,
    short_id,
    split_trigger_key,
)
from fsmkit.telemetry import format_machine_log


class TestKebabCase:
    """Test kebab_case normalization"""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("my first state", "my-first-state"),
            ("My First State", "my-first-state"),
            ("myFirstState", "my-first-state"),
            ("MyFirstState", "my-first-state"),
            ("my_first-state", "my-first-state"),
            ("  next  ", "next"),
            ("HTTPServer", "http-server"),
            ("goto3", "goto-3"),
            ("state 12", "state-12"),
            ("Zürich2Go", "zurich-2-go"),
            ("café Latte", "cafe-latte"),
            ("don't stop", "dont-stop"),
            ("already-kebab", "already-kebab"),
        ],
    )
    def test_normalizes(self, name, expected):
        """Display names collapse to kebab-case keys"""
        assert kebab_case(name) == expected

    def test_empty_string(self):
        """Empty name gives empty key"""
        assert kebab_case("") == ""

    def test_idempotent(self):
        """Normalizing a key again leaves it unchanged"""
        key = kebab_case("Waiting For Approval")
        assert kebab_case(key) == key

    def test_separator_is_dropped(self):
        """The trigger key separator never survives normalization"""
        assert ":" not in kebab_case("idle:next")

    def test_accents_collapse(self):
        """Accented and plain spellings share one key"""
        assert kebab_case("Café") == kebab_case("cafe") == "cafe"

    def test_apostrophes_dropped(self):
        """Apostrophes do not split words"""
        assert kebab_case("Don't Panic") == "dont-panic"


class TestTriggerKeys:
    """Test trigger key helpers"""

    def test_make_trigger_key(self):
        """Local keys are prefixed with the state id"""
        assert make_trigger_key("idle", "Go Next") == "idle:go-next"

    def test_split_local_key(self):
        """Local keys split into state id and trigger id"""
        assert split_trigger_key("idle:go-next") == ("idle", "go-next")

    def test_split_global_key(self):
        """Global keys have no state id"""
        assert split_trigger_key("go-next") == (None, "go-next")

    def test_is_local_key(self):
        assert is_local_key("idle:next") is True
        assert is_local_key("next") is False

    def test_short_id(self):
        assert short_id("a-very-long-machine-identifier", 6) == "a-very"


class TestLogFormat:
    """Machine-tagged log prefix"""

    def test_prefix(self):
        assert format_machine_log("SM", "door", "opened") == "[SM:door] opened"

    def test_long_id_is_shortened(self):
        machine_id = "a-very-long-machine-identifier"
        assert format_machine_log("Queue", machine_id, "x") == f"[Queue:{machine_id[:16]}] x"

    def test_missing_id(self):
        assert format_machine_log("SM", "", "x") == "[SM:unknown] x"
