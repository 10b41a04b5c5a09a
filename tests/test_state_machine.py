"""Unit tests for the generic LifecycleStateMachine."""

from enum import Enum

import pytest

from vendor_gpt.domain.errors import InvalidTransitionError
from vendor_gpt.services.state_machine import LifecycleStateMachine


class Light(str, Enum):
    RED = "red"
    GREEN = "green"
    AMBER = "amber"
    OFF = "off"


@pytest.fixture
def sm():
    return LifecycleStateMachine(
        "light",
        {
            Light.RED: {Light.GREEN, Light.OFF},
            Light.GREEN: {Light.AMBER},
            Light.AMBER: {Light.RED},
            Light.OFF: set(),
        },
    )


class TestLifecycleStateMachine:
    def test_valid_transition_accepts_enums_and_strings(self, sm):
        assert sm.validate_transition(Light.RED, Light.GREEN) is True
        assert sm.validate_transition("green", "amber") is True

    def test_disallowed_target(self, sm):
        with pytest.raises(InvalidTransitionError) as exc_info:
            sm.validate_transition("red", "amber")
        assert "Light transition from red to amber is not allowed" in str(exc_info.value)

    def test_terminal_state(self, sm):
        with pytest.raises(InvalidTransitionError, match="No light transitions allowed from off"):
            sm.validate_transition("off", "red")

    def test_unknown_current_state(self, sm):
        with pytest.raises(InvalidTransitionError):
            sm.validate_transition("blinking", "red")

    def test_can_transition(self, sm):
        assert sm.can_transition("amber", "red")
        assert not sm.can_transition("amber", "green")

    def test_allowed_transitions_sorted(self, sm):
        assert sm.get_allowed_transitions(Light.RED) == ["green", "off"]
        assert sm.get_allowed_transitions("off") == []

    def test_terminal_states(self, sm):
        assert sm.terminal_states == {"off"}
