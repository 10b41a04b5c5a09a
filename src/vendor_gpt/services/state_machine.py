"""Lifecycle state machine: validates transitions for bids and orders.

Each lifecycle is a transition map ``from_status -> {allowed to_status}``.
A status missing from the map (or mapped to an empty set) is terminal.
"""

from enum import Enum

from vendor_gpt.domain.errors import InvalidTransitionError


def _value(status) -> str:
    return status.value if isinstance(status, Enum) else str(status)


class LifecycleStateMachine:
    """Validates state transitions against a fixed transition map."""

    def __init__(self, name: str, transition_map: dict[Enum, set[Enum]]):
        self.name = name
        self._map: dict[str, set[str]] = {
            _value(src): {_value(dst) for dst in targets}
            for src, targets in transition_map.items()
        }

    @property
    def terminal_states(self) -> set[str]:
        reachable = set().union(*self._map.values()) if self._map else set()
        return {s for s in reachable | set(self._map) if not self._map.get(s)}

    def validate_transition(self, current_status, target_status) -> bool:
        """Return True if the transition is valid. Raise InvalidTransitionError if not."""
        current = _value(current_status)
        target = _value(target_status)

        allowed_targets = self._map.get(current)
        if not allowed_targets:
            raise InvalidTransitionError(
                current,
                target,
                f"No {self.name} transitions allowed from {current}",
            )

        if target not in allowed_targets:
            raise InvalidTransitionError(
                current,
                target,
                f"{self.name.capitalize()} transition from {current} to {target} is not allowed",
            )

        return True

    def can_transition(self, current_status, target_status) -> bool:
        """Boolean form of ``validate_transition``."""
        try:
            return self.validate_transition(current_status, target_status)
        except InvalidTransitionError:
            return False

    def get_allowed_transitions(self, current_status) -> list[str]:
        """Return the valid next states from the current status, sorted."""
        return sorted(self._map.get(_value(current_status), set()))
