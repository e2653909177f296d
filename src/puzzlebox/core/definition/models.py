"""Definition models: validated, immutable descriptions of a puzzle.

Produced by parse_definition(); consumed by Puzzle and PuzzleRegistry.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from puzzlebox.core.errors import ConfigError
from puzzlebox.core.types import ActionName, GuardName, StateName


def _freeze[K, V](mapping: Mapping[K, V] | None) -> Mapping[K, V]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class ActionDefinition:
    """A named edge leading to target_state."""

    name: ActionName
    target_state: StateName

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON configuration shape."""
        return {"name": self.name, "targetState": self.target_state}


@dataclass(frozen=True, slots=True)
class StateDefinition:
    """A named node with its permitted actions and optional guards.

    Attributes:
        name: State name.
        actions: Action map keyed by action name, in declaration order.
        enter_guard: Guard evaluated before entering this state.
        exit_guard: Guard evaluated before leaving this state.
    """

    name: StateName
    actions: Mapping[ActionName, ActionDefinition] = field(default_factory=dict)
    enter_guard: GuardName | None = None
    exit_guard: GuardName | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", _freeze(self.actions))
        mismatched = [key for key, action in self.actions.items() if key != action.name]
        if mismatched:
            raise ConfigError(
                f"Actions of state {self.name!r} stored under a different name: {mismatched}"
            )

    def action_names(self) -> list[ActionName]:
        return list(self.actions)

    def with_action(self, action: ActionDefinition) -> StateDefinition:
        """Return a copy with action added (or replaced) under action.name."""
        actions = dict(self.actions)
        actions[action.name] = action
        return StateDefinition(
            name=self.name,
            actions=actions,
            enter_guard=self.enter_guard,
            exit_guard=self.exit_guard,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON configuration shape."""
        result: dict[str, Any] = {"name": self.name}
        if self.actions:
            result["actions"] = {key: a.to_dict() for key, a in self.actions.items()}
        if self.enter_guard is not None:
            result["enterGuard"] = self.enter_guard
        if self.exit_guard is not None:
            result["exitGuard"] = self.exit_guard
        return result

    def __deepcopy__(self, memo: dict[int, Any]) -> StateDefinition:
        # Immutable; sharing is safe
        return self


@dataclass(frozen=True, slots=True)
class PuzzleDefinition:
    """Validated, immutable description of a puzzle.

    Invariants: initial_state is a key of states, and every state is stored
    under its own name.

    Raises:
        ConfigError: If either invariant is violated.
    """

    initial_state: StateName
    states: Mapping[StateName, StateDefinition]

    def __post_init__(self) -> None:
        object.__setattr__(self, "states", _freeze(self.states))
        mismatched = [key for key, state in self.states.items() if key != state.name]
        if mismatched:
            raise ConfigError(f"States stored under a different name: {mismatched}")
        if self.initial_state not in self.states:
            raise ConfigError(f"Initial state {self.initial_state!r} is not a defined state")

    def dangling_targets(self) -> list[tuple[StateName, ActionName, StateName]]:
        """List (state, action, target) triples whose target is not a defined state."""
        return [
            (state.name, key, action.target_state)
            for state in self.states.values()
            for key, action in state.actions.items()
            if action.target_state not in self.states
        ]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON configuration shape accepted by parse_definition()."""
        return {
            "initialState": self.initial_state,
            "states": {key: s.to_dict() for key, s in self.states.items()},
        }

    def __deepcopy__(self, memo: dict[int, Any]) -> PuzzleDefinition:
        return self
