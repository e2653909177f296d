"""Puzzle result models: snapshots and action outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PuzzleSnapshot:
    """Current state name and the actions available from it."""

    puzzle_id: str
    current_state: str | None
    available_actions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentState": self.current_state,
            "availableActions": list(self.available_actions),
        }


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of an attempted transition.

    Attributes:
        success: True if the transition committed.
        puzzle_id: Puzzle the action was performed on.
        action: Action name that was attempted.
        from_state: State before the attempt.
        to_state: State after a committed transition; None on failure.
        reason: Why the attempt failed (invalid action, guard rejection, timeout).
    """

    success: bool
    puzzle_id: str
    action: str
    from_state: str | None = None
    to_state: str | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, puzzle_id: str, action: str, from_state: str, to_state: str) -> ActionResult:
        return cls(
            success=True,
            puzzle_id=puzzle_id,
            action=action,
            from_state=from_state,
            to_state=to_state,
        )

    @classmethod
    def failed(
        cls, puzzle_id: str, action: str, from_state: str | None, reason: str
    ) -> ActionResult:
        return cls(
            success=False,
            puzzle_id=puzzle_id,
            action=action,
            from_state=from_state,
            reason=reason,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.reason is not None:
            result["cancelReason"] = self.reason
        return result
