"""Error taxonomy for puzzle configuration, lookup, transitions and delivery."""

from __future__ import annotations


class PuzzleBoxError(Exception):
    """Base class for all puzzlebox errors."""

    pass


class ConfigError(PuzzleBoxError, ValueError):
    """Raised when a puzzle configuration cannot be parsed or is malformed."""

    pass


class NotFoundError(PuzzleBoxError, KeyError):
    """Raised when a puzzle id is not present in the registry."""

    def __init__(self, puzzle_id: str) -> None:
        super().__init__(puzzle_id)
        self.puzzle_id = puzzle_id

    def __str__(self) -> str:
        return f"Puzzle {self.puzzle_id!r} not found"


class InvalidActionError(PuzzleBoxError):
    """Raised when an action is not available from the puzzle's current state."""

    def __init__(self, action: str, state: str, message: str | None = None) -> None:
        self.action = action
        self.state = state
        super().__init__(message or f"Action {action!r} is not available in state {state!r}")


class TransitionCancelled(PuzzleBoxError):
    """Raised when a guard rejects, fails or times out during a transition.

    Attributes:
        reason: Human-readable cancellation reason.
        phase: Guard phase ("exit" or "enter") that cancelled the transition.
        guard: Name of the guard that cancelled.
    """

    def __init__(self, reason: str, phase: str | None = None, guard: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.phase = phase
        self.guard = guard


class DeliveryFailure(PuzzleBoxError):
    """Raised when a change event cannot be delivered to one subscriber."""

    def __init__(self, token: str, message: str | None = None) -> None:
        super().__init__(message or f"Delivery to subscriber {token!r} failed")
        self.token = token
