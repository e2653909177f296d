"""Guard models: phases, decisions, evaluation context and retry policy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal


class GuardPhase(StrEnum):
    """Point in a transition at which a guard is consulted."""

    EXIT = "exit"  # Leaving the current state
    ENTER = "enter"  # Entering the target state


class GuardDecision(StrEnum):
    """Outcome of a single guard evaluation."""

    ALLOW = "allow"
    REJECT = "reject"
    TIMEOUT = "timeout"
    ERROR = "error"

    @property
    def allowed(self) -> bool:
        return self is GuardDecision.ALLOW

    @classmethod
    def coerce(cls, value: Any) -> GuardDecision:
        """Normalize an oracle's answer. Booleans map to ALLOW/REJECT."""
        if isinstance(value, GuardDecision):
            return value
        if isinstance(value, bool):
            return cls.ALLOW if value else cls.REJECT
        if isinstance(value, str):
            return cls(value.lower())
        raise ValueError(f"Unrecognized guard decision: {value!r}")


@dataclass(frozen=True, slots=True)
class GuardContext:
    """Information handed to the oracle about the transition being attempted."""

    puzzle_id: str
    from_state: str
    to_state: str
    action: str

    def to_dict(self) -> dict[str, str]:
        return {
            "puzzleId": self.puzzle_id,
            "fromState": self.from_state,
            "toState": self.to_state,
            "actionName": self.action,
        }


@dataclass(frozen=True, slots=True)
class GuardVerdict:
    """Result of evaluate_guard(): the decision plus a reason for logs and results."""

    decision: GuardDecision
    phase: GuardPhase
    guard: str
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.decision.allowed


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Configuration for retrying guard evaluations that raise.

    Timeouts and explicit rejections are final and never retried.
    """

    max_attempts: int = 1
    """Maximum attempts (1 = no retry). Default: no retry."""

    backoff: Literal["none", "linear", "exponential"] = "none"
    """Backoff strategy between retries."""

    base_delay: float = 0.1
    """Base delay in seconds for backoff calculation."""
