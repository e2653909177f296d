"""Notification models: change events and delivery reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """Pushed to every subscriber of a puzzle after a committed transition."""

    puzzle_id: str
    uri: str
    state: str

    def to_dict(self) -> dict[str, Any]:
        return {"puzzleId": self.puzzle_id, "uri": self.uri, "newStateName": self.state}


@dataclass(frozen=True, slots=True)
class DeliveryReport:
    """Outcome of one fan-out.

    Attributes:
        event: The event that was fanned out (None if nobody was subscribed).
        delivered: Tokens that accepted the event.
        pruned: Tokens whose delivery failed and that were removed from the index.
    """

    event: ChangeEvent | None
    delivered: tuple[str, ...] = ()
    pruned: tuple[str, ...] = ()

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.pruned)
