"""PuzzleBox result models: add results and resource listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AddResult:
    """Outcome of PuzzleBox.add_puzzle(): the new id, or why the config was rejected."""

    success: bool
    puzzle_id: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, puzzle_id: str) -> AddResult:
        return cls(success=True, puzzle_id=puzzle_id)

    @classmethod
    def failed(cls, error: str) -> AddResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success, "puzzleId": self.puzzle_id}
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """A puzzle exposed as a readable, subscribable resource."""

    uri: str
    name: str
    mime_type: str = "application/json"

    def to_dict(self) -> dict[str, Any]:
        return {"uri": self.uri, "name": self.name, "mimeType": self.mime_type}


@dataclass(frozen=True, slots=True)
class ResourceTemplate:
    """URI template describing how puzzle resources are addressed."""

    uri_template: str
    name: str = "Puzzle Snapshot"
    description: str = "The current state and available actions for the given puzzle id"

    def to_dict(self) -> dict[str, Any]:
        return {
            "uriTemplate": self.uri_template,
            "name": self.name,
            "description": self.description,
        }


@dataclass(frozen=True, slots=True)
class ResourcePage:
    """One page of resources; pass next_cursor back to list_resources() for the next page."""

    resources: list[ResourceDescriptor] = field(default_factory=list)
    next_cursor: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"resources": [r.to_dict() for r in self.resources]}
        if self.next_cursor is not None:
            result["nextCursor"] = self.next_cursor
        return result
