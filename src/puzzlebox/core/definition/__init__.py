"""Puzzle definitions and their validation."""

from puzzlebox.core.definition.models import (
    ActionDefinition,
    PuzzleDefinition,
    StateDefinition,
)
from puzzlebox.core.definition.parsing import parse_definition

__all__ = [
    "ActionDefinition",
    "StateDefinition",
    "PuzzleDefinition",
    "parse_definition",
]
