"""Puzzle state machine instances."""

from puzzlebox.puzzle.models import ActionResult, PuzzleSnapshot
from puzzlebox.puzzle.puzzle import Puzzle

__all__ = [
    "Puzzle",
    "PuzzleSnapshot",
    "ActionResult",
]
