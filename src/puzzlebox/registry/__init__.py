"""Puzzle registry and id allocation."""

from puzzlebox.registry.allocator import IdAllocator
from puzzlebox.registry.registry import PuzzleRegistry

__all__ = [
    "PuzzleRegistry",
    "IdAllocator",
]
