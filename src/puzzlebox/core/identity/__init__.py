"""Puzzle identity and resource URIs."""

from puzzlebox.core.identity.models import (
    PUZZLE_RESOURCE_PATH,
    derive_uri,
    extract_id,
    is_puzzle_uri,
)

__all__ = ["PUZZLE_RESOURCE_PATH", "derive_uri", "extract_id", "is_puzzle_uri"]
