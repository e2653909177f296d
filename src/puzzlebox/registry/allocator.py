"""Puzzle id allocation service.

IdAllocator is a stateful service that manages the puzzle id lifecycle.
"""

from __future__ import annotations

import secrets
import string

_ALPHABET = string.digits + string.ascii_lowercase


class IdAllocator:
    """Allocates collision-free puzzle ids of the form ``{prefix}-{token}``.

    Every id handed out is remembered for the lifetime of the allocator, so an
    id is never issued twice, even after the registry has been cleared. A stale
    id held by a caller therefore can never resolve to a different puzzle.

    Args:
        prefix: Id prefix (default "puzzle").
        token_length: Number of random base-36 characters per id.
    """

    def __init__(self, prefix: str = "puzzle", token_length: int = 12):
        if token_length < 4:
            raise ValueError(f"token_length must be at least 4, got {token_length}")
        self._prefix = prefix
        self._token_length = token_length
        self._issued: set[str] = set()

    def _candidate(self) -> str:
        token = "".join(secrets.choice(_ALPHABET) for _ in range(self._token_length))
        return f"{self._prefix}-{token}"

    def allocate(self) -> str:
        """Allocate a new id that this allocator has never issued before.

        Returns:
            Newly allocated puzzle id.
        """
        puzzle_id = self._candidate()
        while puzzle_id in self._issued:
            puzzle_id = self._candidate()
        self._issued.add(puzzle_id)
        return puzzle_id

    def was_issued(self, puzzle_id: str) -> bool:
        """Check if puzzle_id was issued by this allocator."""
        return puzzle_id in self._issued

    @property
    def issued_count(self) -> int:
        return len(self._issued)
