"""PuzzleRegistry: keyed store of Puzzle instances.

The registry is the sole owner of puzzle identity and lifecycle. It is an
explicitly constructed object; independent registries never share state.

Usage:
    registry = PuzzleRegistry()
    puzzle = registry.add_puzzle(config)
    result = await registry.perform_action(puzzle.id, "Open", oracle)
    registry.clear_all()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from puzzlebox.core.definition import parse_definition
from puzzlebox.core.errors import NotFoundError
from puzzlebox.guards import DEFAULT_GUARD_TIMEOUT, GuardOracle, RetryPolicy
from puzzlebox.puzzle import ActionResult, Puzzle
from puzzlebox.registry.allocator import IdAllocator

logger = logging.getLogger(__name__)

type CommitHook = Callable[[Puzzle, ActionResult], Awaitable[None]]
"""Callback run after a committed transition, under the puzzle's lock."""


class PuzzleRegistry:
    """In-memory puzzle store with per-puzzle transition locks.

    Structure:
        _puzzles[puzzle_id] = Puzzle        (insertion ordered)
        _locks[puzzle_id] = asyncio.Lock    (created on first transition)

    Map mutations are synchronous, so under the asyncio scheduler no caller can
    observe a partially updated map. The only suspension point is inside
    Puzzle.perform_action(); perform_action() holds the puzzle's lock across it
    so transitions on one id are linearized while different ids run concurrently.

    Args:
        allocator: Id allocator (default: IdAllocator with prefix "puzzle").
        strict_targets: Reject definitions with undefined action targets at parse time.
    """

    def __init__(self, allocator: IdAllocator | None = None, strict_targets: bool = False):
        self._allocator = allocator or IdAllocator()
        self._strict_targets = strict_targets
        self._puzzles: dict[str, Puzzle] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def add_puzzle(self, config: Any) -> Puzzle:
        """Validate config, create a puzzle under a fresh id and store it.

        Args:
            config: JSON text, mapping or PuzzleDefinition (see parse_definition()).

        Returns:
            The stored Puzzle, in its initial state.

        Raises:
            ConfigError: If config is invalid. Nothing is stored.
        """
        definition = parse_definition(config, strict=self._strict_targets)
        puzzle = Puzzle(self._allocator.allocate(), definition)
        self._puzzles[puzzle.id] = puzzle
        logger.info("Added puzzle %s (initial state %r)", puzzle.id, puzzle.initial_state)
        return puzzle

    def get_puzzle(self, puzzle_id: str) -> Puzzle:
        """Get a puzzle by id.

        Raises:
            NotFoundError: If no puzzle has this id.
        """
        puzzle = self._puzzles.get(puzzle_id)
        if puzzle is None:
            raise NotFoundError(puzzle_id)
        return puzzle

    def find_puzzle(self, puzzle_id: str) -> Puzzle | None:
        """Get a puzzle by id, or None."""
        return self._puzzles.get(puzzle_id)

    def has_puzzle(self, puzzle_id: str) -> bool:
        return puzzle_id in self._puzzles

    def update_puzzle(self, puzzle: Puzzle) -> bool:
        """Replace the stored instance with puzzle, only if its id already exists.

        Intended for copy-on-write callers (puzzle.copy(), mutate, update). Hold
        transition_lock(puzzle.id) while doing so to avoid racing a transition.

        Returns:
            True if a replacement occurred.
        """
        if puzzle.id not in self._puzzles:
            return False
        self._puzzles[puzzle.id] = puzzle
        return True

    def count_puzzles(self) -> int:
        return len(self._puzzles)

    def list_ids(self) -> list[str]:
        """Snapshot of puzzle ids in insertion order."""
        return list(self._puzzles)

    def clear_all(self) -> None:
        """Remove every puzzle (administrative/test reset). Ids are never reissued."""
        count = len(self._puzzles)
        self._puzzles = {}
        self._locks = {}
        logger.info("Cleared %d puzzles", count)

    def __len__(self) -> int:
        return len(self._puzzles)

    def __contains__(self, puzzle_id: object) -> bool:
        return puzzle_id in self._puzzles

    def transition_lock(self, puzzle_id: str) -> asyncio.Lock:
        """Lock serializing transitions on puzzle_id, created on first use."""
        lock = self._locks.get(puzzle_id)
        if lock is None:
            lock = self._locks[puzzle_id] = asyncio.Lock()
        return lock

    async def perform_action(
        self,
        puzzle_id: str,
        action_name: str,
        oracle: GuardOracle | None = None,
        *,
        timeout: float | None = DEFAULT_GUARD_TIMEOUT,
        retry: RetryPolicy | None = None,
        on_committed: CommitHook | None = None,
    ) -> ActionResult:
        """Perform an action on a stored puzzle while holding its transition lock.

        Args:
            puzzle_id: Puzzle to act on.
            action_name: Action to perform.
            oracle: Guard decision provider.
            timeout: Seconds allowed per guard evaluation.
            retry: Retry policy for guard evaluations that raise.
            on_committed: Awaited after a successful transition, still under the
                lock, so work it does (e.g. notifications) follows commit order.

        Raises:
            NotFoundError: Unknown id, or the puzzle was cleared while waiting.
            InvalidActionError: See Puzzle.perform_action().
            TransitionCancelled: See Puzzle.perform_action().
        """
        self.get_puzzle(puzzle_id)
        async with self.transition_lock(puzzle_id):
            puzzle = self.get_puzzle(puzzle_id)
            result = await puzzle.perform_action(
                action_name, oracle, timeout=timeout, retry=retry
            )
            if on_committed is not None:
                await on_committed(puzzle, result)
            return result
