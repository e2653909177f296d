"""Puzzle: one finite-state-machine instance.

Usage:
    puzzle = Puzzle("puzzle-1", parse_definition(config))
    puzzle.get_available_actions("Closed")   # ["Open", "Lock"]
    result = await puzzle.perform_action("Open", oracle)
    puzzle.get_current_state().name          # "Opened"

Concurrent perform_action() calls on the same instance must be serialized by
the caller; PuzzleRegistry.perform_action() holds a per-id lock for this.
"""

from __future__ import annotations

import copy as cp
import logging

from puzzlebox.core.definition import ActionDefinition, PuzzleDefinition, StateDefinition
from puzzlebox.core.errors import InvalidActionError, TransitionCancelled
from puzzlebox.core.types import ActionName, StateName
from puzzlebox.guards import (
    DEFAULT_GUARD_TIMEOUT,
    GuardContext,
    GuardOracle,
    GuardPhase,
    RetryPolicy,
    evaluate_guard,
)
from puzzlebox.puzzle.models import ActionResult, PuzzleSnapshot

logger = logging.getLogger(__name__)


class Puzzle:
    """A named state machine with an immutable id and a mutable current state.

    States and actions may be injected after construction with add_state()
    and add_action(). The current state only changes through perform_action().

    Args:
        puzzle_id: Opaque, unique id assigned by the registry.
        definition: Validated definition; when omitted the puzzle starts empty
            and has no current state until an initial state is added.
    """

    def __init__(self, puzzle_id: str, definition: PuzzleDefinition | None = None) -> None:
        self._id = puzzle_id
        self.states: dict[StateName, StateDefinition] = {}
        self.initial_state: StateName | None = None
        self.current_state: StateName | None = None
        if definition is not None:
            self.states.update(definition.states)
            self.initial_state = definition.initial_state
            self.current_state = definition.initial_state

    @property
    def id(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"Puzzle(id={self._id!r}, current_state={self.current_state!r})"

    def add_state(self, state: StateDefinition, is_initial: bool = False) -> None:
        """Add or replace a state. An initial state also becomes the current state."""
        self.states[state.name] = state
        if is_initial:
            self.initial_state = state.name
            self.current_state = state.name

    def add_action(self, state_name: StateName, action: ActionDefinition) -> bool:
        """Add or replace an action on an existing state.

        Returns:
            True if the state exists and the action was added.
        """
        state = self.states.get(state_name)
        if state is None:
            return False
        self.states[state_name] = state.with_action(action)
        return True

    def get_state(self, state_name: StateName) -> StateDefinition | None:
        return self.states.get(state_name)

    def get_current_state(self) -> StateDefinition | None:
        """Get the current state; None only for a puzzle built without a definition."""
        if self.current_state is None:
            return None
        return self.states.get(self.current_state)

    def get_available_actions(self, state_name: StateName | None = None) -> list[ActionName]:
        """Action names valid from state_name (default: current state), in declaration order.

        Unknown and terminal states yield an empty list.
        """
        name = self.current_state if state_name is None else state_name
        if name is None:
            return []
        state = self.states.get(name)
        return state.action_names() if state is not None else []

    def snapshot(self) -> PuzzleSnapshot:
        return PuzzleSnapshot(
            puzzle_id=self._id,
            current_state=self.current_state,
            available_actions=self.get_available_actions(),
        )

    def copy(self) -> Puzzle:
        """Deep copy with the same id, for copy-on-write updates via PuzzleRegistry.update_puzzle()."""
        return cp.deepcopy(self)

    async def _check_guard(
        self,
        oracle: GuardOracle,
        phase: GuardPhase,
        guard_name: str,
        context: GuardContext,
        timeout: float | None,
        retry: RetryPolicy | None,
    ) -> None:
        verdict = await evaluate_guard(
            oracle, phase, guard_name, context, timeout=timeout, retry=retry
        )
        if not verdict.allowed:
            raise TransitionCancelled(verdict.reason, phase=str(phase), guard=guard_name)

    async def perform_action(
        self,
        action_name: ActionName,
        oracle: GuardOracle | None = None,
        *,
        timeout: float | None = DEFAULT_GUARD_TIMEOUT,
        retry: RetryPolicy | None = None,
    ) -> ActionResult:
        """Attempt the transition named by action_name from the current state.

        The current state's exit guard is evaluated first, then the target
        state's enter guard. Without an oracle, declared guards are allowed.

        Args:
            action_name: Action to perform.
            oracle: Guard decision provider.
            timeout: Seconds allowed per guard evaluation.
            retry: Retry policy for guard evaluations that raise.

        Returns:
            Successful ActionResult with from_state and to_state.

        Raises:
            InvalidActionError: Action not available from the current state, or
                its target is not a defined state. State unchanged.
            TransitionCancelled: A guard rejected, failed or timed out, or the
                state changed while guards were pending. State unchanged.
        """
        from_name = self.current_state
        current = self.get_current_state()
        if from_name is None or current is None:
            raise InvalidActionError(action_name, str(from_name), "Puzzle has no current state")

        action = current.actions.get(action_name)
        if action is None:
            raise InvalidActionError(action_name, from_name)

        target = self.states.get(action.target_state)
        if target is None:
            raise InvalidActionError(
                action_name,
                from_name,
                f"Action {action_name!r} targets undefined state {action.target_state!r}",
            )

        declared = [g for g in (current.exit_guard, target.enter_guard) if g]
        if declared and oracle is None:
            logger.warning(
                "Puzzle %s: no guard oracle configured, allowing %s for %r",
                self._id,
                ", ".join(repr(g) for g in declared),
                action_name,
            )
        elif declared and oracle is not None:
            context = GuardContext(
                puzzle_id=self._id,
                from_state=from_name,
                to_state=action.target_state,
                action=action_name,
            )
            if current.exit_guard:
                await self._check_guard(
                    oracle, GuardPhase.EXIT, current.exit_guard, context, timeout, retry
                )
            if target.enter_guard:
                await self._check_guard(
                    oracle, GuardPhase.ENTER, target.enter_guard, context, timeout, retry
                )
            if self.current_state != from_name:
                raise TransitionCancelled(
                    f"State changed from {from_name!r} to {self.current_state!r} "
                    "while guards were pending"
                )

        self.current_state = action.target_state
        logger.info(
            "Puzzle %s: %s --%s--> %s", self._id, from_name, action_name, action.target_state
        )
        return ActionResult.ok(self._id, action_name, from_name, action.target_state)
