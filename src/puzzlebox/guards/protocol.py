"""Protocol for guard oracles.

A guard oracle decides whether a named precondition holds before a transition
commits. Production code wires it to a remote decision service (for example a
sampling request to the connected client); tests use a deterministic stub.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from puzzlebox.guards.models import GuardContext, GuardDecision, GuardPhase


@runtime_checkable
class GuardOracle(Protocol):
    """Asynchronous yes/no decision for a named guard.

    Usage:
        class ClientSamplingOracle:
            async def evaluate(self, phase, guard_name, context):
                answer = await session.create_message(...)
                return "yes" in answer.lower()

        box = PuzzleBox(oracle=ClientSamplingOracle())
    """

    async def evaluate(
        self,
        phase: GuardPhase,
        guard_name: str,
        context: GuardContext,
    ) -> GuardDecision | bool:
        """Decide whether the guard allows the transition.

        Args:
            phase: GuardPhase.EXIT for the current state's exit guard,
                GuardPhase.ENTER for the target state's enter guard.
            guard_name: Opaque guard identifier from the puzzle definition.
            context: The transition being attempted.

        Returns:
            GuardDecision (or a bool: True allows, False rejects). Raising is
            treated as a failed evaluation and cancels the transition.
        """
        ...
