"""Ready-made GuardOracle implementations.

Usage:
    # Everything passes (the behavior when no oracle is configured)
    oracle = AllowAllOracle()

    # Fixed answers per guard name, e.g. in tests
    oracle = StaticGuardOracle({"Closed/guard/exit": GuardDecision.REJECT})

    # Any sync or async callable(phase, guard_name, context)
    oracle = CallbackGuardOracle(lambda phase, name, ctx: ctx.action != "KickIn")
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from puzzlebox.guards.models import GuardContext, GuardDecision, GuardPhase


class AllowAllOracle:
    """Oracle that allows every guard."""

    async def evaluate(
        self, phase: GuardPhase, guard_name: str, context: GuardContext
    ) -> GuardDecision:
        return GuardDecision.ALLOW


class StaticGuardOracle:
    """Deterministic oracle answering from a name -> decision table.

    Records every call in ``calls`` as (phase, guard_name, context).

    Args:
        decisions: Decision per guard name (GuardDecision or bool).
        default: Decision for guards missing from the table.
    """

    def __init__(
        self,
        decisions: Mapping[str, GuardDecision | bool] | None = None,
        default: GuardDecision | bool = GuardDecision.ALLOW,
    ) -> None:
        self._decisions = {k: GuardDecision.coerce(v) for k, v in (decisions or {}).items()}
        self._default = GuardDecision.coerce(default)
        self.calls: list[tuple[GuardPhase, str, GuardContext]] = []

    def set_decision(self, guard_name: str, decision: GuardDecision | bool) -> None:
        self._decisions[guard_name] = GuardDecision.coerce(decision)

    async def evaluate(
        self, phase: GuardPhase, guard_name: str, context: GuardContext
    ) -> GuardDecision:
        self.calls.append((phase, guard_name, context))
        return self._decisions.get(guard_name, self._default)


class CallbackGuardOracle:
    """Adapt a plain callable into a GuardOracle.

    The callable may be sync or async and may return a GuardDecision, a bool
    or a decision string ("allow", "reject").
    """

    def __init__(self, fn: Callable[[GuardPhase, str, GuardContext], Any]) -> None:
        self._fn = fn

    async def evaluate(
        self, phase: GuardPhase, guard_name: str, context: GuardContext
    ) -> GuardDecision:
        answer = self._fn(phase, guard_name, context)
        if inspect.isawaitable(answer):
            answer = await answer
        return GuardDecision.coerce(answer)
