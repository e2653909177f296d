"""Guard oracles and bounded guard evaluation.

Usage:
    from puzzlebox.guards import GuardPhase, StaticGuardOracle, evaluate_guard

    oracle = StaticGuardOracle({"Locked/guard/enter": False})
    verdict = await evaluate_guard(oracle, GuardPhase.ENTER, "Locked/guard/enter", ctx)
"""

from puzzlebox.guards.evaluation import DEFAULT_GUARD_TIMEOUT, evaluate_guard
from puzzlebox.guards.models import (
    GuardContext,
    GuardDecision,
    GuardPhase,
    GuardVerdict,
    RetryPolicy,
)
from puzzlebox.guards.oracles import AllowAllOracle, CallbackGuardOracle, StaticGuardOracle
from puzzlebox.guards.protocol import GuardOracle

__all__ = [
    # Protocol
    "GuardOracle",
    # Models
    "GuardPhase",
    "GuardDecision",
    "GuardContext",
    "GuardVerdict",
    "RetryPolicy",
    # Evaluation
    "evaluate_guard",
    "DEFAULT_GUARD_TIMEOUT",
    # Oracles
    "AllowAllOracle",
    "StaticGuardOracle",
    "CallbackGuardOracle",
]
