"""Bounded guard evaluation.

Every oracle call is wrapped in asyncio.wait_for(); a timeout, an exception or
an unrecognized answer is reported as a non-allowing verdict instead of
propagating, so a misbehaving oracle can only cancel a transition.

Retry configuration uses tenacity:
    verdict = await evaluate_guard(
        oracle, GuardPhase.EXIT, "Closed/guard/exit", context,
        timeout=2.0,
        retry=RetryPolicy(max_attempts=3, backoff="exponential"),
    )
"""

from __future__ import annotations

import asyncio
import logging

import tenacity

from puzzlebox.guards.models import (
    GuardContext,
    GuardDecision,
    GuardPhase,
    GuardVerdict,
    RetryPolicy,
)
from puzzlebox.guards.protocol import GuardOracle

logger = logging.getLogger(__name__)

DEFAULT_GUARD_TIMEOUT = 5.0


async def _call_oracle(
    oracle: GuardOracle,
    phase: GuardPhase,
    guard_name: str,
    context: GuardContext,
    timeout: float | None,
) -> GuardDecision:
    answer = await asyncio.wait_for(oracle.evaluate(phase, guard_name, context), timeout)
    return GuardDecision.coerce(answer)


def _build_retryer(policy: RetryPolicy) -> tenacity.AsyncRetrying:
    """Build a tenacity retryer from RetryPolicy configuration."""
    stop = tenacity.stop_after_attempt(policy.max_attempts)

    wait: tenacity.wait.wait_base
    if policy.backoff == "exponential":
        wait = tenacity.wait_exponential(multiplier=policy.base_delay, min=policy.base_delay)
    elif policy.backoff == "linear":
        wait = tenacity.wait_incrementing(start=policy.base_delay, increment=policy.base_delay)
    else:
        wait = tenacity.wait_none()

    return tenacity.AsyncRetrying(
        stop=stop,
        wait=wait,
        retry=tenacity.retry_if_not_exception_type(TimeoutError),
        reraise=True,
    )


async def _call_with_retry(
    oracle: GuardOracle,
    phase: GuardPhase,
    guard_name: str,
    context: GuardContext,
    timeout: float | None,
    policy: RetryPolicy,
) -> GuardDecision:
    if policy.max_attempts <= 1:
        return await _call_oracle(oracle, phase, guard_name, context, timeout)

    async for attempt in _build_retryer(policy):
        with attempt:
            return await _call_oracle(oracle, phase, guard_name, context, timeout)

    raise RuntimeError("unreachable")  # pragma: no cover


async def evaluate_guard(
    oracle: GuardOracle,
    phase: GuardPhase,
    guard_name: str,
    context: GuardContext,
    *,
    timeout: float | None = DEFAULT_GUARD_TIMEOUT,
    retry: RetryPolicy | None = None,
) -> GuardVerdict:
    """Ask oracle about one guard, bounded by timeout.

    Args:
        oracle: Decision provider.
        phase: EXIT or ENTER.
        guard_name: Guard identifier from the state definition.
        context: Transition being attempted.
        timeout: Seconds per attempt; None disables the bound.
        retry: Retry policy for oracle exceptions. Default: no retry.

    Returns:
        GuardVerdict; only GuardDecision.ALLOW lets the transition proceed.
    """
    policy = retry or RetryPolicy()
    try:
        decision = await _call_with_retry(oracle, phase, guard_name, context, timeout, policy)
    except TimeoutError:
        logger.warning(
            "Guard %r (%s) timed out after %ss for puzzle %s",
            guard_name,
            phase,
            timeout,
            context.puzzle_id,
        )
        return GuardVerdict(
            decision=GuardDecision.TIMEOUT,
            phase=phase,
            guard=guard_name,
            reason=f"{phase} guard {guard_name!r} timed out",
        )
    except Exception as e:
        logger.warning(
            "Guard %r (%s) failed for puzzle %s: %s",
            guard_name,
            phase,
            context.puzzle_id,
            e,
        )
        return GuardVerdict(
            decision=GuardDecision.ERROR,
            phase=phase,
            guard=guard_name,
            reason=f"{phase} guard {guard_name!r} failed: {e}",
        )

    if decision.allowed:
        return GuardVerdict(decision=decision, phase=phase, guard=guard_name)

    logger.info(
        "Guard %r (%s) returned %s for puzzle %s",
        guard_name,
        phase,
        decision,
        context.puzzle_id,
    )
    return GuardVerdict(
        decision=decision,
        phase=phase,
        guard=guard_name,
        reason=f"{phase} guard {guard_name!r} returned {decision}",
    )
