"""Tests for the Puzzle state machine.

Critical Invariants:
- A fresh puzzle is in its initial state
- Invalid actions and guard cancellations never change the current state
- Exit guard is consulted before enter guard, and only for declared guards
"""

import asyncio
import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from puzzlebox import (
    ActionDefinition,
    CallbackGuardOracle,
    GuardDecision,
    GuardPhase,
    InvalidActionError,
    Puzzle,
    PuzzleDefinition,
    StateDefinition,
    StaticGuardOracle,
    TransitionCancelled,
    parse_definition,
)


@pytest.fixture
def puzzle(door_config) -> Puzzle:
    return Puzzle("puzzle-test", parse_definition(door_config))


@pytest.fixture
def guarded_puzzle(guarded_door_config) -> Puzzle:
    return Puzzle("puzzle-guarded", parse_definition(guarded_door_config))


# Construction and queries


def test_fresh_puzzle_starts_in_initial_state(puzzle):
    current = puzzle.get_current_state()

    assert current is not None
    assert current.name == "Closed"
    assert puzzle.initial_state == "Closed"


@st.composite
def definitions(draw) -> PuzzleDefinition:
    names = draw(st.lists(st.text(min_size=1, max_size=8), min_size=1, max_size=6, unique=True))
    states = {}
    for name in names:
        targets = draw(st.lists(st.sampled_from(names), max_size=3))
        actions = {f"to-{i}": ActionDefinition(f"to-{i}", t) for i, t in enumerate(targets)}
        states[name] = StateDefinition(name=name, actions=actions)
    return PuzzleDefinition(initial_state=draw(st.sampled_from(names)), states=states)


@given(definition=definitions())
def test_any_definition_starts_in_its_initial_state(definition):
    """CRITICAL: get_current_state().name == initial_state for every valid definition."""
    puzzle = Puzzle("puzzle-prop", definition)

    assert puzzle.get_current_state().name == definition.initial_state


@given(definition=definitions(), action=st.text(max_size=8))
def test_unavailable_action_fails_and_preserves_state(definition, action):
    """CRITICAL: Actions not in get_available_actions() fail with the state unchanged.

    Why: A failed transition must be a pure self-loop; partial commits would
    desynchronize subscribers from the real state.
    """
    puzzle = Puzzle("puzzle-prop", definition)
    before = puzzle.get_current_state()
    if action in puzzle.get_available_actions(before.name):
        return

    with pytest.raises(InvalidActionError):
        asyncio.run(puzzle.perform_action(action))

    assert puzzle.get_current_state() == before


def test_available_actions_in_declaration_order(puzzle):
    assert puzzle.get_available_actions("Closed") == ["Open", "Lock"]
    assert puzzle.get_available_actions() == ["Open", "Lock"]


def test_available_actions_empty_for_terminal_and_unknown_states(puzzle):
    assert puzzle.get_available_actions("Opened") == []
    assert puzzle.get_available_actions("NoSuchState") == []


def test_puzzle_without_definition_has_no_current_state():
    puzzle = Puzzle("puzzle-empty")

    assert puzzle.get_current_state() is None
    assert puzzle.get_available_actions() == []
    assert puzzle.snapshot().current_state is None


def test_snapshot_reports_state_and_actions(puzzle):
    snapshot = puzzle.snapshot()

    assert snapshot.puzzle_id == "puzzle-test"
    assert snapshot.to_dict() == {"currentState": "Closed", "availableActions": ["Open", "Lock"]}


# Transitions


@pytest.mark.asyncio
async def test_scenario_open_door(puzzle):
    """Open from Closed reaches Opened, which offers no actions."""
    result = await puzzle.perform_action("Open")

    assert result.success
    assert (result.from_state, result.to_state) == ("Closed", "Opened")
    assert puzzle.get_current_state().name == "Opened"
    assert puzzle.get_available_actions("Opened") == []


@pytest.mark.asyncio
async def test_scenario_bogus_action_keeps_state(puzzle):
    await puzzle.perform_action("Open")

    with pytest.raises(InvalidActionError, match="Bogus"):
        await puzzle.perform_action("Bogus")

    assert puzzle.get_current_state().name == "Opened"


@pytest.mark.asyncio
async def test_round_trip_through_lock(puzzle):
    await puzzle.perform_action("Lock")
    await puzzle.perform_action("Unlock")

    assert puzzle.current_state == "Closed"


@pytest.mark.asyncio
async def test_dangling_target_fails_at_transition_time():
    definition = parse_definition(
        {"initialState": "A", "states": {"A": {"actions": {"go": {"targetState": "Nowhere"}}}}}
    )
    puzzle = Puzzle("puzzle-dangling", definition)

    with pytest.raises(InvalidActionError, match="undefined state 'Nowhere'"):
        await puzzle.perform_action("go")

    assert puzzle.current_state == "A"


# Guards


@pytest.mark.asyncio
async def test_guards_consulted_exit_then_enter(guarded_puzzle):
    oracle = StaticGuardOracle()

    result = await guarded_puzzle.perform_action("Open", oracle)

    assert result.success
    assert [(phase, name) for phase, name, _ in oracle.calls] == [
        (GuardPhase.EXIT, "Closed/guard/exit"),
        (GuardPhase.ENTER, "Opened/guard/enter"),
    ]
    context = oracle.calls[0][2]
    assert context.to_dict() == {
        "puzzleId": "puzzle-guarded",
        "fromState": "Closed",
        "toState": "Opened",
        "actionName": "Open",
    }


@pytest.mark.asyncio
async def test_exit_guard_rejection_cancels(guarded_puzzle):
    oracle = StaticGuardOracle({"Closed/guard/exit": GuardDecision.REJECT})

    with pytest.raises(TransitionCancelled) as excinfo:
        await guarded_puzzle.perform_action("Open", oracle)

    assert excinfo.value.phase == "exit"
    assert excinfo.value.guard == "Closed/guard/exit"
    assert guarded_puzzle.current_state == "Closed"
    assert len(oracle.calls) == 1, "Enter guard must not run after exit rejection"


@pytest.mark.asyncio
async def test_enter_guard_rejection_cancels(guarded_puzzle):
    oracle = StaticGuardOracle({"Opened/guard/enter": False})

    with pytest.raises(TransitionCancelled) as excinfo:
        await guarded_puzzle.perform_action("Open", oracle)

    assert excinfo.value.phase == "enter"
    assert guarded_puzzle.current_state == "Closed"


@pytest.mark.asyncio
async def test_guard_timeout_cancels(guarded_puzzle):
    async def slow(phase, name, context):
        await asyncio.sleep(10)
        return True

    with pytest.raises(TransitionCancelled, match="timed out"):
        await guarded_puzzle.perform_action("Open", CallbackGuardOracle(slow), timeout=0.01)

    assert guarded_puzzle.current_state == "Closed"


@pytest.mark.asyncio
async def test_unguarded_states_skip_oracle(guarded_puzzle):
    oracle = StaticGuardOracle(default=False)
    guarded_puzzle.current_state = "Locked"

    result = await guarded_puzzle.perform_action("KickIn", oracle)

    assert result.success
    assert oracle.calls == []


@pytest.mark.asyncio
async def test_declared_guards_allowed_without_oracle(guarded_puzzle):
    result = await guarded_puzzle.perform_action("Open")

    assert result.success
    assert guarded_puzzle.current_state == "Opened"


@pytest.mark.asyncio
async def test_state_change_during_guard_cancels(guarded_puzzle):
    """A transition whose source state moved while guards ran must not commit."""

    def interfere(phase, name, context):
        guarded_puzzle.current_state = "Locked"
        return True

    with pytest.raises(TransitionCancelled, match="while guards were pending"):
        await guarded_puzzle.perform_action("Open", CallbackGuardOracle(interfere))

    assert guarded_puzzle.current_state == "Locked"


# Post-construction injection


@pytest.mark.asyncio
async def test_injected_state_and_action_are_usable(puzzle):
    puzzle.add_state(StateDefinition(name="Ajar"))
    assert puzzle.add_action("Opened", ActionDefinition(name="Push", target_state="Ajar"))

    await puzzle.perform_action("Open")
    result = await puzzle.perform_action("Push")

    assert result.to_state == "Ajar"


def test_add_action_to_unknown_state_fails(puzzle):
    assert not puzzle.add_action("Nowhere", ActionDefinition(name="Go", target_state="Closed"))


def test_add_initial_state_resets_current(puzzle):
    puzzle.add_state(StateDefinition(name="Start"), is_initial=True)

    assert puzzle.initial_state == "Start"
    assert puzzle.current_state == "Start"


def test_injection_does_not_touch_definition(door_config):
    definition = parse_definition(door_config)
    puzzle = Puzzle("puzzle-a", definition)
    puzzle.add_action("Opened", ActionDefinition(name="Close", target_state="Closed"))

    assert definition.states["Opened"].actions == {}
    assert puzzle.get_available_actions("Opened") == ["Close"]


@pytest.mark.asyncio
async def test_copy_is_independent(puzzle):
    clone = puzzle.copy()
    await clone.perform_action("Open")

    assert clone.id == puzzle.id
    assert clone.current_state == "Opened"
    assert puzzle.current_state == "Closed"


@pytest.mark.asyncio
async def test_transition_commits_target_key():
    puzzle = Puzzle("puzzle-keys")
    puzzle.add_state(StateDefinition(name="A", actions={"go": ActionDefinition("go", "B")}), True)
    puzzle.states["B"] = StateDefinition(name="Bee")

    result = await puzzle.perform_action("go")

    assert result.to_state == "B"
    assert puzzle.current_state == "B"
    assert puzzle.get_current_state() is not None


@pytest.mark.asyncio
async def test_skipped_guards_are_logged(guarded_puzzle, caplog):
    with caplog.at_level(logging.WARNING, logger="puzzlebox"):
        await guarded_puzzle.perform_action("Open")

    assert "no guard oracle configured" in caplog.text
    assert "Closed/guard/exit" in caplog.text
    assert "Opened/guard/enter" in caplog.text
