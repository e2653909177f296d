"""Shared test fixtures."""

import sys
from collections.abc import Iterator

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from puzzlebox import PuzzleBox, PuzzleBoxSettings, PuzzleRegistry, QueueTransport  # noqa: E402

DOOR_CONFIG = {
    "initialState": "Closed",
    "states": {
        "Closed": {
            "name": "Closed",
            "actions": {
                "Open": {"name": "Open", "targetState": "Opened"},
                "Lock": {"name": "Lock", "targetState": "Locked"},
            },
        },
        "Opened": {"name": "Opened"},
        "Locked": {
            "name": "Locked",
            "actions": {"Unlock": {"name": "Unlock", "targetState": "Closed"}},
        },
    },
}

GUARDED_DOOR_CONFIG = {
    "initialState": "Closed",
    "states": {
        "Closed": {
            "name": "Closed",
            "actions": {
                "Open": {"name": "Open", "targetState": "Opened"},
                "Lock": {"name": "Lock", "targetState": "Locked"},
            },
            "exitGuard": "Closed/guard/exit",
        },
        "Opened": {
            "name": "Opened",
            "actions": {"Close": {"name": "Close", "targetState": "Closed"}},
            "enterGuard": "Opened/guard/enter",
        },
        "Locked": {
            "name": "Locked",
            "actions": {
                "Unlock": {"name": "Unlock", "targetState": "Closed"},
                "KickIn": {"name": "KickIn", "targetState": "KickedIn"},
            },
        },
        "KickedIn": {"name": "KickedIn"},
    },
}


@pytest.fixture
def door_config() -> dict:
    """Door puzzle: Closed -Open-> Opened, Closed -Lock-> Locked -Unlock-> Closed."""
    return DOOR_CONFIG


@pytest.fixture
def guarded_door_config() -> dict:
    """Door puzzle with an exit guard on Closed and an enter guard on Opened."""
    return GUARDED_DOOR_CONFIG


@pytest.fixture
def settings() -> PuzzleBoxSettings:
    """Settings independent of the environment, with short timeouts."""
    return PuzzleBoxSettings(_env_file=None, guard_timeout=1.0, delivery_timeout=1.0)


@pytest.fixture
def registry() -> PuzzleRegistry:
    """Fresh, empty PuzzleRegistry."""
    return PuzzleRegistry()


@pytest.fixture
def transport() -> QueueTransport:
    return QueueTransport()


@pytest.fixture
def box(settings: PuzzleBoxSettings, transport: QueueTransport) -> Iterator[PuzzleBox]:
    """PuzzleBox without a guard oracle, delivering into a QueueTransport."""
    with PuzzleBox(transport=transport, settings=settings) as box:
        yield box
