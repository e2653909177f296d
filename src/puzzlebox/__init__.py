"""puzzlebox: registry of finite-state-machine puzzles with change notifications.

Usage:
    from puzzlebox import PuzzleBox, StaticGuardOracle, QueueTransport

    transport = QueueTransport()
    box = PuzzleBox(transport=transport, oracle=StaticGuardOracle())

    added = box.add_puzzle({
        "initialState": "Closed",
        "states": {
            "Closed": {"actions": {"Open": {"targetState": "Opened"}}},
            "Opened": {},
        },
    })
    queue = transport.connect("sess-1")
    box.subscribe(added.puzzle_id, "sess-1")

    result = await box.perform_action(added.puzzle_id, "Open")
    event = await queue.get()  # ChangeEvent(state="Opened", ...)
"""

__version__ = "0.1.0"

# Service layer
from puzzlebox.box import AddResult, PuzzleBox, ResourceDescriptor, ResourcePage

# Configuration
from puzzlebox.config import PuzzleBoxSettings, configure_logging

# Core primitives
from puzzlebox.core import (
    ActionDefinition,
    ConfigError,
    DeliveryFailure,
    InvalidActionError,
    NotFoundError,
    PuzzleBoxError,
    PuzzleDefinition,
    StateDefinition,
    TransitionCancelled,
    derive_uri,
    extract_id,
    parse_definition,
)

# Guards
from puzzlebox.guards import (
    AllowAllOracle,
    CallbackGuardOracle,
    GuardContext,
    GuardDecision,
    GuardOracle,
    GuardPhase,
    RetryPolicy,
    StaticGuardOracle,
)

# Notifications
from puzzlebox.notifications import (
    ChangeEvent,
    DeliveryReport,
    NotificationDispatcher,
    QueueTransport,
    SubscriptionIndex,
    Transport,
)

# Puzzles and registry
from puzzlebox.puzzle import ActionResult, Puzzle, PuzzleSnapshot
from puzzlebox.registry import IdAllocator, PuzzleRegistry

__all__ = [
    # Version
    "__version__",
    # Core
    "ActionDefinition",
    "StateDefinition",
    "PuzzleDefinition",
    "parse_definition",
    "derive_uri",
    "extract_id",
    "PuzzleBoxError",
    "ConfigError",
    "NotFoundError",
    "InvalidActionError",
    "TransitionCancelled",
    "DeliveryFailure",
    # Puzzles
    "Puzzle",
    "PuzzleSnapshot",
    "ActionResult",
    # Registry
    "PuzzleRegistry",
    "IdAllocator",
    # Guards
    "GuardOracle",
    "GuardPhase",
    "GuardDecision",
    "GuardContext",
    "RetryPolicy",
    "AllowAllOracle",
    "StaticGuardOracle",
    "CallbackGuardOracle",
    # Notifications
    "Transport",
    "ChangeEvent",
    "DeliveryReport",
    "SubscriptionIndex",
    "NotificationDispatcher",
    "QueueTransport",
    # Service
    "PuzzleBox",
    "AddResult",
    "ResourceDescriptor",
    "ResourcePage",
    # Config
    "PuzzleBoxSettings",
    "configure_logging",
]
