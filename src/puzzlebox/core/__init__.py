"""Core functionalities: immutable definitions, identity and errors.

Architecture Note:
    core/ contains pure, stateless building blocks with no runtime state.
    For stateful services, see puzzle/, registry/, notifications/ and box/.
"""

from puzzlebox.core.definition import (
    ActionDefinition,
    PuzzleDefinition,
    StateDefinition,
    parse_definition,
)
from puzzlebox.core.errors import (
    ConfigError,
    DeliveryFailure,
    InvalidActionError,
    NotFoundError,
    PuzzleBoxError,
    TransitionCancelled,
)
from puzzlebox.core.identity import (
    PUZZLE_RESOURCE_PATH,
    derive_uri,
    extract_id,
    is_puzzle_uri,
)
from puzzlebox.core.types import ActionName, GuardName, StateName, SubscriberToken

__all__ = [
    # Types
    "StateName",
    "ActionName",
    "GuardName",
    "SubscriberToken",
    # Definitions
    "ActionDefinition",
    "StateDefinition",
    "PuzzleDefinition",
    "parse_definition",
    # Identity
    "PUZZLE_RESOURCE_PATH",
    "derive_uri",
    "extract_id",
    "is_puzzle_uri",
    # Errors
    "PuzzleBoxError",
    "ConfigError",
    "NotFoundError",
    "InvalidActionError",
    "TransitionCancelled",
    "DeliveryFailure",
]
