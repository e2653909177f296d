"""Parsing raw puzzle configuration into PuzzleDefinition.

Raw configuration is JSON text or a mapping in the wire shape:

    {
        "initialState": "Closed",
        "states": {
            "Closed": {
                "name": "Closed",
                "actions": {"Open": {"name": "Open", "targetState": "Opened"}},
                "exitGuard": "Closed/guard/exit"
            },
            "Opened": {"name": "Opened"}
        }
    }

snake_case keys (initial_state, target_state, enter_guard, exit_guard) are
accepted as well. Map keys are authoritative: a state's or action's embedded
"name" is informational and is replaced by its key.

Usage:
    definition = parse_definition(json_text)
    definition = parse_definition(config_dict, strict=True)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from puzzlebox.core.definition.models import (
    ActionDefinition,
    PuzzleDefinition,
    StateDefinition,
)
from puzzlebox.core.errors import ConfigError

logger = logging.getLogger(__name__)

_MAX_REPORTED_ERRORS = 5


class _ActionSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    target_state: str = Field(validation_alias=AliasChoices("targetState", "target_state"))


class _StateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    actions: dict[str, _ActionSchema] | None = None
    enter_guard: str | None = Field(
        default=None, validation_alias=AliasChoices("enterGuard", "enter_guard")
    )
    exit_guard: str | None = Field(
        default=None, validation_alias=AliasChoices("exitGuard", "exit_guard")
    )


class _PuzzleSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None  # Accepted for compatibility; the registry assigns ids
    initial_state: str = Field(validation_alias=AliasChoices("initialState", "initial_state"))
    states: dict[str, _StateSchema]


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors()[:_MAX_REPORTED_ERRORS]:
        location = ".".join(str(p) for p in detail["loc"]) or "<root>"
        parts.append(f"{location}: {detail['msg']}")
    remaining = error.error_count() - _MAX_REPORTED_ERRORS
    if remaining > 0:
        parts.append(f"... and {remaining} more")
    return "; ".join(parts)


def _normalize_state(key: str, schema: _StateSchema) -> StateDefinition:
    if schema.name is not None and schema.name != key:
        logger.debug("State %r declares name %r; using map key", key, schema.name)

    actions: dict[str, ActionDefinition] = {}
    for action_key, action in (schema.actions or {}).items():
        if action.name is not None and action.name != action_key:
            logger.debug(
                "Action %r in state %r declares name %r; using map key",
                action_key,
                key,
                action.name,
            )
        actions[action_key] = ActionDefinition(name=action_key, target_state=action.target_state)

    return StateDefinition(
        name=key,
        actions=actions,
        enter_guard=schema.enter_guard,
        exit_guard=schema.exit_guard,
    )


def _check_targets(definition: PuzzleDefinition, strict: bool) -> None:
    dangling = definition.dangling_targets()
    if not dangling:
        return
    described = ", ".join(f"{state}.{action} -> {target}" for state, action, target in dangling)
    if strict:
        raise ConfigError(f"Actions target undefined states: {described}")
    logger.warning("Actions target undefined states (rejected at transition time): %s", described)


def parse_definition(raw: Any, *, strict: bool = False) -> PuzzleDefinition:
    """Validate raw configuration and normalize it into a PuzzleDefinition.

    Args:
        raw: JSON text/bytes, a mapping in the configuration shape, or an
            already-built PuzzleDefinition (returned after the target check).
        strict: Reject actions whose target_state is not a defined state.
            When False such actions are accepted with a warning and fail
            when performed.

    Returns:
        Normalized, immutable PuzzleDefinition.

    Raises:
        ConfigError: If raw is unparsable, initial_state is missing or not a
            defined state, states is not a name -> definition mapping, any
            state or action entry is malformed, or (strict) a target is undefined.
    """
    if isinstance(raw, PuzzleDefinition):
        _check_targets(raw, strict)
        return raw

    try:
        if isinstance(raw, (str, bytes, bytearray)):
            schema = _PuzzleSchema.model_validate_json(raw)
        elif isinstance(raw, Mapping):
            schema = _PuzzleSchema.model_validate(dict(raw))
        else:
            raise ConfigError(
                f"Puzzle configuration must be JSON text or a mapping, got {type(raw).__name__}"
            )
    except ValidationError as e:
        raise ConfigError(f"Invalid puzzle configuration: {_format_validation_error(e)}") from e

    if schema.initial_state not in schema.states:
        raise ConfigError(f"Initial state {schema.initial_state!r} is not a defined state")

    definition = PuzzleDefinition(
        initial_state=schema.initial_state,
        states={key: _normalize_state(key, state) for key, state in schema.states.items()},
    )
    _check_targets(definition, strict)
    return definition
