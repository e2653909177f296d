"""PuzzleBox: registry-aware coordinator for puzzles, guards and notifications.

Converts core errors into structured results for request handlers and
triggers notifications after committed transitions.

Usage:
    box = PuzzleBox(oracle=my_oracle, transport=my_transport)

    added = box.add_puzzle(config_json)           # AddResult
    box.subscribe(added.puzzle_id, "sess-1")
    result = await box.perform_action(added.puzzle_id, "Open")
    box.get_snapshot(added.puzzle_id).to_dict()
    # {"currentState": "Opened", "availableActions": [...]}

    box.clear_all()  # test/administrative reset
    box.close()      # stops the loop thread used by perform_action_sync()
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from puzzlebox.box.models import AddResult, ResourceDescriptor, ResourcePage, ResourceTemplate
from puzzlebox.box.sync_runner import SyncRunner
from puzzlebox.config import PuzzleBoxSettings
from puzzlebox.core.errors import ConfigError, InvalidActionError, TransitionCancelled
from puzzlebox.core.identity import derive_uri, extract_id, is_puzzle_uri
from puzzlebox.guards import GuardOracle, RetryPolicy
from puzzlebox.notifications import (
    NotificationDispatcher,
    QueueTransport,
    SubscriptionIndex,
    Transport,
)
from puzzlebox.puzzle import ActionResult, Puzzle, PuzzleSnapshot
from puzzlebox.registry import IdAllocator, PuzzleRegistry

logger = logging.getLogger(__name__)


def _encode_cursor(offset: int) -> str:
    return base64.b64encode(str(offset).encode()).decode()


def _decode_cursor(cursor: str | None) -> int:
    """Start offset encoded in cursor; malformed cursors restart from 0."""
    if not cursor:
        return 0
    try:
        offset = int(base64.b64decode(cursor, validate=True).decode())
    except (binascii.Error, UnicodeDecodeError, ValueError):
        logger.debug("Ignoring malformed resource cursor %r", cursor)
        return 0
    return max(offset, 0)


class PuzzleBox:
    """Owns a registry, a subscription index and a dispatcher, wired together.

    Every collaborator is injectable; omitted ones are built from settings.
    Separate PuzzleBox instances share nothing.

    Args:
        registry: Puzzle store (default: new PuzzleRegistry).
        subscriptions: Subscription index (default: new SubscriptionIndex).
        transport: Delivery channel (default: QueueTransport).
        oracle: Guard decision provider; None allows every guard.
        settings: Configuration (default: PuzzleBoxSettings() from environment).
    """

    def __init__(
        self,
        registry: PuzzleRegistry | None = None,
        subscriptions: SubscriptionIndex | None = None,
        transport: Transport | None = None,
        oracle: GuardOracle | None = None,
        settings: PuzzleBoxSettings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else PuzzleBoxSettings()
        if registry is None:
            registry = PuzzleRegistry(
                allocator=IdAllocator(prefix=self._settings.id_prefix),
                strict_targets=self._settings.strict_targets,
            )
        self._registry = registry
        self._subscriptions = subscriptions if subscriptions is not None else SubscriptionIndex()
        self._transport = transport if transport is not None else QueueTransport()
        self._oracle = oracle
        self._dispatcher = NotificationDispatcher(
            self._subscriptions,
            self._transport,
            scheme=self._settings.resource_scheme,
            delivery_timeout=self._settings.delivery_timeout,
        )
        self._retry = RetryPolicy(
            max_attempts=self._settings.guard_retry_attempts,
            backoff=self._settings.guard_retry_backoff,
            base_delay=self._settings.guard_retry_delay,
        )
        self._runner: SyncRunner | None = None

    @property
    def registry(self) -> PuzzleRegistry:
        return self._registry

    @property
    def subscriptions(self) -> SubscriptionIndex:
        return self._subscriptions

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return self._dispatcher

    @property
    def settings(self) -> PuzzleBoxSettings:
        return self._settings

    # Puzzles

    def add_puzzle(self, config: Any) -> AddResult:
        """Register a new puzzle instance from raw configuration.

        Never raises for invalid configuration; the error detail is returned.
        """
        try:
            puzzle = self._registry.add_puzzle(config)
        except ConfigError as e:
            logger.warning("Rejected puzzle configuration: %s", e)
            return AddResult.failed(str(e))
        return AddResult.ok(puzzle.id)

    def get_puzzle(self, puzzle_id: str) -> Puzzle:
        """Raises NotFoundError for unknown ids."""
        return self._registry.get_puzzle(puzzle_id)

    def get_snapshot(self, puzzle_id: str) -> PuzzleSnapshot:
        """Current state and available actions. Raises NotFoundError for unknown ids."""
        return self._registry.get_puzzle(puzzle_id).snapshot()

    def count_puzzles(self) -> int:
        return self._registry.count_puzzles()

    def list_ids(self) -> list[str]:
        return self._registry.list_ids()

    def clear_all(self) -> None:
        """Remove every puzzle and every subscription."""
        self._registry.clear_all()
        self._dispatcher.reset()

    async def _notify(self, puzzle: Puzzle, result: ActionResult) -> None:
        if result.to_state is not None:
            await self._dispatcher.on_puzzle_changed(puzzle.id, result.to_state)

    async def perform_action(self, puzzle_id: str, action_name: str) -> ActionResult:
        """Attempt a transition and notify subscribers if it commits.

        Invalid actions and guard cancellations are normal outcomes reported
        as ActionResult(success=False, reason=...). Notification happens under
        the puzzle's transition lock, so subscribers see commit order.

        Raises:
            NotFoundError: If puzzle_id is unknown.
        """
        try:
            return await self._registry.perform_action(
                puzzle_id,
                action_name,
                self._oracle,
                timeout=self._settings.guard_timeout,
                retry=self._retry,
                on_committed=self._notify,
            )
        except (InvalidActionError, TransitionCancelled) as e:
            puzzle = self._registry.find_puzzle(puzzle_id)
            from_state = puzzle.current_state if puzzle is not None else None
            reason = e.reason if isinstance(e, TransitionCancelled) else str(e)
            logger.info("Action %r on %s failed: %s", action_name, puzzle_id, reason)
            return ActionResult.failed(puzzle_id, action_name, from_state, reason)

    def perform_action_sync(self, puzzle_id: str, action_name: str) -> ActionResult:
        """Synchronous wrapper for perform_action(), run on this box's own loop thread.

        The thread starts on first use and is stopped by close(). Do not mix with
        perform_action() on the same box from another event loop.
        """
        if self._runner is None:
            self._runner = SyncRunner()
        return self._runner.run(self.perform_action(puzzle_id, action_name))

    def close(self) -> None:
        """Stop the loop thread started by perform_action_sync(), if any."""
        if self._runner is not None:
            self._runner.close()
            self._runner = None

    def __enter__(self) -> PuzzleBox:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Subscriptions

    def uri_for(self, puzzle_id: str) -> str:
        return derive_uri(puzzle_id, self._settings.resource_scheme)

    def _resolve_uri(self, puzzle_or_uri: str) -> str:
        if is_puzzle_uri(puzzle_or_uri, self._settings.resource_scheme):
            return puzzle_or_uri
        return self.uri_for(puzzle_or_uri)

    def subscribe(self, puzzle_or_uri: str, token: str) -> bool:
        """Subscribe token to a puzzle, given its id or resource URI.

        Returns:
            True if newly subscribed.

        Raises:
            NotFoundError: If the puzzle does not exist.
        """
        uri = self._resolve_uri(puzzle_or_uri)
        self._registry.get_puzzle(extract_id(uri, self._settings.resource_scheme))
        return self._subscriptions.subscribe(uri, token)

    def unsubscribe(self, puzzle_or_uri: str, token: str) -> bool:
        """Returns True if token was subscribed."""
        return self._subscriptions.unsubscribe(self._resolve_uri(puzzle_or_uri), token)

    def disconnect(self, token: str) -> list[str]:
        """Eagerly remove a subscriber whose connection closed. Returns the URIs it left."""
        return self._subscriptions.remove_subscriber(token)

    # Resources

    def resource_template(self) -> ResourceTemplate:
        return ResourceTemplate(uri_template=f"{self._settings.resource_scheme}{{id}}")

    def list_resources(self, cursor: str | None = None) -> ResourcePage:
        """List puzzles as resources, page_size at a time, in insertion order."""
        ids = self._registry.list_ids()
        start = _decode_cursor(cursor)
        end = min(start + self._settings.page_size, len(ids))
        resources = [
            ResourceDescriptor(uri=self.uri_for(puzzle_id), name=f"Puzzle {puzzle_id}")
            for puzzle_id in ids[start:end]
        ]
        next_cursor = _encode_cursor(end) if end < len(ids) else None
        return ResourcePage(resources=resources, next_cursor=next_cursor)

    def read_resource(self, uri: str) -> PuzzleSnapshot:
        """Snapshot of the puzzle named by uri.

        Raises:
            ValueError: If uri is not a puzzle resource URI.
            NotFoundError: If the puzzle does not exist.
        """
        return self.get_snapshot(extract_id(uri, self._settings.resource_scheme))
