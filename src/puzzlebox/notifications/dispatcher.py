"""NotificationDispatcher: fans change events out to subscribers.

Usage:
    dispatcher = NotificationDispatcher(index, transport)
    report = await dispatcher.on_puzzle_changed(puzzle.id, "Opened")
    report.delivered, report.pruned
"""

from __future__ import annotations

import asyncio
import logging

from puzzlebox.core.errors import DeliveryFailure
from puzzlebox.core.identity import PUZZLE_RESOURCE_PATH, derive_uri
from puzzlebox.notifications.index import SubscriptionIndex
from puzzlebox.notifications.models import ChangeEvent, DeliveryReport
from puzzlebox.notifications.protocol import Transport

logger = logging.getLogger(__name__)

DEFAULT_DELIVERY_TIMEOUT = 5.0


class NotificationDispatcher:
    """Delivers a ChangeEvent to every live subscriber of a puzzle.

    Deliveries to different subscribers run concurrently and are isolated:
    a subscriber that fails, raises or times out is pruned from the index and
    never prevents delivery to the others or fails the caller.

    Fan-outs for the same puzzle are serialized, so each subscriber receives
    that puzzle's events in the order on_puzzle_changed() was called.

    Args:
        index: Subscription index to read and prune.
        transport: Delivery channel.
        scheme: Resource URI prefix (see derive_uri()).
        delivery_timeout: Seconds allowed per delivery; None disables the bound.
    """

    def __init__(
        self,
        index: SubscriptionIndex,
        transport: Transport,
        *,
        scheme: str = PUZZLE_RESOURCE_PATH,
        delivery_timeout: float | None = DEFAULT_DELIVERY_TIMEOUT,
    ) -> None:
        self._index = index
        self._transport = transport
        self._scheme = scheme
        self._delivery_timeout = delivery_timeout
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def index(self) -> SubscriptionIndex:
        return self._index

    def _lock_for(self, uri: str) -> asyncio.Lock:
        lock = self._locks.get(uri)
        if lock is None:
            lock = self._locks[uri] = asyncio.Lock()
        return lock

    async def _deliver(self, token: str, event: ChangeEvent) -> None:
        try:
            sent = await asyncio.wait_for(
                self._transport.send(token, event), self._delivery_timeout
            )
        except TimeoutError as e:
            raise DeliveryFailure(token, f"Delivery to {token!r} timed out") from e
        except Exception as e:
            raise DeliveryFailure(token, f"Delivery to {token!r} failed: {e}") from e
        if sent is False:
            raise DeliveryFailure(token, f"Subscriber {token!r} is not connected")

    async def on_puzzle_changed(self, puzzle_id: str, new_state: str) -> DeliveryReport:
        """Notify subscribers of puzzle_id that it is now in new_state.

        Returns:
            DeliveryReport listing delivered and pruned tokens.
        """
        uri = derive_uri(puzzle_id, self._scheme)
        async with self._lock_for(uri):
            tokens = sorted(self._index.subscribers(uri))
            if not tokens:
                return DeliveryReport(event=None)

            event = ChangeEvent(puzzle_id=puzzle_id, uri=uri, state=new_state)
            outcomes = await asyncio.gather(
                *(self._deliver(token, event) for token in tokens),
                return_exceptions=True,
            )

            delivered: list[str] = []
            pruned: list[str] = []
            for token, outcome in zip(tokens, outcomes, strict=True):
                if isinstance(outcome, BaseException):
                    logger.info("Pruning subscriber %s: %s", token, outcome)
                    self._index.remove_subscriber(token)
                    pruned.append(token)
                else:
                    delivered.append(token)

            logger.debug(
                "Dispatched %s for %s: %d delivered, %d pruned",
                new_state,
                puzzle_id,
                len(delivered),
                len(pruned),
            )
            return DeliveryReport(event=event, delivered=tuple(delivered), pruned=tuple(pruned))

    def reset(self) -> None:
        """Drop all dispatch state and subscriptions."""
        self._locks = {}
        self._index.clear()
