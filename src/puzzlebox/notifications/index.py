"""SubscriptionIndex: resource URI -> subscriber tokens.

Pruning policy:
    - Lazy: NotificationDispatcher removes a token when a delivery to it fails.
    - Eager: hosts call remove_subscriber(token) when a connection closes.
Both remove the token from every resource, since a token lives exactly as
long as its connection.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class SubscriptionIndex:
    """Set-valued map from resource URI to subscriber tokens.

    subscribe() and unsubscribe() are idempotent. URIs with no remaining
    subscribers are dropped so the index does not grow with dead entries.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, set[str]] = {}

    def subscribe(self, uri: str, token: str) -> bool:
        """Add token under uri.

        Returns:
            True if the token was not already subscribed.
        """
        tokens = self._subscribers.setdefault(uri, set())
        if token in tokens:
            return False
        tokens.add(token)
        logger.debug("Subscribed %s to %s", token, uri)
        return True

    def unsubscribe(self, uri: str, token: str) -> bool:
        """Remove token from uri.

        Returns:
            True if the token was subscribed.
        """
        tokens = self._subscribers.get(uri)
        if tokens is None or token not in tokens:
            return False
        tokens.discard(token)
        if not tokens:
            del self._subscribers[uri]
        logger.debug("Unsubscribed %s from %s", token, uri)
        return True

    def subscribers(self, uri: str) -> frozenset[str]:
        """Snapshot of the tokens subscribed to uri."""
        return frozenset(self._subscribers.get(uri, ()))

    def is_subscribed(self, uri: str, token: str) -> bool:
        return token in self._subscribers.get(uri, ())

    def uris_for(self, token: str) -> list[str]:
        """URIs token is subscribed to."""
        return [uri for uri, tokens in self._subscribers.items() if token in tokens]

    def remove_subscriber(self, token: str) -> list[str]:
        """Remove token from every resource (connection closed or unreachable).

        Returns:
            URIs the token was removed from.
        """
        removed = self.uris_for(token)
        for uri in removed:
            self.unsubscribe(uri, token)
        if removed:
            logger.info("Removed subscriber %s from %d resources", token, len(removed))
        return removed

    def uris(self) -> list[str]:
        return list(self._subscribers)

    def clear(self) -> None:
        self._subscribers = {}

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, uri: object) -> bool:
        return uri in self._subscribers
