"""Protocol for the delivery channel used by NotificationDispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from puzzlebox.notifications.models import ChangeEvent


@runtime_checkable
class Transport(Protocol):
    """Pushes an event to one subscriber.

    The transport owns connection lookup: a token whose connection is gone
    must yield False (or raise), which makes the dispatcher prune it.

    Usage:
        class SessionTransport:
            def __init__(self, sessions):
                self._sessions = sessions

            async def send(self, token, event):
                session = self._sessions.get(token)
                if session is None:
                    return False
                await session.send_resource_updated(event.uri)
                return True
    """

    async def send(self, token: str, event: ChangeEvent) -> bool:
        """Deliver event to the subscriber identified by token.

        Returns:
            True if delivered, False if the subscriber is unreachable.
        """
        ...
