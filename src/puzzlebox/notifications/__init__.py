"""Subscriptions and change notification fan-out."""

from puzzlebox.notifications.dispatcher import DEFAULT_DELIVERY_TIMEOUT, NotificationDispatcher
from puzzlebox.notifications.index import SubscriptionIndex
from puzzlebox.notifications.models import ChangeEvent, DeliveryReport
from puzzlebox.notifications.protocol import Transport
from puzzlebox.notifications.transports import QueueTransport

__all__ = [
    # Protocol
    "Transport",
    # Models
    "ChangeEvent",
    "DeliveryReport",
    # Services
    "SubscriptionIndex",
    "NotificationDispatcher",
    "DEFAULT_DELIVERY_TIMEOUT",
    # Transports
    "QueueTransport",
]
