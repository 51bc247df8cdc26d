"""Signals: publish/subscribe primitive and the association notification bus."""

from traitcore.signals.bus import NotificationBus
from traitcore.signals.signal import Listener, Signal, Subscription

__all__ = [
    "Signal",
    "Subscription",
    "Listener",
    "NotificationBus",
]
