"""Notification bus: one emission per successful association."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from traitcore.signals.signal import Signal

if TYPE_CHECKING:
    from traitcore.traits.trait import Trait


class NotificationBus(Signal):
    """Broadcast channel carrying ``(trait, entity)`` pairs.

    Every trait of a registry publishes here; query views subscribe and
    re-filter.
    """

    def __init__(self) -> None:
        super().__init__(name="notification-bus")

    def publish(self, trait: Trait, entity: Any) -> None:
        """Announce that ``entity`` was associated with ``trait``."""
        self.fire(trait, entity)
