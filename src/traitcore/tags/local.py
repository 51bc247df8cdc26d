"""In-memory tag service.

Tags are kept per tag name in insertion order. Add and remove signals are
created lazily per tag and fire only on actual state changes.
"""

from __future__ import annotations

import logging
from typing import Any

from traitcore.signals import Signal

logger = logging.getLogger(__name__)


class LocalTagService:
    """Process-local tag table with per-tag change signals.

    Entities must be hashable. Signals fire after the table is updated, so
    listeners observe the new state.
    """

    def __init__(self) -> None:
        self._tagged: dict[str, dict[Any, None]] = {}
        self._added: dict[str, Signal] = {}
        self._removed: dict[str, Signal] = {}

    def add_tag(self, entity: Any, tag: str) -> None:
        members = self._tagged.setdefault(tag, {})
        if entity in members:
            return
        members[entity] = None
        logger.debug("Tag %r added to %r", tag, entity)
        signal = self._added.get(tag)
        if signal is not None:
            signal.fire(entity)

    def remove_tag(self, entity: Any, tag: str) -> None:
        members = self._tagged.get(tag)
        if not members or entity not in members:
            return
        del members[entity]
        if not members:
            del self._tagged[tag]
        logger.debug("Tag %r removed from %r", tag, entity)
        signal = self._removed.get(tag)
        if signal is not None:
            signal.fire(entity)

    def has_tag(self, entity: Any, tag: str) -> bool:
        return entity in self._tagged.get(tag, {})

    def tagged(self, tag: str) -> list[Any]:
        return list(self._tagged.get(tag, {}))

    def tags_of(self, entity: Any) -> frozenset[str]:
        """All tags currently on ``entity``."""
        return frozenset(tag for tag, members in self._tagged.items() if entity in members)

    def on_tag_added(self, tag: str) -> Signal:
        signal = self._added.get(tag)
        if signal is None:
            signal = self._added[tag] = Signal(name=f"tag-added:{tag}")
        return signal

    def on_tag_removed(self, tag: str) -> Signal:
        signal = self._removed.get(tag)
        if signal is None:
            signal = self._removed[tag] = Signal(name=f"tag-removed:{tag}")
        return signal

    def clear(self) -> None:
        """Drop every tag without firing removal signals."""
        self._tagged.clear()
