"""Tag service protocol for swappable tag-propagation backends.

The tag layer is the host environment's mechanism for marking entities with
string tags and announcing changes. Traits consume it only through this
interface:
- Local in-memory (default, LocalTagService)
- Game engine or external service adapters (host supplied)

Usage:
    tags = LocalTagService()
    registry = TraitRegistry(tags=tags)
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from traitcore.signals import Signal


@runtime_checkable
class TagService(Protocol):
    """Abstract tag-propagation interface. Implementations hold the actual tags."""

    def add_tag(self, entity: Any, tag: str) -> None:
        """Attach ``tag`` to ``entity``. No-op if already present."""
        ...

    def remove_tag(self, entity: Any, tag: str) -> None:
        """Detach ``tag`` from ``entity``. No-op if absent."""
        ...

    def has_tag(self, entity: Any, tag: str) -> bool:
        """Check if entity currently carries the tag."""
        ...

    def tagged(self, tag: str) -> list[Any]:
        """All entities currently carrying ``tag``."""
        ...

    def on_tag_added(self, tag: str) -> Signal:
        """Signal fired with the entity for every future add of ``tag``."""
        ...

    def on_tag_removed(self, tag: str) -> Signal:
        """Signal fired with the entity for every future removal of ``tag``."""
        ...
