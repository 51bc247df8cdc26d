"""Query view: filtered, optionally live read over traits' membership.

Usage:
    view = registry.query({"tags": ["glowing", "charged"], "predicate": {"color": "red"}})

    # Point-in-time snapshot
    for entity in view.get():
        ...

    # Live subscription to future qualifying associations
    sub = view.track(lambda trait, entity: print(trait.identifier, entity))
    sub.cancel()
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from traitcore.core.query import QuerySpec, matches
from traitcore.signals import Subscription

if TYPE_CHECKING:
    from traitcore.traits.registry import TraitRegistry
    from traitcore.traits.trait import Trait

TrackListener = Callable[["Trait", Any], Any]
"""Signature: (trait, entity) -> None, or a coroutine."""


class QueryView:
    """Read-only projection over one or more traits, filtered by properties.

    Views hold no membership of their own; every read goes back to the
    registry, so a tag retired after the view was built contributes nothing.

    Args:
        registry: Registry the tags are resolved against.
        spec: Validated query spec.
    """

    def __init__(self, registry: TraitRegistry, spec: QuerySpec):
        self._registry = registry
        self._spec = spec

    @property
    def spec(self) -> QuerySpec:
        return self._spec

    @property
    def tags(self) -> tuple[str, ...]:
        return self._spec.tags

    def accepts(self, trait: Trait, entity: Any) -> bool:
        """Check whether an association event qualifies for this view."""
        return self._spec.has_tag(trait.identifier) and matches(
            entity, self._spec.predicate, self._registry.reader
        )

    def get(self) -> list[Any]:
        """Snapshot of matching members across all tags.

        Deduplicated, ordered by tag order in the spec and then membership
        insertion order.
        """
        seen: set[Any] = set()
        result: list[Any] = []
        for tag in self._spec.tags:
            trait = self._registry.lookup(tag)
            if trait is None:
                continue
            for entity in trait.members:
                if entity in seen:
                    continue
                seen.add(entity)
                if matches(entity, self._spec.predicate, self._registry.reader):
                    result.append(entity)
        return result

    def track(self, listener: TrackListener) -> Subscription:
        """Invoke ``listener(trait, entity)`` for each future qualifying association.

        Past associations are not replayed. Listeners fire in registration
        order; one raising is logged and does not stop the others.

        Raises:
            TypeError: If listener is not callable.
        """
        if not callable(listener):
            raise TypeError(f"Track listener must be callable, got {listener!r}")

        def _filtered(trait: Trait, entity: Any) -> Any:
            if self.accepts(trait, entity):
                return listener(trait, entity)
            return None

        return self._registry.bus.connect(_filtered)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.get())

    def __repr__(self) -> str:
        return f"<QueryView tags={list(self._spec.tags)} predicate={dict(self._spec.predicate)}>"
