"""Trait registry: identifier table, trait definition, and queries.

Usage:
    registry = TraitRegistry()

    glowing = registry.define_trait("glowing", lambda trait, entity: ...)

    # Decorator form
    @registry.trait("charged")
    async def charge(trait, entity):
        await entity.charge_up()

    view = registry.query({"tags": ["glowing"], "predicate": {"color": "red"}})
    registry.retire(glowing)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from traitcore.config import TraitSettings
from traitcore.core.errors import (
    DuplicateIdentifierError,
    InvalidArgumentError,
    UnknownTagError,
)
from traitcore.core.query import AttributeReader, PropertyReader, QuerySpec, normalize_spec
from traitcore.signals import NotificationBus
from traitcore.tags import LocalTagService, TagService
from traitcore.traits.trait import Initializer, Trait
from traitcore.traits.view import QueryView

logger = logging.getLogger(__name__)


class TraitRegistry:
    """Table of live traits keyed by identifier.

    Owns the notification bus all its traits publish to. Identifiers are
    unique among live traits; retiring a trait frees its identifier.

    Args:
        tags: Tag-propagation backend. Defaults to a fresh LocalTagService.
        reader: Property reader used by query views. Defaults to AttributeReader.
        bus: Notification bus. Defaults to a fresh NotificationBus.
        settings: Registry settings. Defaults to TraitSettings() from environment.
    """

    def __init__(
        self,
        tags: TagService | None = None,
        reader: PropertyReader | None = None,
        bus: NotificationBus | None = None,
        settings: TraitSettings | None = None,
    ) -> None:
        self._tags = tags if tags is not None else LocalTagService()
        self._reader = reader if reader is not None else AttributeReader()
        self._bus = bus if bus is not None else NotificationBus()
        self._settings = settings if settings is not None else TraitSettings()
        self._traits: dict[str, Trait] = {}

    @property
    def tags(self) -> TagService:
        return self._tags

    @property
    def reader(self) -> PropertyReader:
        return self._reader

    @property
    def bus(self) -> NotificationBus:
        return self._bus

    @property
    def settings(self) -> TraitSettings:
        return self._settings

    def define_trait(self, identifier: str, initializer: Initializer) -> Trait:
        """Register a new trait and reconcile entities already carrying its tag.

        Args:
            identifier: Non-empty tag name, unique among live traits.
            initializer: Callback ``(trait, entity)`` run once per entity.

        Returns:
            The new Trait.

        Raises:
            InvalidArgumentError: If identifier is empty or not a string, or
                initializer is not callable.
            DuplicateIdentifierError: If identifier belongs to a live trait.
        """
        if not isinstance(identifier, str) or not identifier:
            raise InvalidArgumentError(
                f"Trait identifier must be a non-empty string, got {identifier!r}"
            )
        if not callable(initializer):
            raise InvalidArgumentError(f"Trait initializer must be callable, got {initializer!r}")
        if identifier in self._traits:
            raise DuplicateIdentifierError(identifier)

        trait = Trait(
            identifier,
            initializer,
            tags=self._tags,
            bus=self._bus,
            settings=self._settings,
        )
        self._traits[identifier] = trait
        logger.debug("Defined trait %r", identifier)
        try:
            trait._attach()
        except BaseException:
            self.retire(trait)
            raise
        return trait

    def trait(self, identifier: str) -> Callable[[Initializer], Trait]:
        """Decorator form of define_trait().

        >>> @registry.trait("glowing")
        ... def glow(trait, entity):
        ...     entity.brightness = 10
        >>> glow
        <Trait 'glowing' members=0>
        """

        def decorator(initializer: Initializer) -> Trait:
            return self.define_trait(identifier, initializer)

        return decorator

    def retire(self, trait: Trait | str) -> None:
        """Remove a trait and free its identifier. Idempotent.

        Membership is discarded; entities keep their external tags.
        """
        if isinstance(trait, str):
            found = self._traits.get(trait)
            if found is None:
                return
            trait = found
        if self._traits.get(trait.identifier) is trait:
            del self._traits[trait.identifier]
            logger.debug("Retired trait %r", trait.identifier)
        trait._detach()

    def lookup(self, identifier: str) -> Trait | None:
        """Get the live trait for ``identifier``, if any."""
        return self._traits.get(identifier)

    def query(self, spec: QuerySpec | Mapping[str, Any]) -> QueryView:
        """Build a view over the members of one or more traits.

        Args:
            spec: QuerySpec, or mapping ``{"tags": [...], "predicate": {...}}``.

        Returns:
            QueryView over the named tags.

        Raises:
            InvalidArgumentError: If the spec is malformed.
            UnknownTagError: If any tag has no live trait.
        """
        normalized = normalize_spec(spec)
        for tag in normalized.tags:
            if tag not in self._traits:
                raise UnknownTagError(tag)
        return QueryView(self, normalized)

    def identifiers(self) -> list[str]:
        """Identifiers of live traits in definition order."""
        return list(self._traits)

    def clear(self) -> None:
        """Retire every trait."""
        for trait in list(self._traits.values()):
            self.retire(trait)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._traits

    def __len__(self) -> int:
        return len(self._traits)

    def __iter__(self) -> Iterator[Trait]:
        return iter(list(self._traits.values()))


# Process default registry, created on first use
_registry: TraitRegistry | None = None


def get_registry() -> TraitRegistry:
    """Access the process default registry, creating it if necessary."""
    global _registry
    if _registry is None:
        _registry = TraitRegistry()
    return _registry


def reset_registry(registry: TraitRegistry | None = None) -> TraitRegistry:
    """Retire every trait of the default registry and replace it.

    Args:
        registry: Replacement registry. Defaults to a fresh TraitRegistry.

    Returns:
        The new default registry.
    """
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = registry if registry is not None else TraitRegistry()
    return _registry
