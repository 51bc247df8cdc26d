"""traitcore: runtime entity tagging and trait composition.

Usage:
    from traitcore import TraitRegistry

    registry = TraitRegistry()

    @registry.trait("glowing")
    def glowing(trait, entity):
        entity.brightness = 10

    await glowing.associate(lamp)
    for entity in registry.query({"tags": ["glowing"], "predicate": {"color": "red"}}).get():
        ...
"""

__version__ = "0.1.0"

# Configuration
from traitcore.config import TraitSettings

# Core primitives
from traitcore.core import (
    MISSING,
    AssociationTimeoutError,
    AttributeReader,
    DuplicateIdentifierError,
    InitializationError,
    InvalidArgumentError,
    PropertyReader,
    QuerySpec,
    TraitCoreError,
    TraitRetiredError,
    UnknownTagError,
    matches,
)

# Signals
from traitcore.signals import NotificationBus, Signal, Subscription

# Tags
from traitcore.tags import LocalTagService, TagService

# Traits
from traitcore.traits import (
    AssociationState,
    QueryView,
    Trait,
    TraitRegistry,
    get_registry,
    reset_registry,
)

__all__ = [
    # Version
    "__version__",
    # Traits
    "TraitRegistry",
    "Trait",
    "AssociationState",
    "QueryView",
    "get_registry",
    "reset_registry",
    # Query
    "QuerySpec",
    "PropertyReader",
    "AttributeReader",
    "MISSING",
    "matches",
    # Signals
    "Signal",
    "Subscription",
    "NotificationBus",
    # Tags
    "TagService",
    "LocalTagService",
    # Config
    "TraitSettings",
    # Errors
    "TraitCoreError",
    "InvalidArgumentError",
    "DuplicateIdentifierError",
    "UnknownTagError",
    "TraitRetiredError",
    "InitializationError",
    "AssociationTimeoutError",
]
