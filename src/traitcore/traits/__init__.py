"""Traits: registry, trait lifecycle and query views."""

from traitcore.traits.registry import TraitRegistry, get_registry, reset_registry
from traitcore.traits.trait import AssociationState, Initializer, Trait
from traitcore.traits.view import QueryView, TrackListener

__all__ = [
    "TraitRegistry",
    "get_registry",
    "reset_registry",
    "Trait",
    "AssociationState",
    "Initializer",
    "QueryView",
    "TrackListener",
]
