"""Tests for trait definition, lookup, and retirement."""

import pytest

from traitcore import (
    DuplicateIdentifierError,
    InvalidArgumentError,
    Trait,
    TraitRegistry,
    TraitSettings,
    get_registry,
    reset_registry,
)


def noop(trait, entity):
    pass


def test_define_and_lookup(registry):
    trait = registry.define_trait("glowing", noop)

    assert isinstance(trait, Trait)
    assert trait.identifier == "glowing"
    assert trait.initializer is noop
    assert registry.lookup("glowing") is trait
    assert "glowing" in registry
    assert len(registry) == 1


def test_lookup_unknown_returns_none(registry):
    assert registry.lookup("ghost") is None


def test_duplicate_identifier_rejected(registry):
    """CRITICAL: A live identifier can't be defined twice.

    Why: Tags map to exactly one trait; the first trait must stay intact.
    """
    first = registry.define_trait("glowing", noop)

    with pytest.raises(DuplicateIdentifierError):
        registry.define_trait("glowing", lambda t, e: None)

    assert registry.lookup("glowing") is first
    assert first.initializer is noop
    assert not first.retired


@pytest.mark.parametrize("identifier", ["", None, 42])
def test_invalid_identifier_rejected(registry, identifier):
    with pytest.raises(InvalidArgumentError):
        registry.define_trait(identifier, noop)  # type: ignore[arg-type]
    assert len(registry) == 0


def test_non_callable_initializer_rejected(registry):
    with pytest.raises(InvalidArgumentError):
        registry.define_trait("glowing", "not callable")  # type: ignore[arg-type]
    assert "glowing" not in registry


def test_decorator_form(registry):
    @registry.trait("glowing")
    def glowing(trait, entity):
        pass

    assert isinstance(glowing, Trait)
    assert registry.lookup("glowing") is glowing


def test_retire_frees_identifier(registry):
    trait = registry.define_trait("glowing", noop)

    registry.retire(trait)

    assert trait.retired
    assert registry.lookup("glowing") is None
    again = registry.define_trait("glowing", noop)
    assert again is not trait


def test_retire_is_idempotent(registry):
    trait = registry.define_trait("glowing", noop)

    registry.retire(trait)
    registry.retire(trait)
    registry.retire("glowing")

    assert len(registry) == 0


def test_retiring_stale_trait_leaves_successor(registry):
    old = registry.define_trait("glowing", noop)
    registry.retire(old)
    new = registry.define_trait("glowing", noop)

    registry.retire(old)

    assert registry.lookup("glowing") is new
    assert not new.retired


def test_retire_by_identifier(registry):
    registry.define_trait("glowing", noop)

    registry.retire("glowing")

    assert "glowing" not in registry


def test_retired_trait_stops_following_tags(registry, tags, make_entity):
    calls = []
    trait = registry.define_trait("glowing", lambda t, e: calls.append(e))
    registry.retire(trait)

    tags.add_tag(make_entity("lamp"), "glowing")

    assert calls == []
    assert len(tags.on_tag_added("glowing")) == 0


@pytest.mark.asyncio
async def test_retire_does_not_untag_entities(registry, tags, make_entity):
    """Retiring drops membership only; external tags remain."""
    trait = registry.define_trait("glowing", noop)
    lamp = make_entity("lamp")
    tags.add_tag(lamp, "glowing")

    registry.retire(trait)

    assert tags.has_tag(lamp, "glowing")
    assert trait.members == ()
    assert not trait.is_associated(lamp)


@pytest.mark.asyncio
async def test_reconciliation_on_define(registry, tags, make_entity):
    """CRITICAL: Entities already tagged are associated when the trait is defined."""
    a, b = make_entity("a"), make_entity("b")
    tags.add_tag(a, "charged")
    tags.add_tag(b, "charged")
    calls = []

    trait = registry.define_trait("charged", lambda t, e: calls.append(e))

    assert calls == [a, b]
    assert trait.members == (a, b)
    assert all(trait.is_initialized(e) for e in (a, b))


@pytest.mark.asyncio
async def test_reconciliation_can_be_disabled(tags, make_entity):
    lamp = make_entity("lamp")
    tags.add_tag(lamp, "charged")
    registry = TraitRegistry(tags=tags, settings=TraitSettings(reconcile_on_define=False))

    trait = registry.define_trait("charged", noop)

    assert not trait.is_associated(lamp)


def test_clear_retires_everything(registry):
    traits = [registry.define_trait(name, noop) for name in ("a", "b", "c")]

    registry.clear()

    assert len(registry) == 0
    assert all(t.retired for t in traits)


def test_identifiers_and_iteration_in_definition_order(registry):
    for name in ("c", "a", "b"):
        registry.define_trait(name, noop)

    assert registry.identifiers() == ["c", "a", "b"]
    assert [t.identifier for t in registry] == ["c", "a", "b"]


def test_default_registry_lifecycle():
    """The process default registry is created lazily and clearable."""
    default = get_registry()
    assert get_registry() is default
    trait = default.define_trait("default-registry-trait", noop)

    fresh = reset_registry()

    assert trait.retired
    assert fresh is not default
    assert get_registry() is fresh
    assert "default-registry-trait" not in fresh
    reset_registry()


def test_registries_are_isolated():
    one, two = TraitRegistry(), TraitRegistry()
    one.define_trait("glowing", noop)

    assert two.lookup("glowing") is None
    two.define_trait("glowing", noop)


def test_reconciliation_outside_event_loop_fails_cleanly(registry, tags, make_entity):
    """Reconciliation needs the event loop; failing leaves no half-defined trait."""
    tags.add_tag(make_entity("lamp"), "charged")

    with pytest.raises(RuntimeError):
        registry.define_trait("charged", noop)

    assert "charged" not in registry
    assert len(tags.on_tag_added("charged")) == 0
