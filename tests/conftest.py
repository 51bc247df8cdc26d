"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass

from traitcore import LocalTagService, TraitRegistry, TraitSettings


@dataclass(eq=False)
class FixtureEntity:
    """Mutable entity handle hashed by identity, like an engine instance."""

    name: str
    color: str | None = None
    brightness: int | None = None

    def __repr__(self) -> str:
        return f"FixtureEntity({self.name!r})"


@pytest.fixture
def tags():
    """Fresh in-memory tag service."""
    return LocalTagService()


@pytest.fixture
def settings():
    """Settings isolated from TRAITCORE_* environment variables."""
    return TraitSettings(wait_timeout=None, reconcile_on_define=True, tag_on_associate=False)


@pytest.fixture
def registry(tags, settings):
    """Fresh TraitRegistry backed by the tags fixture."""
    reg = TraitRegistry(tags=tags, settings=settings)
    yield reg
    reg.clear()


@pytest.fixture
def entity_cls():
    return FixtureEntity


@pytest.fixture
def make_entity():
    def _make(name: str, **props):
        return FixtureEntity(name, **props)

    return _make
