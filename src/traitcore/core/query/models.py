"""Query models: the filter spec and the property-read capability.

Usage:
    spec = QuerySpec(tags=("glowing",), predicate={"color": "red"})

    # Or from a plain mapping (extra keys join the predicate)
    spec = QuerySpec.from_mapping({"tags": ["glowing"], "color": "red"})
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final, Protocol, runtime_checkable

from traitcore.core.errors import InvalidArgumentError


class _Missing:
    """Sentinel type for an absent property."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()
"""Returned by PropertyReader.try_get when the entity has no such property."""

RESERVED_KEYS: Final = frozenset({"identifier", "tags"})
"""Spec keys used for view construction, never matched as properties."""


@runtime_checkable
class PropertyReader(Protocol):
    """Capability for reading named properties off an opaque entity.

    The host environment provides one per entity kind. Implementations return
    MISSING rather than raising when the property does not exist.
    """

    def try_get(self, entity: Any, name: str) -> Any:
        """Read property ``name`` from ``entity``, or MISSING if absent."""
        ...


@dataclass(frozen=True)
class QuerySpec:
    """Immutable description of a query view.

    Attributes:
        tags: Trait identifiers to union over, in order, without duplicates.
        predicate: Property name to required value.

    Raises:
        InvalidArgumentError: If tags is a bare string or not iterable, or the
            predicate is not a mapping.
    """

    tags: tuple[str, ...]
    predicate: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __init__(self, tags: Iterable[str], predicate: Mapping[str, Any] | None = None):
        if isinstance(tags, (str, bytes)) or not isinstance(tags, Iterable):
            raise InvalidArgumentError(f"Query tags must be a collection of strings, got {tags!r}")
        if predicate is not None and not isinstance(predicate, Mapping):
            raise InvalidArgumentError(f"Query predicate must be a mapping, got {predicate!r}")
        try:
            unique = tuple(dict.fromkeys(tags))
        except TypeError:
            raise InvalidArgumentError(f"Query tags must be strings, got {tags!r}") from None
        object.__setattr__(self, "tags", unique)
        object.__setattr__(self, "predicate", MappingProxyType(dict(predicate or {})))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> QuerySpec:
        """Build from ``{"tags": [...], "predicate": {...}, **extra}``.

        Keys other than ``tags``, ``identifier`` and ``predicate`` are treated
        as additional predicate entries.
        """
        predicate = dict(data.get("predicate") or {})
        for key, value in data.items():
            if key in RESERVED_KEYS or key == "predicate":
                continue
            predicate[key] = value
        return cls(tags=data.get("tags") or (), predicate=predicate)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags
