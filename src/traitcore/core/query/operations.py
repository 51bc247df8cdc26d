"""Property matching and query spec normalization."""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import Any

from traitcore.core.errors import InvalidArgumentError
from traitcore.core.query.models import MISSING, RESERVED_KEYS, PropertyReader, QuerySpec

logger = logging.getLogger(__name__)


def is_scalar(value: Any) -> bool:
    """Check if a predicate value can be compared for equality.

    Strings and bytes are scalars; mappings, sequences and sets are composite.

    Args:
        value: Expected value from a predicate.

    Returns:
        True if value is a scalar, False if composite.
    """
    if isinstance(value, (str, bytes)):
        return True
    return not isinstance(value, (Mapping, Collection))


def matches(entity: Any, predicate: Mapping[str, Any], reader: PropertyReader) -> bool:
    """Check whether an entity satisfies every scalar entry of a predicate.

    Reserved keys, ``None`` values and composite values impose no constraint.
    A property the reader cannot produce (absent or raising) fails the match.

    Args:
        entity: Entity to test.
        predicate: Property name to required value.
        reader: Capability used to read properties off the entity.

    Returns:
        True if all constraints hold (always True for an empty predicate).
    """
    for name, expected in predicate.items():
        if name in RESERVED_KEYS or expected is None or not is_scalar(expected):
            continue
        try:
            actual = reader.try_get(entity, name)
        except Exception:
            logger.debug("Reading %r from %r failed, treating as absent", name, entity)
            return False
        if actual is MISSING:
            return False
        try:
            if actual != expected:
                return False
        except Exception:
            return False
    return True


def normalize_spec(spec: QuerySpec | Mapping[str, Any]) -> QuerySpec:
    """Convert a query spec in either accepted format to a validated QuerySpec.

    Args:
        spec: QuerySpec instance or mapping with ``tags`` and ``predicate``.

    Returns:
        Validated QuerySpec.

    Raises:
        InvalidArgumentError: If tags are missing, not a collection of
            non-empty strings, or the predicate is not a mapping.
    """
    if isinstance(spec, QuerySpec):
        result = spec
    elif isinstance(spec, Mapping):
        tags = spec.get("tags")
        if isinstance(tags, str) or not isinstance(tags, Collection):
            raise InvalidArgumentError(f"Query tags must be a collection of strings, got {tags!r}")
        predicate = spec.get("predicate")
        if predicate is not None and not isinstance(predicate, Mapping):
            raise InvalidArgumentError(f"Query predicate must be a mapping, got {predicate!r}")
        result = QuerySpec.from_mapping(spec)
    else:
        raise InvalidArgumentError(f"Invalid query specification: {spec!r}")

    if not result.tags:
        raise InvalidArgumentError("Query must name at least one tag")
    for tag in result.tags:
        if not isinstance(tag, str) or not tag:
            raise InvalidArgumentError(f"Query tags must be non-empty strings, got {tag!r}")
    return result
