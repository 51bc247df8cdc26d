"""Query functionality: filter specs, property readers and matching."""

from traitcore.core.query.models import (
    MISSING,
    RESERVED_KEYS,
    PropertyReader,
    QuerySpec,
)
from traitcore.core.query.operations import is_scalar, matches, normalize_spec
from traitcore.core.query.readers import AttributeReader

__all__ = [
    # Models
    "MISSING",
    "RESERVED_KEYS",
    "PropertyReader",
    "QuerySpec",
    # Readers
    "AttributeReader",
    # Operations
    "is_scalar",
    "matches",
    "normalize_spec",
]
