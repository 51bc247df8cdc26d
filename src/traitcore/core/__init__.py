"""Core functionalities: stateless primitives and the error taxonomy.

Architecture Note:
    core/ contains pure, stateless functionality with no runtime state.
    For stateful services, see traits/, tags/, and signals/.
"""

from traitcore.core.errors import (
    AssociationTimeoutError,
    DuplicateIdentifierError,
    InitializationError,
    InvalidArgumentError,
    TraitCoreError,
    TraitRetiredError,
    UnknownTagError,
)
from traitcore.core.query import (
    MISSING,
    RESERVED_KEYS,
    AttributeReader,
    PropertyReader,
    QuerySpec,
    is_scalar,
    matches,
    normalize_spec,
)

__all__ = [
    # Errors
    "TraitCoreError",
    "InvalidArgumentError",
    "DuplicateIdentifierError",
    "UnknownTagError",
    "TraitRetiredError",
    "InitializationError",
    "AssociationTimeoutError",
    # Query
    "MISSING",
    "RESERVED_KEYS",
    "PropertyReader",
    "AttributeReader",
    "QuerySpec",
    "is_scalar",
    "matches",
    "normalize_spec",
]
