"""Error taxonomy for trait definition, association, and queries.

All errors derive from TraitCoreError so callers can catch the whole family.
Argument and identity errors are raised before any state is touched.
"""

from __future__ import annotations

from typing import Any


class TraitCoreError(Exception):
    """Base class for all traitcore errors."""

    pass


class InvalidArgumentError(TraitCoreError, ValueError):
    """Malformed identifier, initializer, entity, or query spec."""

    pass


class DuplicateIdentifierError(TraitCoreError):
    """A live trait already uses the requested identifier."""

    def __init__(self, identifier: str):
        super().__init__(f'Trait with identifier "{identifier}" already exists')
        self.identifier = identifier


class UnknownTagError(TraitCoreError, LookupError):
    """Query referenced a tag with no registered trait."""

    def __init__(self, tag: str):
        super().__init__(f'Query for non-existent tag: "{tag}"')
        self.tag = tag

    def __str__(self) -> str:
        return str(self.args[0])


class TraitRetiredError(TraitCoreError, RuntimeError):
    """Mutating operation called on a retired trait."""

    def __init__(self, identifier: str):
        super().__init__(f'Trait "{identifier}" has been retired')
        self.identifier = identifier


class InitializationError(TraitCoreError):
    """Trait initializer raised for an entity.

    The original exception is available as ``cause`` and as ``__cause__``.
    Membership is not rolled back.
    """

    def __init__(self, identifier: str, entity: Any, cause: BaseException):
        super().__init__(f'Initializer of trait "{identifier}" failed for {entity!r}: {cause!r}')
        self.identifier = identifier
        self.entity = entity
        self.cause = cause
        self.__cause__ = cause


class AssociationTimeoutError(TraitCoreError, TimeoutError):
    """wait_for() deadline exceeded before the entity was associated."""

    def __init__(self, identifier: str, entity: Any, timeout: float):
        super().__init__(
            f'Timed out after {timeout}s waiting for {entity!r} to join trait "{identifier}"'
        )
        self.identifier = identifier
        self.entity = entity
        self.timeout = timeout
