"""Trait: one tag's membership, its one-time initializer, and association lifecycle.

Usage:
    registry = TraitRegistry()

    def glow(trait, entity):
        entity.brightness = 10

    glowing = registry.define_trait("glowing", glow)

    await glowing.associate(lamp)      # runs glow(glowing, lamp) once
    glowing.is_associated(lamp)        # True
    await glowing.wait_for(other, timeout=1.0)

Each (trait, entity) pair moves through its own state machine:

    UNASSOCIATED -> ASSOCIATING -> INITIALIZED
                               |
                               +-> FAILED

Leaving membership (dissociate or external tag removal) never resets the
state, so the initializer runs at most once per pair for the life of the
trait. All methods must be called from the event loop thread.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterator
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any

from traitcore.core.errors import (
    AssociationTimeoutError,
    InitializationError,
    InvalidArgumentError,
    TraitRetiredError,
)
from traitcore.signals import Signal, Subscription

if TYPE_CHECKING:
    from traitcore.config import TraitSettings
    from traitcore.signals import NotificationBus
    from traitcore.tags import TagService

logger = logging.getLogger(__name__)

Initializer = Callable[["Trait", Any], Any]
"""Signature: (trait, entity) -> None, or a coroutine for long-running setup."""


class AssociationState(Enum):
    """Per-entity lifecycle state within one trait."""

    UNASSOCIATED = "unassociated"
    ASSOCIATING = "associating"
    INITIALIZED = "initialized"
    FAILED = "failed"


class Trait:
    """Membership list and initializer for one tag identifier.

    Created by TraitRegistry.define_trait(), never directly. Membership is an
    insertion-ordered set of hashable entities. The initializer outcome of
    each entity is tracked separately from membership: an entity whose
    initializer raised stays a member.

    Args:
        identifier: Tag name this trait owns.
        initializer: Callback run once per entity. May be a coroutine function,
            in which case it runs as a task.
        tags: Tag-propagation backend.
        bus: Notification bus to publish successful associations on.
        settings: Registry settings.
    """

    def __init__(
        self,
        identifier: str,
        initializer: Initializer,
        *,
        tags: TagService,
        bus: NotificationBus,
        settings: TraitSettings,
    ) -> None:
        self._identifier = identifier
        self._initializer = initializer
        self._tags = tags
        self._bus = bus
        self._settings = settings
        self._members: dict[Any, None] = {}
        self._outcomes: dict[Any, asyncio.Future[None]] = {}
        # Fired with (entity, error) when an initializer settles for a member
        self._settled = Signal(name=f"trait-settled:{identifier}")
        self._waiters: set[asyncio.Future[tuple[Any, ...]]] = set()
        self._subscriptions: list[Subscription] = []
        self._tasks: set[asyncio.Task[Any]] = set()
        self._retired = False

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def initializer(self) -> Initializer:
        return self._initializer

    @property
    def retired(self) -> bool:
        return self._retired

    @property
    def members(self) -> tuple[Any, ...]:
        """Snapshot of current members in insertion order."""
        return tuple(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._members))

    def __contains__(self, entity: Any) -> bool:
        try:
            return entity in self._members
        except TypeError:
            return False

    def __repr__(self) -> str:
        state = " retired" if self._retired else ""
        return f"<Trait {self._identifier!r} members={len(self._members)}{state}>"

    # Lifecycle driven by the registry

    def _attach(self) -> None:
        """Subscribe to tag streams and reconcile already tagged entities."""
        self._subscriptions = [
            self._tags.on_tag_added(self._identifier).connect(self._on_tag_added),
            self._tags.on_tag_removed(self._identifier).connect(self._on_tag_removed),
        ]
        if not self._settings.reconcile_on_define:
            return
        for entity in self._tags.tagged(self._identifier):
            self._begin(entity, external=True)

    def _detach(self) -> None:
        """Drop membership and subscriptions. Does not untag entities."""
        if self._retired:
            return
        self._retired = True
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions = []
        self._members.clear()
        self._outcomes.clear()
        self._settled.disconnect_all()
        if self._waiters:
            logger.warning(
                "Trait %r retired with %d pending waiter(s); resolving with None",
                self._identifier,
                len(self._waiters),
            )
        for waiter in list(self._waiters):
            if not waiter.done():
                waiter.set_result((None, None))
        self._waiters.clear()

    # Tag stream handlers

    def _on_tag_added(self, entity: Any) -> None:
        if self._retired:
            return
        self._begin(entity, external=True)

    def _on_tag_removed(self, entity: Any) -> None:
        if self._retired:
            return
        if entity not in self._members:
            return
        del self._members[entity]
        logger.debug("Entity %r left trait %r", entity, self._identifier)

    # Public API

    def associate(self, entity: Any) -> asyncio.Future[None]:
        """Link ``entity`` to this trait and run the initializer once.

        Idempotent: repeated or concurrent calls share the first call's
        outcome. The external tag is added too when settings.tag_on_associate
        is set. An entity that was removed since rejoins membership without
        re-running the initializer.

        Args:
            entity: Hashable entity handle.

        Returns:
            Future resolved when the initializer completes, or failed with
            InitializationError. Cancelling it does not cancel the
            initialization shared with other callers.

        Raises:
            InvalidArgumentError: If entity is None or unhashable.
            TraitRetiredError: If the trait has been retired.
        """
        self._check_live()
        self._check_entity(entity)
        result = asyncio.shield(self._begin(entity, external=False))
        # Callers may fire and forget; the failure is also reported via wait_for
        result.add_done_callback(_retrieve_exception)
        return result

    def dissociate(self, entity: Any) -> None:
        """Remove ``entity`` from membership and strip its tag.

        No-op if the entity is not a member or the trait is retired. The
        initialization outcome is kept.
        """
        self._check_entity(entity)
        if self._retired:
            return
        self._members.pop(entity, None)
        if self._tags.has_tag(entity, self._identifier):
            self._tags.remove_tag(entity, self._identifier)

    def is_associated(self, entity: Any) -> bool:
        """Check if ``entity`` is currently a member."""
        self._check_entity(entity)
        return entity in self._members

    def find(self, entity: Any) -> Any | None:
        """Return ``entity`` if it is currently a member, else None."""
        self._check_entity(entity)
        return entity if entity in self._members else None

    def state(self, entity: Any) -> AssociationState:
        """Current lifecycle state of ``entity`` within this trait."""
        self._check_entity(entity)
        outcome = self._outcomes.get(entity)
        if outcome is None:
            return AssociationState.UNASSOCIATED
        if not outcome.done():
            return AssociationState.ASSOCIATING
        if outcome.cancelled() or outcome.exception() is not None:
            return AssociationState.FAILED
        return AssociationState.INITIALIZED

    def is_initialized(self, entity: Any) -> bool:
        """Check if the initializer has completed successfully for ``entity``."""
        return self.state(entity) is AssociationState.INITIALIZED

    async def wait_for(self, entity: Any, timeout: float | None = None) -> Any | None:
        """Suspend until ``entity`` is an initialized member, then return it.

        Returns immediately if it already is. The wait is driven by the same
        emission that publishes the association; nothing polls.

        Args:
            entity: Hashable entity handle.
            timeout: Deadline in seconds. Defaults to settings.wait_timeout;
                None waits indefinitely.

        Returns:
            The entity, or None if the trait is (or becomes) retired.

        Raises:
            AssociationTimeoutError: If the deadline passes first.
            InitializationError: If the entity's initializer failed.
            asyncio.CancelledError: If the caller is cancelled. No trait state
                changes either way.
        """
        self._check_entity(entity)
        if self._retired:
            return None
        state = self.state(entity)
        if state is AssociationState.FAILED:
            raise self._outcomes[entity].exception()  # type: ignore[misc]
        if state is AssociationState.INITIALIZED and entity in self._members:
            return entity

        if timeout is None:
            timeout = self._settings.wait_timeout

        waiter = self._settled.once(lambda e, _error: e == entity)
        self._waiters.add(waiter)
        try:
            if timeout is None:
                _entity, error = await waiter
            else:
                _entity, error = await asyncio.wait_for(waiter, timeout)
        except TimeoutError:
            raise AssociationTimeoutError(self._identifier, entity, timeout) from None
        finally:
            self._waiters.discard(waiter)
            if not waiter.done():
                waiter.cancel()

        if error is not None:
            raise error
        if self._retired:
            return None
        return entity

    # Build step

    def _begin(self, entity: Any, *, external: bool) -> asyncio.Future[None]:
        outcome = self._outcomes.get(entity)
        if outcome is not None:
            if entity not in self._members:
                self._members[entity] = None
                self._tag(entity, external)
                if outcome.done() and not outcome.cancelled():
                    logger.debug("Entity %r rejoined trait %r", entity, self._identifier)
                    error = outcome.exception()
                    if error is None:
                        self._announce(entity)
                    else:
                        self._settled.fire(entity, error)
            return outcome

        outcome = asyncio.get_running_loop().create_future()
        self._outcomes[entity] = outcome
        self._members[entity] = None
        outcome.add_done_callback(partial(self._log_outcome, entity, external))
        logger.debug("Associating %r with trait %r", entity, self._identifier)

        self._tag(entity, external)
        self._build(entity, outcome)
        return outcome

    def _tag(self, entity: Any, external: bool) -> None:
        if external or not self._settings.tag_on_associate:
            return
        if not self._tags.has_tag(entity, self._identifier):
            self._tags.add_tag(entity, self._identifier)

    def _build(self, entity: Any, outcome: asyncio.Future[None]) -> None:
        try:
            result = self._initializer(self, entity)
        except Exception as exc:
            self._fail(entity, outcome, exc)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(partial(self._on_task_done, entity, outcome))
            return

        self._complete(entity, outcome)

    def _on_task_done(
        self, entity: Any, outcome: asyncio.Future[None], task: asyncio.Task[Any]
    ) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            self._fail(entity, outcome, asyncio.CancelledError())
            return
        exc = task.exception()
        if exc is not None:
            self._fail(entity, outcome, exc)
        else:
            self._complete(entity, outcome)

    def _complete(self, entity: Any, outcome: asyncio.Future[None]) -> None:
        if outcome.done():
            return
        outcome.set_result(None)
        if self._retired or entity not in self._members:
            return
        self._announce(entity)

    def _fail(self, entity: Any, outcome: asyncio.Future[None], exc: BaseException) -> None:
        if outcome.done():
            return
        error = InitializationError(self._identifier, entity, exc)
        outcome.set_exception(error)
        if self._retired or entity not in self._members:
            return
        self._settled.fire(entity, error)

    def _announce(self, entity: Any) -> None:
        self._settled.fire(entity, None)
        self._bus.publish(self, entity)

    def _log_outcome(self, entity: Any, external: bool, outcome: asyncio.Future[None]) -> None:
        if outcome.cancelled():
            return
        exc = outcome.exception()
        if exc is None:
            logger.debug("Entity %r initialized for trait %r", entity, self._identifier)
        elif external:
            logger.warning("Tag-triggered association failed: %s", exc, exc_info=exc)
        else:
            logger.debug("Association failed: %s", exc)

    # Validation

    def _check_live(self) -> None:
        if self._retired:
            raise TraitRetiredError(self._identifier)

    @staticmethod
    def _check_entity(entity: Any) -> None:
        if entity is None:
            raise InvalidArgumentError("Entity must not be None")
        try:
            hash(entity)
        except TypeError:
            raise InvalidArgumentError(
                f"Entity must be hashable, got {type(entity).__name__}"
            ) from None


def _retrieve_exception(future: asyncio.Future[None]) -> None:
    if not future.cancelled():
        future.exception()
