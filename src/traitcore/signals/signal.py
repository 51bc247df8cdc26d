"""Publish/subscribe primitive with isolated listener failures.

Usage:
    signal = Signal(name="added")
    sub = signal.connect(lambda entity: print(entity))
    signal.fire(entity)
    sub.cancel()

    # Suspend until the next matching emission
    args = await signal.once(lambda entity: entity is target)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class Subscription:
    """Handle returned by Signal.connect(). Cancelling is idempotent."""

    __slots__ = ("_signal", "_listener")

    def __init__(self, signal: Signal, listener: Listener):
        self._signal: Signal | None = signal
        self._listener = listener

    @property
    def connected(self) -> bool:
        return self._signal is not None

    def cancel(self) -> None:
        """Stop delivering emissions to this listener."""
        if self._signal is None:
            return
        self._signal._remove(self)
        self._signal = None

    def __repr__(self) -> str:
        state = "connected" if self.connected else "cancelled"
        return f"<Subscription {state} listener={self._listener!r}>"


class Signal:
    """Synchronous fan-out of emissions to listeners in connection order.

    A listener that raises is logged and skipped; later listeners still run
    and the caller of fire() never sees the error. Listeners that return an
    awaitable have it scheduled on the running event loop.

    Args:
        name: Label used in log messages.
    """

    def __init__(self, name: str = "signal") -> None:
        self.name = name
        self._subscriptions: list[Subscription] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def connect(self, listener: Listener) -> Subscription:
        """Register a listener for future emissions.

        Raises:
            TypeError: If listener is not callable.
        """
        if not callable(listener):
            raise TypeError(f"Signal listener must be callable, got {listener!r}")
        sub = Subscription(self, listener)
        self._subscriptions.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        try:
            self._subscriptions.remove(sub)
        except ValueError:
            pass

    def fire(self, *args: Any) -> None:
        """Deliver an emission to every listener connected at call time."""
        # Snapshot so listeners may connect/cancel during dispatch
        for sub in list(self._subscriptions):
            if not sub.connected:
                continue
            try:
                result = sub._listener(*args)
                if inspect.isawaitable(result):
                    self._schedule(sub._listener, result)
            except Exception:
                logger.exception("Listener %r on %s failed", sub._listener, self.name)

    def _schedule(self, listener: Listener, awaitable: Any) -> None:
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)

        def _done(t: asyncio.Task[Any]) -> None:
            self._tasks.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                logger.error(
                    "Async listener %r on %s failed", listener, self.name, exc_info=exc
                )

        task.add_done_callback(_done)

    def once(self, predicate: Callable[..., bool] | None = None) -> asyncio.Future[tuple[Any, ...]]:
        """Return a future resolved with the args of the next matching emission.

        The temporary subscription is dropped when the future completes or is
        cancelled. Must be called from within a running event loop.
        """
        future: asyncio.Future[tuple[Any, ...]] = asyncio.get_running_loop().create_future()

        def _listener(*args: Any) -> None:
            if future.done():
                return
            if predicate is not None and not predicate(*args):
                return
            future.set_result(args)

        sub = self.connect(_listener)
        future.add_done_callback(lambda _: sub.cancel())
        return future

    def disconnect_all(self) -> None:
        """Cancel every subscription."""
        for sub in list(self._subscriptions):
            sub.cancel()

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __repr__(self) -> str:
        return f"<Signal {self.name} listeners={len(self)}>"
