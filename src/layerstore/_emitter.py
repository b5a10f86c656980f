"""Synchronous publish/subscribe point shared by layers and stores."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Listener = Callable[[T], None]


class ChangeEmitter(Generic[T]):
    """Deliver changes to listeners inline, in registration order.

    There is no queueing: :meth:`emit` returns once every listener has run.
    An exception raised by a listener propagates to the caller of
    :meth:`emit` and the remaining listeners are not called.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener[T]] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it again."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener[T]) -> bool:
        """Remove the first registration of *listener*."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def emit(self, change: T) -> None:
        # Listeners added or removed during delivery take effect on the next emit.
        for listener in tuple(self._listeners):
            listener(change)
