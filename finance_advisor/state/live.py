"""
Live values

A LiveValue holds the latest snapshot of something the store owns
(a transaction list, a budgets document, a profile) and tells
subscribers whenever it changes.

DESIGN DECISION: Consumers read `.value` whenever they need it and
subscribe only to hear about changes. There is no ambient callback
registration: every subscription returns a handle that releases it.
"""

from typing import Callable, Generic, List, TypeVar

import structlog


T = TypeVar("T")

Listener = Callable[[T], None]

logger = structlog.get_logger(__name__)


class Subscription:
    """Handle returned by LiveValue.subscribe. Cancelling twice is harmless."""

    def __init__(self, release: Callable[[], None]):
        self._release = release
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._release()


class LiveValue(Generic[T]):
    """
    Current value plus change notification.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._listeners: List[Listener] = []

    @property
    def value(self) -> T:
        return self._value

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener, emit_current: bool = False) -> Subscription:
        """
        Register a listener.

        Args:
            listener: Called with the new value after every set()
            emit_current: Also call it once right away with the current value
        """
        self._listeners.append(listener)
        if emit_current:
            listener(self._value)
        return Subscription(lambda: self._unsubscribe(listener))

    def _unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set(self, value: T) -> None:
        """Replace the value and notify every listener, in subscription order."""
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                # Remaining listeners still get the value
                logger.error("live_value_listener_failed", error=str(e))
