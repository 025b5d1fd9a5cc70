"""Signals — mutable values that track their readers.

When a Signal is read while a computation is running, that computation is
subscribed. When the Signal is set to a different value, every subscriber
runs again, in the order it first subscribed.

Subscribers live in a dict used as an insertion-ordered set: a callback
reading the same signal twice is still only notified once.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from quackx._tracking import Computation, ComputationStack, resolve

T = TypeVar("T")


class Signal(Generic[T]):
    """A single reactive value with automatic dependency tracking."""

    __slots__ = ("_value", "_subscribers", "_stack")

    def __init__(self, value: T, *, stack: ComputationStack | None = None) -> None:
        self._value = value
        self._subscribers: dict[Computation, None] = {}
        self._stack = resolve(stack)

    def get(self) -> T:
        """Read the value. If inside a computation, subscribes it."""
        current = self._stack.peek()
        if current is not None:
            self._subscribers[current] = None
        return self._value

    def set(self, value: T) -> None:
        """Write a new value and notify subscribers.

        Writing a value that is the same object as, or equal to, the current
        one is a no-op: nothing is notified.
        """
        old = self._value
        if old is not value and old != value:
            self._value = value
            self._notify()

    def _notify(self) -> None:
        # Snapshot: subscribers that (re)subscribe while running don't
        # extend this pass.
        with self._stack.notifying():
            for subscriber in list(self._subscribers):
                subscriber()

    @property
    def value(self) -> T:
        """Read the value without subscribing anything."""
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Signal({self._value!r})"


def signal(value: T, *, stack: ComputationStack | None = None) -> Signal[T]:
    """Factory for a Signal.

    Usage:
        count = signal(0)
        count.get()  # 0
        count.set(1)
    """
    return Signal(value, stack=stack)
