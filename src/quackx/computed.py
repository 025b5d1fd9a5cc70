"""Computed values — derived state with automatic dependency tracking.

A Computed wraps a function. It is both a subscriber (of whatever its
function reads) and a publisher (to whatever reads it).

Computed values are lazy — they only recompute when read, and only if an
upstream change marked them stale since the last computation.

Staleness propagates eagerly: when an upstream value changes, a Computed
turns stale and immediately notifies its own subscribers. It stays quiet on
further changes until somebody reads it again, since nobody has seen a
value from it since they were last told. A read that fails still counts,
so readers of a failing Computed keep being notified.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from quackx._tracking import Computation, ComputationStack, resolve
from quackx.errors import CycleError

T = TypeVar("T")

_UNSET = object()


class Computed(Generic[T]):
    """A derived value that auto-tracks dependencies and caches the result."""

    __slots__ = ("_fn", "_cached", "_stale", "_notified", "_computing", "_subscribers", "_stack")

    def __init__(self, fn: Callable[[], T], *, stack: ComputationStack | None = None) -> None:
        self._fn = fn
        self._cached: object = _UNSET
        self._stale = True
        # Subscribers were told about a change and nobody has read since.
        self._notified = False
        self._computing = False
        self._subscribers: dict[Computation, None] = {}
        self._stack = resolve(stack)

    def get(self) -> T:
        """Read the computed value. Recomputes if stale."""
        current = self._stack.peek()
        self._notified = False

        try:
            if self._stale:
                self._recompute()
        finally:
            # A reader whose read failed still wants to hear about the fix.
            if current is not None:
                self._subscribers[current] = None
        return self._cached  # type: ignore[return-value]

    def _recompute(self) -> None:
        """Re-evaluate the function with _mark_stale as the current computation."""
        if self._computing:
            raise CycleError(f"{self!r} read itself while computing")

        self._computing = True
        try:
            with self._stack.tracking(self._mark_stale):
                value = self._fn()
        finally:
            self._computing = False

        self._cached = value
        self._stale = False

    def _mark_stale(self) -> None:
        """Called when a dependency changed. Does not recompute."""
        self._stale = True
        if not self._notified:
            self._notified = True
            with self._stack.notifying():
                for subscriber in list(self._subscribers):
                    subscriber()

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        name = getattr(self._fn, "__name__", repr(self._fn))
        state = "stale" if self._stale else f"cached={self._cached!r}"
        return f"Computed({name}, {state})"


def computed(fn: Callable[[], T], *, stack: ComputationStack | None = None) -> Computed[T]:
    """Decorator/factory to create a Computed from a function.

    Usage:
        count = Signal(0)

        @computed
        def doubled():
            return count.get() * 2

        doubled.get()  # 0
        count.set(5)
        doubled.get()  # 10
    """
    return Computed(fn, stack=stack)
