"""Effects — side effects that re-run when the state they read changes.

Unlike Computed (which is lazy and only evaluates on read), an Effect runs
as soon as it is created and again every time a value it read changes.
Dependencies are discovered afresh on every run.

A write notifies effects through the stack's notification pass, so an
effect reached along several paths by one write still runs once, after
every computed touched by that write has been marked stale.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Callable

from quackx._tracking import ComputationStack, resolve


class Effect:
    """A reactive side effect.

    Signals and computeds subscribe the bound method ``_notify``; that is
    the identity they call back when something changes.
    """

    __slots__ = ("_fn", "_stack", "_runs")

    def __init__(self, fn: Callable[[], None], *, stack: ComputationStack | None = None) -> None:
        self._fn = fn
        self._stack = resolve(stack)
        self._runs = 0

    def _notify(self) -> None:
        """Called by a dependency that changed."""
        self._stack.schedule(self._run)

    def _run(self) -> None:
        """Run the callback with this effect as the current computation.

        Errors from the callback propagate to whoever triggered the run;
        the computation stack is balanced either way and the effect stays
        subscribed to whatever it read before failing.
        """
        self._runs += 1
        with self._stack.tracking(self._notify):
            self._fn()

    def tracking(self) -> AbstractContextManager[None]:
        """Attribute reads made inside the block to this effect."""
        return self._stack.tracking(self._notify)

    @property
    def runs(self) -> int:
        return self._runs

    def __repr__(self) -> str:
        name = getattr(self._fn, "__name__", repr(self._fn))
        return f"Effect({name}, runs={self._runs})"


def effect(fn: Callable[[], None], *, stack: ComputationStack | None = None) -> Effect:
    """Run fn immediately, then re-run whenever anything it read changes.

    Also works as a decorator.

    Usage:
        counter = Signal(0)
        log = []

        effect(lambda: log.append(counter.get()))
        # log == [0] — ran immediately

        counter.set(1)
        # log == [0, 1] — re-ran because counter changed
    """
    e = Effect(fn, stack=stack)
    e._run()  # Initial run to establish dependencies
    return e
