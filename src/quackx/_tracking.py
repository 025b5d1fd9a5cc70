"""Dependency tracking engine — the heart of quackx.

A ComputationStack records which computation (effect or computed) is
currently running. Signal.get() and Computed.get() peek at the top of the
stack and subscribe whatever is there, building the dependency graph
without anyone declaring it.

Push and pop are always paired through tracking(), so a computation that
raises can't leave itself on top of the stack.

Notification passes: while a write is notifying its subscribers, computeds
mark themselves stale synchronously but effects are only queued. When the
outermost pass ends the queue is flushed, so every effect observes a graph
in which all staleness from that write has already been recorded.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from quackx.errors import TrackingError

logger = logging.getLogger("quackx.tracking")

Computation = Callable[[], None]


class ComputationStack:
    """LIFO stack of the computations that are currently running."""

    __slots__ = ("_stack", "_pass_depth", "_pending")

    def __init__(self) -> None:
        self._stack: list[Computation] = []
        # Notification pass depth. When > 0, effect runs are deferred.
        self._pass_depth = 0
        # Effect runs queued during a pass; dict keeps insertion order.
        self._pending: dict[Computation, None] = {}

    def push(self, computation: Computation) -> None:
        self._stack.append(computation)

    def pop(self) -> Computation:
        """Remove and return the top entry. Empty stack is a TrackingError."""
        if not self._stack:
            raise TrackingError("pop() on an empty computation stack")
        return self._stack.pop()

    def peek(self) -> Computation | None:
        """The running computation, or None outside any computation."""
        return self._stack[-1] if self._stack else None

    @contextmanager
    def tracking(self, computation: Computation) -> Iterator[None]:
        """Make computation the current one for the duration of the block.

        Usage:
            with stack.tracking(self._notify):
                self._fn()  # every get() in here subscribes self._notify
        """
        self.push(computation)
        try:
            yield
        finally:
            top = self.pop()
            if top != computation:
                raise TrackingError(
                    f"computation stack out of order: expected {computation!r}, popped {top!r}"
                )

    @contextmanager
    def notifying(self) -> Iterator[None]:
        """Enter a notification pass. Nested passes are supported.

        Queued effects run when the outermost pass ends, even if a
        subscriber raised during it.
        """
        self._pass_depth += 1
        try:
            yield
        finally:
            self._pass_depth -= 1
            if self._pass_depth == 0:
                self._flush_pending()

    def schedule(self, run: Computation) -> None:
        """Run an effect now, or once the current notification pass ends."""
        if self._pass_depth > 0:
            self._pending[run] = None
        else:
            run()

    def _flush_pending(self) -> None:
        """Run queued effects, including ones queued while flushing.

        Every queued effect runs even if an earlier one raises; the first
        error is re-raised once the queue is empty.
        """
        error: Exception | None = None
        while self._pending:
            # Snapshot and clear — effects may write and queue more.
            batch = list(self._pending)
            self._pending.clear()
            for run in batch:
                try:
                    run()
                except Exception as exc:
                    if error is None:
                        error = exc
                    else:
                        logger.exception("Effect %r failed after an earlier failure", run)
        if error is not None:
            raise error

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def pending_count(self) -> int:
        """Number of effects waiting for the current pass to end."""
        return len(self._pending)

    def __len__(self) -> int:
        return len(self._stack)

    def __repr__(self) -> str:
        return f"ComputationStack(depth={len(self._stack)}, pending={len(self._pending)})"


# Used by every Signal, Computed and Effect built without an explicit stack=.
default_stack = ComputationStack()


def resolve(stack: ComputationStack | None) -> ComputationStack:
    return default_stack if stack is None else stack
