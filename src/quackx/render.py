"""Render bindings — keep a component's text output mounted on a target.

A component is called once to set up its state and returns a render
function. bind() wraps that render function in an Effect:

- The first render runs synchronously inside the effect, so every signal
  and computed the render function reads subscribes the binding.
- Every later change schedules the render on a deferred-callback queue
  (a "microtask") instead of rendering inline. A write notifies its
  subscribers one at a time; rendering inline could read a computed that
  hasn't been marked stale yet. By the time the deferred render runs, the
  write and everything it triggered synchronously have settled.

Repeated changes before the queue drains coalesce into one render.

The default queue is the running asyncio loop (loop.call_soon). Hosts
without a loop can set_scheduler() to a MicrotaskQueue or any callable
that accepts a zero-argument callback.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Callable, Protocol, Sequence, Union

from quackx._tracking import ComputationStack
from quackx.effect import Effect
from quackx.errors import MountNotFoundError, SchedulerError

logger = logging.getLogger("quackx.render")

Render = Callable[[], Union[str, Sequence[str]]]
Component = Callable[[], Render]
Schedule = Callable[[Callable[[], None]], object]


class Mount(Protocol):
    """Anything that can show rendered text. Textual's Static qualifies."""

    def update(self, content: str) -> None: ...


class TextMount:
    """In-memory mount: keeps the current content and every write."""

    __slots__ = ("content", "history")

    def __init__(self, content: str = "") -> None:
        self.content = content
        self.history: list[str] = []

    def update(self, content: str) -> None:
        self.content = content
        self.history.append(content)

    def __repr__(self) -> str:
        return f"TextMount({self.content!r})"


class MicrotaskQueue:
    """FIFO deferred-callback queue drained explicitly by the host.

    Usage:
        queue = MicrotaskQueue()
        bind(App, mount, schedule=queue.enqueue)
        count.set(1)   # render queued
        queue.drain()  # render runs
    """

    __slots__ = ("_callbacks",)

    def __init__(self) -> None:
        self._callbacks: deque[Callable[[], None]] = deque()

    def enqueue(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def drain(self) -> int:
        """Run callbacks until the queue is empty. Returns how many ran."""
        ran = 0
        while self._callbacks:
            self._callbacks.popleft()()
            ran += 1
        return ran

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def __len__(self) -> int:
        return len(self._callbacks)


# ─── Default scheduler ───────────────────────────────────────────────────────
_scheduler: Schedule | None = None


def set_scheduler(schedule: Schedule | None) -> None:
    """Set the default deferred-callback queue for render bindings.

    Pass None to go back to the running asyncio loop.

        quackx.set_scheduler(queue.enqueue)
    """
    global _scheduler
    _scheduler = schedule


def _resolve_schedule(schedule: Schedule | None) -> Schedule:
    if schedule is not None:
        return schedule
    if _scheduler is not None:
        return _scheduler
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError as exc:
        raise SchedulerError(
            "no running event loop to defer a render; pass schedule= or call set_scheduler()"
        ) from exc
    return loop.call_soon


def _to_text(output: str | Sequence[str]) -> str:
    return output if isinstance(output, str) else "".join(output)


class RenderBinding:
    """A render function bound to a mount, re-rendered when its state changes."""

    __slots__ = ("_render", "_mount", "_schedule", "_first_render", "_pending", "_renders", "_effect")

    def __init__(
        self,
        render: Render,
        mount: Mount,
        *,
        schedule: Schedule | None = None,
        stack: ComputationStack | None = None,
    ) -> None:
        self._render = render
        self._mount = mount
        self._schedule = schedule
        self._first_render = True
        self._pending = False
        self._renders = 0
        self._effect = Effect(self._render_app, stack=stack)

    def _start(self) -> None:
        self._effect._run()

    def _render_app(self) -> None:
        if self._first_render:
            # Must be inline: reads only subscribe while the effect is on the stack.
            self._commit(self._render())
            self._first_render = False
            return

        if self._pending:
            logger.debug("Render of %r already pending", self._mount)
            return
        schedule = _resolve_schedule(self._schedule)
        self._pending = True
        logger.debug("Deferring render of %r", self._mount)
        schedule(self._deferred_render)

    def _deferred_render(self) -> None:
        self._pending = False
        try:
            # Reads here subscribe the binding too, so branches first taken
            # after the initial render are still tracked.
            with self._effect.tracking():
                output = self._render()
            self._commit(output)
        except Exception:
            logger.exception("Deferred render of %r failed", self._mount)

    def _commit(self, output: str | Sequence[str]) -> None:
        self._mount.update(_to_text(output))
        self._renders += 1

    @property
    def mount(self) -> Mount:
        return self._mount

    @property
    def first_render(self) -> bool:
        """True until the first render has been written to the mount."""
        return self._first_render

    @property
    def pending(self) -> bool:
        """True while a deferred render is queued but hasn't run."""
        return self._pending

    @property
    def renders(self) -> int:
        return self._renders

    def __repr__(self) -> str:
        state = "pending" if self._pending else "idle"
        return f"RenderBinding({self._mount!r}, renders={self._renders}, {state})"


def bind(
    component: Component,
    mount: Mount | None,
    *,
    schedule: Schedule | None = None,
    stack: ComputationStack | None = None,
) -> RenderBinding:
    """Mount a component and keep the mount in sync with its state.

    Usage:
        def App():
            count = Signal(0)
            double = Computed(lambda: count.get() * 2)
            return lambda: f"Count is {count.get()} and double is {double.get()}"

        mount = TextMount()
        bind(App, mount)
        mount.content  # "Count is 0 and double is 0"
    """
    if mount is None:
        raise MountNotFoundError("cannot bind a component: mount target is missing")

    render = component()
    binding = RenderBinding(render, mount, schedule=schedule, stack=stack)
    binding._start()
    return binding
