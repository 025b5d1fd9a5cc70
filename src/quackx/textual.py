"""Textual integration for quackx. Opt-in — requires textual.

A Textual ``Static`` already satisfies the Mount protocol (it has
``update(content)``), and Textual runs on asyncio, so deferred renders go
through the app's event loop with no extra wiring.

This module adds the host-facing pieces: resolving a mount by selector
(a missing widget fails fast with MountNotFoundError) and pausing renders
while widgets are being replaced.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from textual.app import App
from textual.css.query import NoMatches
from textual.widgets import Static

from quackx._tracking import ComputationStack
from quackx.errors import MountNotFoundError
from quackx.render import Component, RenderBinding, Schedule, bind as _bind

logger = logging.getLogger("quackx.textual")

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app: App):
    """Suspend renders into app's widgets during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app: App) -> bool:
    """Is the widget tree in a state where renders can be written?"""
    return app.is_running and id(app) not in _paused_apps


def query_mount(app: App, selector: str) -> Static:
    """Find the Static a component renders into."""
    try:
        return app.query_one(selector, Static)
    except NoMatches as exc:
        raise MountNotFoundError(f"no Static widget matches {selector!r}") from exc


class AppMount:
    """Mount that writes to a Static only while its app is safe."""

    __slots__ = ("_app", "_widget")

    def __init__(self, app: App, widget: Static) -> None:
        self._app = app
        self._widget = widget

    def update(self, content: str) -> None:
        if not is_safe(self._app):
            logger.debug("Skipping render into %r: app not running or paused", self._widget)
            return
        self._widget.update(content)

    def __repr__(self) -> str:
        return f"AppMount({self._widget!r})"


def bind(
    app: App,
    component: Component,
    selector: str,
    *,
    schedule: Schedule | None = None,
    stack: ComputationStack | None = None,
) -> RenderBinding:
    """Mount component on the Static matching selector.

    Call from a handler running on the app's loop (e.g. on_mount) so
    deferred renders land on that loop.
    """
    return _bind(component, AppMount(app, query_mount(app, selector)), schedule=schedule, stack=stack)
