"""Tests for quackx.textual — Textual integration layer."""

import pytest
from textual.css.query import NoMatches

from quackx import ComputationStack, MicrotaskQueue, MountNotFoundError, Signal, default_stack
from quackx import textual as qtx


class _MockWidget:
    def __init__(self):
        self.content = None

    def update(self, content):
        self.content = content


class _MockApp:
    """Minimal mock matching the Textual App interface qtx needs."""

    def __init__(self, widgets=None, *, is_running=True):
        self.is_running = is_running
        self._widgets = widgets or {}

    def query_one(self, selector, expect_type=None):
        try:
            return self._widgets[selector]
        except KeyError:
            raise NoMatches(f"No nodes match {selector!r}") from None


class TestQueryMount:
    def test_found(self):
        widget = _MockWidget()
        app = _MockApp({"#ducks": widget})
        assert qtx.query_mount(app, "#ducks") is widget

    def test_missing_raises_mount_not_found(self):
        with pytest.raises(MountNotFoundError, match="#nope"):
            qtx.query_mount(_MockApp(), "#nope")


class TestBind:
    def test_renders_into_widget(self):
        widget = _MockWidget()
        app = _MockApp({"#count": widget})
        queue = MicrotaskQueue()
        n = Signal(1)
        qtx.bind(app, lambda: (lambda: f"n={n.get()}"), "#count", schedule=queue.enqueue)
        assert widget.content == "n=1"
        n.set(2)
        queue.drain()
        assert widget.content == "n=2"

    def test_forwards_stack(self):
        widget = _MockWidget()
        app = _MockApp({"#count": widget})
        stack = ComputationStack()
        queue = MicrotaskQueue()
        n = Signal(1, stack=stack)
        binding = qtx.bind(app, lambda: (lambda: str(n.get())), "#count", schedule=queue.enqueue, stack=stack)
        assert n.subscriber_count == 1
        assert default_stack.peek() is None

        n.set(2)
        queue.drain()
        assert widget.content == "2"
        assert binding.renders == 2

    def test_missing_widget(self):
        with pytest.raises(MountNotFoundError):
            qtx.bind(_MockApp(), lambda: (lambda: ""), "#missing")

    def test_skips_when_not_running(self):
        widget = _MockWidget()
        app = _MockApp({"#count": widget}, is_running=False)
        qtx.bind(app, lambda: (lambda: "hello"), "#count")
        assert widget.content is None

    def test_skips_during_pause(self):
        widget = _MockWidget()
        app = _MockApp({"#count": widget})
        queue = MicrotaskQueue()
        n = Signal(1)
        qtx.bind(app, lambda: (lambda: str(n.get())), "#count", schedule=queue.enqueue)
        with qtx.pause(app):
            n.set(2)
            queue.drain()
        assert widget.content == "1"
        assert qtx.is_safe(app)

        n.set(3)
        queue.drain()
        assert widget.content == "3"
