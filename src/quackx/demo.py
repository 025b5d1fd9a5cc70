"""Duck counter — a small Textual app wired with quackx.

Run with ``python -m quackx.demo`` (requires the textual extra).
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Static

from quackx import textual as qtx
from quackx.effect import Effect, effect
from quackx.render import Component
from quackx.signal import Signal

logger = logging.getLogger("quackx.demo")

DUCK = "🦆"
LUCKY_MESSAGE = "[bold green]🎉 Yay! Lucky number! 🎉[/]"


class DuckState:
    """Duck count and whether it is a lucky number."""

    def __init__(self, ducks: int = 1) -> None:
        self.ducks = Signal(ducks)
        self.lucky = Signal(False)

    def increase(self) -> None:
        self.ducks.set(self.ducks.get() + 1)

    def decrease(self) -> None:
        current = self.ducks.get()
        if current == 0:
            return
        self.ducks.set(current - 1)

    def randomize(self, rng: random.Random | None = None) -> None:
        """Between 5 and 50 ducks, inclusive."""
        self.ducks.set((rng or random).randint(5, 50))


def lucky_effect(state: DuckState, celebrate: Callable[[], None]) -> Effect:
    """Flag multiples of 7 as lucky and celebrate them."""

    def _check() -> None:
        if state.ducks.get() % 7 == 0:
            state.lucky.set(True)
            celebrate()
        else:
            state.lucky.set(False)

    return effect(_check)


def ducks_component(state: DuckState, celebrate: Callable[[], None]) -> Component:
    def component():
        lucky_effect(state, celebrate)
        return lambda: [DUCK for _ in range(state.ducks.get())]

    return component


def message_component(state: DuckState) -> Component:
    def component():
        return lambda: LUCKY_MESSAGE if state.lucky.get() else ""

    return component


class DuckApp(App):
    """More ducks, fewer ducks, random ducks."""

    CSS = """
    #buttons { height: auto; }
    #ducks { padding: 1; }
    """

    def __init__(self, state: DuckState | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.state = state or DuckState()

    def compose(self) -> ComposeResult:
        with Horizontal(id="buttons"):
            yield Button("More ducks", id="more-ducks-btn")
            yield Button("Less ducks", id="less-ducks-btn")
            yield Button("Random ducks", id="random-ducks-btn")
        yield Static(id="ducks")
        yield Static(id="msg")

    def on_mount(self) -> None:
        qtx.bind(self, ducks_component(self.state, self.celebrate), "#ducks")
        qtx.bind(self, message_component(self.state), "#msg")

    def celebrate(self) -> None:
        logger.info("Lucky number of ducks: %d", self.state.ducks.value)
        self.notify("Lucky number!")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        actions = {
            "more-ducks-btn": self.state.increase,
            "less-ducks-btn": self.state.decrease,
            "random-ducks-btn": self.state.randomize,
        }
        action = actions.get(event.button.id or "")
        if action is not None:
            action()


def main() -> None:
    DuckApp().run()


if __name__ == "__main__":
    main()
