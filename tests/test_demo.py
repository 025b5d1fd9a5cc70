"""Tests for the duck counter demo."""

import asyncio
import random

from textual.widgets import Static

from quackx import MicrotaskQueue, TextMount, bind
from quackx.demo import (
    DUCK,
    LUCKY_MESSAGE,
    DuckApp,
    DuckState,
    ducks_component,
    lucky_effect,
    message_component,
)


class TestDuckState:
    def test_increase_decrease(self):
        state = DuckState()
        state.increase()
        assert state.ducks.get() == 2
        state.decrease()
        state.decrease()
        assert state.ducks.get() == 0
        state.decrease()
        assert state.ducks.get() == 0  # never below zero

    def test_randomize_range(self):
        state = DuckState()
        rng = random.Random(7)
        for _ in range(50):
            state.randomize(rng)
            assert 5 <= state.ducks.get() <= 50


class TestLucky:
    def test_multiple_of_seven(self):
        state = DuckState(6)
        celebrations = []
        lucky_effect(state, lambda: celebrations.append(state.ducks.get()))
        assert state.lucky.get() is False
        state.increase()
        assert state.lucky.get() is True
        assert celebrations == [7]
        state.increase()
        assert state.lucky.get() is False
        assert celebrations == [7]


class TestComponents:
    def test_render_ducks_and_message(self):
        state = DuckState(6)
        queue = MicrotaskQueue()
        ducks, msg = TextMount(), TextMount()
        bind(ducks_component(state, lambda: None), ducks, schedule=queue.enqueue)
        bind(message_component(state), msg, schedule=queue.enqueue)
        assert ducks.content == DUCK * 6
        assert msg.content == ""

        state.increase()
        queue.drain()
        assert ducks.content == DUCK * 7
        assert msg.content == LUCKY_MESSAGE


class TestDuckApp:
    def test_buttons(self):
        async def scenario():
            app = DuckApp(DuckState(6))
            async with app.run_test() as pilot:
                await pilot.click("#more-ducks-btn")
                await pilot.pause()
                assert app.state.ducks.get() == 7
                assert app.state.lucky.get() is True
                assert app.query_one("#ducks", Static).id == "ducks"

                await pilot.click("#less-ducks-btn")
                await pilot.pause()
                assert app.state.ducks.get() == 6
                assert app.state.lucky.get() is False

        asyncio.run(scenario())
