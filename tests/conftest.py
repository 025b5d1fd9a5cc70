import pytest

import quackx


@pytest.fixture(autouse=True)
def _reset_scheduler():
    yield
    quackx.set_scheduler(None)
