"""Pytest configuration and fixtures."""

import pytest


class FakeClock:
    """Controllable stand-in for time.time()."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A FakeClock starting at a fixed instant (2023-11-14T22:13:20Z)."""
    return FakeClock()
