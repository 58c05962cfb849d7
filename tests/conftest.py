"""Shared fixtures for the nebula tests."""
import os

# No window is ever opened by the tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pytest

from pointer import PointerState


class RecordingSurface:
    """Drawing surface that records every paint call instead of drawing."""
    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height
        self.calls = []

    def fill_rect(self, x, y, w, h, color):
        self.calls.append(("rect", x, y, w, h, tuple(color)))

    def fill_circle(self, x, y, r, color):
        self.calls.append(("circle", x, y, r, tuple(color)))

    def circles(self):
        return [c for c in self.calls if c[0] == "circle"]


class ManualScheduler:
    """Frame scheduler that only runs a tick when the test asks for it."""
    def __init__(self):
        self.pending = None
        self.requests = 0

    def request_next_tick(self, callback):
        self.pending = callback
        self.requests += 1

    def run_frame(self):
        callback, self.pending = self.pending, None
        callback()


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def surface():
    return RecordingSurface(800, 600)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def pointer(clock):
    return PointerState(clock=clock)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()
