import os
import sys

import pytest


def pytest_sessionstart(session):
    # Ensure project root is on sys.path so 'algorithms', 'engine', ... import
    here = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.abspath(os.path.join(here, os.pardir))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


class FakeClock:
    """Monotonic clock the tests move forward by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def _frames_in_use() -> int:
    depth, frame = 0, sys._getframe()
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return depth


@pytest.fixture
def shallow_stack():
    """Cap the interpreter's recursion limit a little above the current depth."""
    old = sys.getrecursionlimit()
    sys.setrecursionlimit(_frames_in_use() + 120)
    yield
    sys.setrecursionlimit(old)
