"""Shared test fixtures."""

import time
from collections.abc import Callable

import pytest

__all__ = []

WaitUntil = Callable[..., bool]


def _wait_until(predicate: Callable[[], bool], timeout_sec: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout_sec
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def wait_until() -> WaitUntil:
    """Poll a predicate until it returns True or the timeout elapses.

    Returns:
        Function (predicate, timeout_sec=2.0) -> last predicate value.
    """
    return _wait_until
