"""Exception types raised by the belt simulator."""
from __future__ import annotations


class BeltlineError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidConfiguration(BeltlineError, ValueError):
    """A line, roster or random source was set up with unusable values."""


class SelectionExhausted(BeltlineError):
    """A weighted draw did not land in any bucket of the roster."""

    def __init__(self, draw: float, total: float) -> None:
        super().__init__(f"Draw {draw:.6f} exceeded cumulative probability {total:.6f}.")
        self.draw = draw
        self.total = total


class RandomSourceExhausted(BeltlineError):
    """A scripted random source ran out of values."""
