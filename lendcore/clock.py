"""Clocks for the pool: seconds since the epoch as ints."""
from __future__ import annotations

import time


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int | None = None) -> None:
        self.now = int(time.time()) if start is None else start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self.now += seconds
        return self.now
