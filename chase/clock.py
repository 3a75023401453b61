"""Monotonic elapsed-time source for the sequence."""
from __future__ import annotations

import time
from typing import Callable


class Clock:
    """Starts on construction and only ever reads forward."""

    def __init__(self, time_source: Callable[[], float] = time.perf_counter) -> None:
        self._time_source = time_source
        self._start = time_source()

    def elapsed_seconds(self) -> float:
        return max(0.0, self._time_source() - self._start)
