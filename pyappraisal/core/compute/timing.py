"""
Phase timing for backends.

A backend wraps each phase of a fit (normal equations, inversion,
statistics) in a named section; the totals end up in Result.timing.
"""

import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Wall-clock timer with named, accumulating sections.

        timer = Timer()
        timer.start()
        with timer.section('inverse'):
            ...
        timer.stop()
        timer.result()  # {'total_seconds': ..., 'inverse': ...}

    Re-entering a section adds to its total.
    """

    def __init__(self) -> None:
        self._phases: defaultdict[str, float] = defaultdict(float)
        self._began: float | None = None
        self._elapsed: float | None = None

    def start(self) -> None:
        self._began = time.perf_counter()
        self._elapsed = None

    def stop(self) -> None:
        if self._began is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._elapsed = time.perf_counter() - self._began

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._phases[name] += time.perf_counter() - t0

    def result(self) -> dict[str, float]:
        """
        Total and per-section seconds.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._elapsed is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._elapsed, **self._phases}

