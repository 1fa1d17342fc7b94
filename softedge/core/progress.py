"""Percentage progress reporting for long passes."""
from __future__ import annotations

import logging
from typing import Callable, Optional

LOGGER = logging.getLogger("softedge.progress")

ProgressCallback = Callable[[int], None]


def log_progress(percent: int) -> None:
    LOGGER.info("%d%%", percent)


class ProgressReporter:
    """Turn a running unit count into percentages emitted every *step* percent.

    The reporter is owned by a single thread; workers never touch it.
    """

    def __init__(self, total: int, *, step: int = 10, callback: Optional[ProgressCallback] = None) -> None:
        self.total = max(int(total), 0)
        self.step = max(int(step), 1)
        self.callback = callback or log_progress
        self.done = 0
        self._last: Optional[int] = None

    def _emit(self, percent: int) -> None:
        if self._last is not None and percent <= self._last:
            return
        self._last = percent
        self.callback(percent)

    def start(self) -> None:
        self._emit(0)

    def advance(self, units: int) -> None:
        self.done = min(self.total, self.done + units)
        if self.total == 0:
            return
        percent = self.done * 100 // self.total
        self._emit(percent - percent % self.step)

    def finish(self) -> None:
        self.done = self.total
        self._emit(100)


__all__ = ["ProgressCallback", "ProgressReporter", "log_progress"]
