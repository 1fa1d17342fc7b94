"""Tests for row partitioning, the worker helper and progress reporting."""
from __future__ import annotations

import pytest

from softedge.core.progress import ProgressReporter
from softedge.core.utils_parallel import iter_completed, partition_rows


@pytest.mark.parametrize("height,parts", [(10, 3), (7, 7), (3, 10), (100, 1)])
def test_partition_covers_every_row_once(height: int, parts: int) -> None:
    bands = partition_rows(height, parts)
    rows = [y for start, stop in bands for y in range(start, stop)]
    assert rows == list(range(height))
    assert len(bands) == min(height, parts)
    sizes = {stop - start for start, stop in bands}
    assert max(sizes) - min(sizes) <= 1


def test_partition_of_empty_image() -> None:
    assert partition_rows(0, 4) == []


def test_serial_execution_keeps_order() -> None:
    results = list(iter_completed(lambda value: value * 2, [3, 1, 2], max_workers=1))
    assert results == [(3, 6), (1, 2), (2, 4)]


def test_threaded_execution_returns_every_result() -> None:
    results = dict(iter_completed(lambda value: value + 1, list(range(20)), max_workers=4))
    assert results == {value: value + 1 for value in range(20)}


def test_worker_errors_propagate() -> None:
    def _boom(value: int) -> int:
        if value == 3:
            raise RuntimeError("worker failed")
        return value

    with pytest.raises(RuntimeError, match="worker failed"):
        list(iter_completed(_boom, list(range(6)), max_workers=3))


def test_progress_steps() -> None:
    seen: list[int] = []
    reporter = ProgressReporter(20, step=10, callback=seen.append)
    reporter.start()
    for _ in range(20):
        reporter.advance(1)
    reporter.finish()
    assert seen == [0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100]


def test_progress_with_large_jumps() -> None:
    seen: list[int] = []
    reporter = ProgressReporter(3, step=10, callback=seen.append)
    reporter.start()
    reporter.advance(1)
    reporter.advance(1)
    reporter.advance(1)
    reporter.finish()
    assert seen == [0, 30, 60, 100]


def test_progress_on_empty_work() -> None:
    seen: list[int] = []
    reporter = ProgressReporter(0, callback=seen.append)
    reporter.start()
    reporter.advance(5)
    reporter.finish()
    assert seen == [0, 100]
