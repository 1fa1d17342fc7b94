"""Parallel execution helpers for the softedge pass."""
from __future__ import annotations

import concurrent.futures
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, TypeVar


LOGGER = logging.getLogger("softedge.parallel")

T = TypeVar("T")
R = TypeVar("R")

RowBand = Tuple[int, int]


def create_thread_pool(max_workers: Optional[int] = None) -> concurrent.futures.ThreadPoolExecutor:
    """Create a thread pool executor with sane defaults."""

    return concurrent.futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="softedge")


def partition_rows(height: int, parts: int) -> List[RowBand]:
    """Split ``range(height)`` into at most *parts* contiguous ``(start, stop)`` bands.

    Bands are disjoint, ordered and cover every row exactly once. Band sizes
    differ by at most one row.
    """

    if height <= 0:
        return []
    parts = max(1, min(int(parts), height))
    base, extra = divmod(height, parts)
    bands: List[RowBand] = []
    start = 0
    for index in range(parts):
        stop = start + base + (1 if index < extra else 0)
        bands.append((start, stop))
        start = stop
    return bands


def iter_completed(
    function: Callable[[T], R],
    items: Sequence[T],
    *,
    max_workers: Optional[int] = None,
) -> Iterator[Tuple[T, R]]:
    """Yield ``(item, result)`` pairs as calls of *function* finish.

    With a single worker the items are processed inline, in order. Worker
    exceptions are re-raised in the caller.
    """

    if not items:
        return
    if max_workers is not None and max_workers <= 1:
        for item in items:
            yield item, function(item)
        return
    with create_thread_pool(max_workers=max_workers) as executor:
        futures = {executor.submit(function, item): item for item in items}
        try:
            for future in concurrent.futures.as_completed(futures):
                yield futures[future], future.result()
        except BaseException:
            for future in futures:
                future.cancel()
            raise


@contextmanager
def limited_threads(max_workers: Optional[int]) -> Iterator[None]:
    """Context manager that logs thread usage for diagnostics."""

    LOGGER.debug("Starting thread pool with up to %s workers", max_workers)
    try:
        yield
    finally:
        LOGGER.debug("Thread pool with %s workers completed", max_workers)


__all__ = ["RowBand", "create_thread_pool", "iter_completed", "limited_threads", "partition_rows"]
