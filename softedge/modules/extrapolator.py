"""Single-pass alpha edge extrapolation.

Every pixel below full opacity gets the mean alpha of its kernel. Pixels that
were fully transparent additionally receive the mean colour of the kernel
members that carry some alpha. All reads go to the ``current`` store and all
writes to a separate ``target`` store, so a pixel's result never depends on
values written earlier in the same pass.
"""
from __future__ import annotations

import functools
import logging
from typing import Dict, Iterable, Optional

import numpy as np

from ..core.config import DEFAULT_METHOD, METHODS, PROGRESS_STEP
from ..core.progress import ProgressCallback, ProgressReporter
from ..core.utils_parallel import RowBand, iter_completed, limited_threads, partition_rows
from .channel_store import COLOR_CHANNELS, ChannelStore
from .kernel import Coordinate, build_kernel, kernel_offsets

LOGGER = logging.getLogger("softedge.extrapolator")

_ZERO = np.float32(0.0)


def extrapolate_pixel(current: ChannelStore, target: ChannelStore, x: int, y: int, radius: int) -> bool:
    """Recompute pixel ``(x, y)`` into *target*. Return ``True`` if anything was written."""

    width, height = current.extent()
    kernel = build_kernel(x, y, width, height, radius)
    if not kernel:
        return False

    alpha_old = current.get("A", x, y)
    if alpha_old >= 1.0:
        return False

    alpha_sum = _ZERO
    relevant_kernel = []
    for kx, ky in kernel:
        alpha = current.get("A", kx, ky)
        alpha_sum += alpha
        if alpha > 0.0:
            relevant_kernel.append((kx, ky))

    alpha_new = alpha_sum / np.float32(len(kernel))
    if alpha_new == alpha_old:
        return False
    target.set("A", x, y, alpha_new)

    # colour is only invented where there was none
    if alpha_old > 0.0 or not relevant_kernel:
        return True

    count = np.float32(len(relevant_kernel))
    for channel in COLOR_CHANNELS:
        total = _ZERO
        for kx, ky in relevant_kernel:
            total += current.get(channel, kx, ky)
        target.set(channel, x, y, total / count)
    return True


def extrapolate_pixels(
    current: ChannelStore,
    target: ChannelStore,
    coordinates: Iterable[Coordinate],
    radius: int,
) -> int:
    """Apply :func:`extrapolate_pixel` to *coordinates* in the given order."""

    written = 0
    for x, y in coordinates:
        if extrapolate_pixel(current, target, x, y, radius):
            written += 1
    return written


def extrapolate_rows(current: ChannelStore, target: ChannelStore, y_start: int, y_stop: int, radius: int) -> int:
    """Vectorised :func:`extrapolate_pixel` over rows ``y_start`` to ``y_stop``.

    Kernel members are accumulated one offset at a time, in kernel order, so
    the float32 sums match the per-pixel loop. Only rows of the band are
    written in *target*.
    """

    width, height = current.extent()
    y_start = max(0, y_start)
    y_stop = min(height, y_stop)
    if y_start >= y_stop or width == 0:
        return 0

    rows = y_stop - y_start
    alpha = current.working_plane("A")
    colours = {channel: current.working_plane(channel) for channel in COLOR_CHANNELS}

    alpha_sum = np.zeros((rows, width), dtype=np.float32)
    count = np.zeros((rows, width), dtype=np.float32)
    relevant = np.zeros((rows, width), dtype=np.float32)
    colour_sums: Dict[str, np.ndarray] = {
        channel: np.zeros((rows, width), dtype=np.float32) for channel in COLOR_CHANNELS
    }

    for h_offset, v_offset in kernel_offsets(radius):
        dst_y_start = max(y_start, -v_offset)
        dst_y_end = min(y_stop, height - v_offset)
        dst_x_start = max(0, -h_offset)
        dst_x_end = min(width, width - h_offset)
        if dst_y_start >= dst_y_end or dst_x_start >= dst_x_end:
            continue

        src_slice = (
            slice(dst_y_start + v_offset, dst_y_end + v_offset),
            slice(dst_x_start + h_offset, dst_x_end + h_offset),
        )
        dst_slice = (
            slice(dst_y_start - y_start, dst_y_end - y_start),
            slice(dst_x_start, dst_x_end),
        )

        neighbour_alpha = alpha[src_slice]
        alpha_sum[dst_slice] += neighbour_alpha
        count[dst_slice] += 1.0
        has_colour = neighbour_alpha > 0.0
        relevant[dst_slice] += has_colour
        for channel in COLOR_CHANNELS:
            colour_sums[channel][dst_slice] += np.where(has_colour, colours[channel][src_slice], _ZERO)

    band = slice(y_start, y_stop)
    alpha_old = alpha[band]
    with np.errstate(divide="ignore", invalid="ignore"):
        alpha_new = alpha_sum / count

    # negated comparisons keep NaN alpha on the same branch as the per-pixel rule
    write_alpha = (count > 0) & ~(alpha_old >= 1.0) & (alpha_new != alpha_old)
    target.working_plane("A")[band][write_alpha] = alpha_new[write_alpha]

    write_colour = write_alpha & ~(alpha_old > 0.0) & (relevant > 0)
    if np.any(write_colour):
        for channel in COLOR_CHANNELS:
            with np.errstate(divide="ignore", invalid="ignore"):
                averaged = colour_sums[channel] / relevant
            target.working_plane(channel)[band][write_colour] = averaged[write_colour]

    return int(np.count_nonzero(write_alpha))


class EdgeExtrapolator:
    """Run one extrapolation pass over a :class:`ChannelStore`.

    Rows are split into disjoint bands processed on a thread pool; each band
    writes only its own rows of the output store.
    """

    def __init__(
        self,
        radius: int = 1,
        *,
        threads: int = 1,
        method: str = DEFAULT_METHOD,
        progress: Optional[ProgressCallback] = None,
        progress_step: int = PROGRESS_STEP,
    ) -> None:
        if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)) or radius < 0:
            raise ValueError(f"kernel radius must be a non-negative integer, got {radius!r}")
        if method not in METHODS:
            raise ValueError(f"unknown method {method!r}, expected one of {', '.join(METHODS)}")
        self.radius = int(radius)
        self.threads = max(1, int(threads))
        self.method = method
        self.progress = progress
        self.progress_step = progress_step
        self.pixels_written = 0

    def _process_band(self, current: ChannelStore, target: ChannelStore, band: RowBand) -> int:
        y_start, y_stop = band
        if self.method == "rows":
            return extrapolate_rows(current, target, y_start, y_stop, self.radius)
        width, _ = current.extent()
        coordinates = ((x, y) for y in range(y_start, y_stop) for x in range(width))
        return extrapolate_pixels(current, target, coordinates, self.radius)

    def run(self, store: ChannelStore) -> ChannelStore:
        """Return a new store holding the extrapolated R/G/B/A planes.

        *store* itself is never modified.
        """

        width, height = store.extent()
        target = store.copy_working()
        bands = partition_rows(height, max(self.threads, 100 // max(self.progress_step, 1)))
        reporter = ProgressReporter(height, step=self.progress_step, callback=self.progress)

        LOGGER.debug(
            "Extrapolating %sx%s image: radius=%s method=%s threads=%s bands=%s",
            width,
            height,
            self.radius,
            self.method,
            self.threads,
            len(bands),
        )
        written = 0
        reporter.start()
        worker = functools.partial(self._process_band, store, target)
        with limited_threads(self.threads):
            for (y_start, y_stop), band_written in iter_completed(worker, bands, max_workers=self.threads):
                written += band_written
                reporter.advance(y_stop - y_start)
        reporter.finish()

        self.pixels_written = written
        LOGGER.info("Extrapolated %d of %d pixels", written, width * height)
        return target


def extrapolate_store(
    store: ChannelStore,
    radius: int = 1,
    *,
    threads: int = 1,
    method: str = DEFAULT_METHOD,
    progress: Optional[ProgressCallback] = None,
) -> ChannelStore:
    """Convenience wrapper running a single :class:`EdgeExtrapolator` pass."""

    extrapolator = EdgeExtrapolator(radius, threads=threads, method=method, progress=progress)
    return extrapolator.run(store)


__all__ = [
    "EdgeExtrapolator",
    "extrapolate_pixel",
    "extrapolate_pixels",
    "extrapolate_rows",
    "extrapolate_store",
]
