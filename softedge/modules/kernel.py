"""Square neighbourhood kernels clipped to the image bounds."""
from __future__ import annotations

from typing import List, Tuple

Coordinate = Tuple[int, int]


def can_be_in_kernel(x: int, y: int, width: int, height: int) -> bool:
    """Return ``True`` when ``(x, y)`` lies inside a ``width`` x ``height`` image."""

    return 0 <= x < width and 0 <= y < height


def kernel_offsets(radius: int) -> List[Coordinate]:
    """Return every ``(h_offset, v_offset)`` pair within Chebyshev distance *radius*.

    Horizontal offsets vary slowest. The zero offset is included.
    """

    if radius < 0:
        raise ValueError(f"kernel radius must be non-negative, got {radius}")
    span = range(-radius, radius + 1)
    return [(h_offset, v_offset) for h_offset in span for v_offset in span]


def build_kernel(x: int, y: int, width: int, height: int, radius: int) -> List[Coordinate]:
    """Return the in-bounds coordinates of the kernel centred on ``(x, y)``."""

    kernel: List[Coordinate] = []
    for h_offset, v_offset in kernel_offsets(radius):
        if can_be_in_kernel(x + h_offset, y + v_offset, width, height):
            kernel.append((x + h_offset, y + v_offset))
    return kernel


__all__ = ["Coordinate", "build_kernel", "can_be_in_kernel", "kernel_offsets"]
