"""Tests for clipped neighbourhood kernels."""
from __future__ import annotations

import pytest

from softedge.modules.kernel import build_kernel, can_be_in_kernel, kernel_offsets


def test_interior_kernel_is_full_square() -> None:
    kernel = build_kernel(5, 5, 10, 10, 1)
    assert len(kernel) == 9
    assert (5, 5) in kernel
    assert all(max(abs(x - 5), abs(y - 5)) <= 1 for x, y in kernel)


@pytest.mark.parametrize("radius", [0, 1, 2, 3])
def test_corner_kernel_is_clipped(radius: int) -> None:
    kernel = build_kernel(0, 0, 16, 16, radius)
    assert len(kernel) == (radius + 1) ** 2
    assert all(can_be_in_kernel(x, y, 16, 16) for x, y in kernel)


def test_radius_zero_contains_only_centre() -> None:
    assert build_kernel(3, 2, 8, 8, 0) == [(3, 2)]


def test_kernel_larger_than_image() -> None:
    kernel = build_kernel(0, 0, 2, 2, 5)
    assert sorted(kernel) == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_edge_kernel_size() -> None:
    assert len(build_kernel(4, 0, 10, 10, 1)) == 6
    assert len(build_kernel(9, 4, 10, 10, 2)) == 15


def test_horizontal_offset_varies_slowest() -> None:
    assert kernel_offsets(1)[:3] == [(-1, -1), (-1, 0), (-1, 1)]
    assert build_kernel(1, 1, 3, 3, 1)[:2] == [(0, 0), (0, 1)]


def test_negative_radius_rejected() -> None:
    with pytest.raises(ValueError):
        kernel_offsets(-1)


def test_bounds_predicate() -> None:
    assert can_be_in_kernel(0, 0, 1, 1)
    assert not can_be_in_kernel(-1, 0, 4, 4)
    assert not can_be_in_kernel(0, 4, 4, 4)
    assert not can_be_in_kernel(4, 0, 4, 4)
