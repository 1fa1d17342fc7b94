"""Per-channel float planes used as the working state of a pass."""
from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Tuple

import numpy as np

from ..core.errors import MissingChannelError
from ..core.utils_io import DecodedImage

REQUIRED_CHANNELS: Tuple[str, ...] = ("R", "G", "B", "A")
COLOR_CHANNELS: Tuple[str, ...] = ("R", "G", "B")


class ChannelStore:
    """Named 2D planes indexed ``[y, x]``.

    Only R, G, B and A are read or written by the extrapolation pass; any other
    plane is carried along untouched. The working extent is the smallest
    width and height found among the four required planes.
    """

    def __init__(self, planes: Mapping[str, np.ndarray], order: Optional[Iterable[str]] = None) -> None:
        missing = [name for name in REQUIRED_CHANNELS if name not in planes]
        if missing:
            raise MissingChannelError(missing, planes.keys())
        self._planes: Dict[str, np.ndarray] = {}
        for name, plane in planes.items():
            if name in REQUIRED_CHANNELS:
                plane = np.asarray(plane, dtype=np.float32)
                if plane.ndim != 2:
                    raise ValueError(f"channel {name} must be a 2D plane, got shape {plane.shape}")
            self._planes[name] = plane
        self.order: Tuple[str, ...] = tuple(order) if order is not None else tuple(planes.keys())
        self._width = min(self._planes[name].shape[1] for name in REQUIRED_CHANNELS)
        self._height = min(self._planes[name].shape[0] for name in REQUIRED_CHANNELS)

    @classmethod
    def from_decoded(cls, decoded: DecodedImage) -> "ChannelStore":
        """Build a store from planes produced by :func:`load_channel_planes`."""

        return cls(decoded.planes, decoded.order)

    def extent(self) -> Tuple[int, int]:
        """Return the shared ``(width, height)`` of the working planes."""

        return self._width, self._height

    @property
    def channels(self) -> Tuple[str, ...]:
        return tuple(self._planes)

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"coordinate ({x}, {y}) outside {self._width}x{self._height}")

    def get(self, channel: str, x: int, y: int) -> np.float32:
        self._check(x, y)
        return self._planes[channel][y, x]

    def set(self, channel: str, x: int, y: int, value: float) -> None:
        self._check(x, y)
        self._planes[channel][y, x] = value

    def plane(self, channel: str) -> np.ndarray:
        """Return the full plane stored for *channel*."""

        return self._planes[channel]

    def working_plane(self, channel: str) -> np.ndarray:
        """Return a writable view of *channel* restricted to the working extent."""

        return self._planes[channel][: self._height, : self._width]

    def copy_working(self) -> "ChannelStore":
        """Return a store with copied R/G/B/A planes and shared pass-through planes."""

        planes = dict(self._planes)
        for name in REQUIRED_CHANNELS:
            planes[name] = self._planes[name].copy()
        return ChannelStore(planes, self.order)

    def replace_working(self, other: "ChannelStore") -> None:
        """Swap in the R/G/B/A planes of *other*; other planes are kept."""

        for name in REQUIRED_CHANNELS:
            replacement = other.plane(name)
            if replacement.shape != self._planes[name].shape:
                raise ValueError(
                    f"channel {name} shape {replacement.shape} does not match {self._planes[name].shape}"
                )
        for name in REQUIRED_CHANNELS:
            self._planes[name] = other.plane(name)

    def as_planes(self) -> Dict[str, np.ndarray]:
        """Return every plane keyed by channel name, in the original order."""

        return {name: self._planes[name] for name in self.order}


__all__ = ["COLOR_CHANNELS", "REQUIRED_CHANNELS", "ChannelStore"]
