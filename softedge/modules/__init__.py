"""Channel store, kernel builder and edge extrapolator."""
from __future__ import annotations

from .channel_store import COLOR_CHANNELS, REQUIRED_CHANNELS, ChannelStore
from .extrapolator import EdgeExtrapolator, extrapolate_pixel, extrapolate_rows, extrapolate_store
from .kernel import build_kernel, can_be_in_kernel, kernel_offsets

__all__ = [
    "COLOR_CHANNELS",
    "REQUIRED_CHANNELS",
    "ChannelStore",
    "EdgeExtrapolator",
    "build_kernel",
    "can_be_in_kernel",
    "extrapolate_pixel",
    "extrapolate_rows",
    "extrapolate_store",
    "kernel_offsets",
]
