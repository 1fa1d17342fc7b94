"""Alpha edge bleed: extrapolate colour into the transparent border of RGBA images."""
from __future__ import annotations

from .core.errors import ImageIOError, MissingChannelError, SoftEdgeError, UsageError
from .modules.channel_store import ChannelStore
from .modules.extrapolator import EdgeExtrapolator, extrapolate_store
from .modules.kernel import build_kernel
from .modules.softedge_pipeline import SoftEdgePipeline, process_image

__version__ = "0.1.0"
__all__ = [
    "ChannelStore",
    "EdgeExtrapolator",
    "ImageIOError",
    "MissingChannelError",
    "SoftEdgeError",
    "SoftEdgePipeline",
    "UsageError",
    "build_kernel",
    "extrapolate_store",
    "process_image",
]
