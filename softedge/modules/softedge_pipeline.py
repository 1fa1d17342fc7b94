"""Load, extrapolate and write a single image."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..core import config
from ..core.progress import ProgressCallback
from ..core.utils_io import load_channel_planes, write_channel_planes
from .channel_store import ChannelStore
from .extrapolator import EdgeExtrapolator

LOGGER = logging.getLogger("softedge.pipeline")


class SoftEdgePipeline:
    """Apply one alpha edge extrapolation pass to image files."""

    def __init__(
        self,
        cfg: Optional[Mapping[str, object]] = None,
        *,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.cfg = config.build_config(cfg)
        self.progress = progress

    def _extrapolator(self) -> EdgeExtrapolator:
        return EdgeExtrapolator(
            int(self.cfg["KERNEL_RADIUS"]),  # type: ignore[arg-type]
            threads=int(self.cfg["THREADS"]),  # type: ignore[arg-type]
            method=str(self.cfg["METHOD"]),
            progress=self.progress,
            progress_step=int(self.cfg["PROGRESS_STEP"]),  # type: ignore[arg-type]
        )

    def run(self, src: Path | str, dst: Path | str) -> Dict[str, Any]:
        """Process *src* into *dst* and return run metadata.

        Raises :class:`~softedge.core.errors.MissingChannelError` or
        :class:`~softedge.core.errors.ImageIOError`; nothing is written to
        *dst* when either is raised before encoding.
        """

        src = Path(src)
        dst = Path(dst)
        started = time.perf_counter()

        decoded = load_channel_planes(src)
        store = ChannelStore.from_decoded(decoded)
        width, height = store.extent()
        LOGGER.info("Processing %s (%sx%s, channels %s)", src, width, height, ",".join(decoded.order))

        extrapolator = self._extrapolator()
        result = extrapolator.run(store)
        store.replace_working(result)
        decoded.planes.update(store.as_planes())
        write_channel_planes(decoded, dst)

        elapsed = time.perf_counter() - started
        LOGGER.info("Wrote %s in %.2fs", dst, elapsed)
        return {
            "src": str(src),
            "dst": str(dst),
            "width": width,
            "height": height,
            "channels": list(decoded.order),
            "kernel_radius": extrapolator.radius,
            "pixels_written": extrapolator.pixels_written,
            "seconds": round(elapsed, 3),
        }


def process_image(
    src: Path | str,
    dst: Path | str,
    kernel_radius: int = config.DEFAULT_KERNEL_RADIUS,
    *,
    threads: int = 1,
    method: str = config.DEFAULT_METHOD,
    progress: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """Process one file with the given settings."""

    overrides = {"KERNEL_RADIUS": kernel_radius, "THREADS": threads, "METHOD": method}
    return SoftEdgePipeline(overrides, progress=progress).run(src, dst)


__all__ = ["SoftEdgePipeline", "process_image"]
