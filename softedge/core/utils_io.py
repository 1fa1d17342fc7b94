"""Image I/O helpers for the softedge tool.

Images are decoded into one float32 plane per named band and encoded back
from such planes. Band names come from :meth:`PIL.Image.Image.getbands`, so
an ``RGBA`` image yields the planes ``R``, ``G``, ``B`` and ``A``.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageIOError

LOGGER = logging.getLogger("softedge.io")

# Divisors mapping stored band values onto [0, 1].
_BAND_SCALE: Dict[str, float] = {
    "L": 255.0,
    "I;16": 65535.0,
    "I": 65535.0,
    "F": 1.0,
}


@dataclass
class DecodedImage:
    """Named float planes plus what is needed to write them back."""

    planes: Dict[str, np.ndarray]
    order: Tuple[str, ...]
    mode: str
    band_modes: Dict[str, str] = field(default_factory=dict)
    icc_profile: Optional[bytes] = None

    @property
    def size(self) -> Tuple[int, int]:
        first = self.planes[self.order[0]]
        return first.shape[1], first.shape[0]


def ensure_dir(path: Path) -> Path:
    """Ensure that *path* exists and return it."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def _open_image(path: Path) -> Image.Image:
    try:
        image = Image.open(path)
        image.load()
    except FileNotFoundError as exc:
        raise ImageIOError(f"cannot read {path}: file not found") from exc
    except UnidentifiedImageError as exc:
        raise ImageIOError(f"cannot read {path}: unsupported or corrupt image") from exc
    except Image.DecompressionBombError as exc:
        raise ImageIOError(f"cannot read {path}: {exc}") from exc
    except OSError as exc:
        raise ImageIOError(f"cannot read {path}: {exc}") from exc
    return image


def _expand_palette(image: Image.Image) -> Image.Image:
    """Expand palette images so their transparency becomes a real band."""

    if image.mode == "PA" or (image.mode == "P" and "transparency" in image.info):
        return image.convert("RGBA")
    if image.mode == "P":
        return image.convert("RGB")
    return image


def _band_to_plane(band: Image.Image) -> np.ndarray:
    scale = _BAND_SCALE.get(band.mode, 255.0)
    array = np.asarray(band, dtype=np.float32)
    if scale != 1.0:
        array = array / np.float32(scale)
    return np.ascontiguousarray(array, dtype=np.float32)


def _plane_to_band(plane: np.ndarray, band_mode: str) -> Image.Image:
    if band_mode == "F":
        return Image.fromarray(np.asarray(plane, dtype=np.float32))
    if band_mode in ("I;16", "I"):
        values = np.rint(np.clip(plane, 0.0, 1.0) * 65535.0).astype(np.uint16)
        return Image.fromarray(values)
    values = np.rint(np.clip(plane, 0.0, 1.0) * 255.0).astype(np.uint8)
    return Image.fromarray(values)


def load_channel_planes(path: Path | str) -> DecodedImage:
    """Decode *path* into one float32 plane per image band."""

    path = Path(path)
    image = _expand_palette(_open_image(path))
    order = tuple(image.getbands())
    planes: Dict[str, np.ndarray] = {}
    band_modes: Dict[str, str] = {}
    for name, band in zip(order, image.split()):
        planes[name] = _band_to_plane(band)
        band_modes[name] = band.mode
    LOGGER.debug("Loaded %s: mode=%s size=%sx%s", path, image.mode, image.width, image.height)
    return DecodedImage(
        planes=planes,
        order=order,
        mode=image.mode,
        band_modes=band_modes,
        icc_profile=image.info.get("icc_profile"),
    )


def merge_channel_planes(
    planes: Mapping[str, np.ndarray],
    order: Sequence[str],
    mode: str,
    band_modes: Optional[Mapping[str, str]] = None,
) -> Image.Image:
    """Assemble named planes into a Pillow image, bands in *order*."""

    band_modes = band_modes or {}
    bands = [_plane_to_band(planes[name], band_modes.get(name, "L")) for name in order]
    return Image.merge(mode, bands)


def _output_format(destination: Path) -> str:
    image_format = Image.registered_extensions().get(destination.suffix.lower())
    if image_format is None:
        raise ImageIOError(f"cannot write {destination}: unknown image format {destination.suffix!r}")
    return image_format


def atomic_save(image: Image.Image, path: Path | str, *, icc_profile: Optional[bytes] = None) -> Path:
    """Write *image* through a temporary file so failures leave no output."""

    destination = Path(path)
    image_format = _output_format(destination)
    params: Dict[str, object] = {}
    if icc_profile:
        params["icc_profile"] = icc_profile
    temp_path = destination.with_name(f".{destination.name}.tmp")
    try:
        ensure_dir(destination.parent)
        image.save(temp_path, format=image_format, **params)
        os.replace(temp_path, destination)
    except (OSError, ValueError) as exc:
        raise ImageIOError(f"cannot write {destination}: {exc}") from exc
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return destination


def write_channel_planes(decoded: DecodedImage, path: Path | str) -> Path:
    """Encode the planes held by *decoded* to *path*."""

    image = merge_channel_planes(decoded.planes, decoded.order, decoded.mode, decoded.band_modes)
    destination = atomic_save(image, path, icc_profile=decoded.icc_profile)
    LOGGER.debug("Wrote %s", destination)
    return destination


__all__ = [
    "DecodedImage",
    "atomic_save",
    "ensure_dir",
    "load_channel_planes",
    "merge_channel_planes",
    "write_channel_planes",
]
