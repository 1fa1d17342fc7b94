"""Configuration module for the softedge alpha bleed tool."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional


DEFAULT_KERNEL_RADIUS = 1
DEFAULT_METHOD = "rows"
METHODS = ("rows", "pixel")
PROGRESS_STEP = 10


def _default_threads() -> int:
    return max(1, min(8, os.cpu_count() or 1))


@dataclass
class SoftEdgeConfig:
    """Runtime configuration for a single extrapolation run."""

    kernel_radius: int = DEFAULT_KERNEL_RADIUS
    threads: int = 1
    method: str = DEFAULT_METHOD
    progress_step: int = PROGRESS_STEP
    log_file: Optional[Path] = None
    quiet: bool = False

    def as_dict(self) -> Dict[str, object]:
        """Return the configuration as a plain dictionary."""

        return {
            "KERNEL_RADIUS": self.kernel_radius,
            "THREADS": self.threads,
            "METHOD": self.method,
            "PROGRESS_STEP": self.progress_step,
            "LOG_FILE": self.log_file,
            "QUIET": self.quiet,
        }


def build_config(overrides: Optional[Mapping[str, object]] = None) -> Dict[str, object]:
    """Create a configuration dictionary with optional overrides.

    Unknown keys are ignored so callers can pass a superset of settings.
    """

    config = SoftEdgeConfig(threads=_default_threads())
    if overrides:
        mutable: MutableMapping[str, object] = config.as_dict()
        for key, value in overrides.items():
            if key in mutable:
                mutable[key] = value
        return dict(mutable)
    return config.as_dict()


__all__ = [
    "DEFAULT_KERNEL_RADIUS",
    "DEFAULT_METHOD",
    "METHODS",
    "PROGRESS_STEP",
    "SoftEdgeConfig",
    "build_config",
]
