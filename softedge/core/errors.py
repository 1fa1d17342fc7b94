"""Exception hierarchy shared by the softedge tool."""
from __future__ import annotations

from typing import Iterable


class SoftEdgeError(Exception):
    """Base class for every error raised by softedge."""


class UsageError(SoftEdgeError):
    """Raised when the command line cannot be interpreted."""


class MissingChannelError(SoftEdgeError):
    """Raised when a decoded image does not carry all of R, G, B and A."""

    def __init__(self, missing: Iterable[str], available: Iterable[str] = ()) -> None:
        self.missing = tuple(missing)
        self.available = tuple(available)
        super().__init__(
            f"unexpected channel layout: missing {', '.join(self.missing)} "
            f"(image has {', '.join(self.available) or 'no channels'})"
        )


class ImageIOError(SoftEdgeError):
    """Raised when an image cannot be decoded or encoded."""


__all__ = ["ImageIOError", "MissingChannelError", "SoftEdgeError", "UsageError"]
