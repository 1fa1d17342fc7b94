"""Command line interface for the softedge alpha bleed tool."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, NoReturn, Optional, Sequence

from .core import config
from .core.errors import SoftEdgeError, UsageError

LOGGER = logging.getLogger("softedge.main")


class UsageErrorParser(argparse.ArgumentParser):
    """Argument parser that raises :class:`UsageError` instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise UsageError(message)


def kernel_radius(value: str) -> int:
    try:
        radius = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"kernel-radius must be a non-negative integer, got {value!r}") from None
    if radius < 0:
        raise argparse.ArgumentTypeError(f"kernel-radius must be a non-negative integer, got {value!r}")
    return radius


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def _configure_logging(log_path: Optional[Path], quiet: bool = False) -> None:
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S")
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.WARNING if quiet else logging.INFO)
    stdout_handler.addFilter(_BelowWarning())
    stdout_handler.setFormatter(formatter)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [stdout_handler, stderr_handler]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8", delay=True)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    logging.basicConfig(level=logging.INFO, handlers=handlers, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageErrorParser(
        prog="softedge",
        description="Extrapolate colour into the transparent border of an RGBA image",
    )
    parser.add_argument("input", type=Path, help="Image to read (must carry R, G, B and A channels)")
    parser.add_argument("output", type=Path, help="Image to write")
    parser.add_argument(
        "kernel_radius",
        nargs="?",
        type=kernel_radius,
        default=config.DEFAULT_KERNEL_RADIUS,
        metavar="kernel-radius",
        help="Neighbourhood radius in pixels (default: 1)",
    )
    parser.add_argument("--threads", type=positive_int, default=None, help="Number of worker threads")
    parser.add_argument(
        "--method",
        choices=config.METHODS,
        default=config.DEFAULT_METHOD,
        help="rows: vectorised row bands (default); pixel: reference per-pixel loop",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    parser.add_argument("--quiet", action="store_true", help="Do not print progress")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def build_runtime_config(args: argparse.Namespace) -> Dict[str, object]:
    overrides: Dict[str, object] = {
        "KERNEL_RADIUS": args.kernel_radius,
        "METHOD": args.method,
        "LOG_FILE": args.log_file,
        "QUIET": args.quiet,
    }
    if args.threads is not None:
        overrides["THREADS"] = args.threads
    return config.build_config(overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except UsageError as exc:
        print(f"softedge: error: {exc}", file=sys.stderr)
        return 1

    cfg = build_runtime_config(args)
    log_file = cfg["LOG_FILE"]
    _configure_logging(Path(log_file) if log_file else None, quiet=bool(cfg["QUIET"]))
    LOGGER.debug("Resolved configuration: %s", cfg)

    from .modules.softedge_pipeline import SoftEdgePipeline

    try:
        SoftEdgePipeline(cfg).run(args.input, args.output)
    except SoftEdgeError as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
