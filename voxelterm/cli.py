"""Command line entry point."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional, Tuple

from .app import App
from .config import load_config
from .exceptions import ConfigError, VolumeLoadError
from .ui import render
from .visualization.cells import CellBuffer

LOGGER = logging.getLogger(__name__)

# Poll interval of the event loop, in seconds.
TICK_RATE = 0.25


def parse_size(text: str) -> Tuple[int, int]:
    """``"COLSxROWS"`` -> ``(cols, rows)``."""
    import argparse

    try:
        cols, rows = (int(part) for part in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected COLSxROWS, got {text!r}") from None
    if cols < 1 or rows < 1:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {text!r}")
    return cols, rows


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="voxelterm", description="View NIfTI volumes in the terminal"
    )
    parser.add_argument("file", help="NIfTI image to display")
    modes = parser.add_mutually_exclusive_group()
    modes.add_argument(
        "--ansi",
        dest="color_mode",
        action="store_const",
        const="ansi256",
        help="Use the 256 color palette instead of true color",
    )
    modes.add_argument(
        "--mono",
        dest="color_mode",
        action="store_const",
        const="bw",
        help="Black and white output",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More log output (repeatable)"
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--log-file", help="Write log messages to this file")
    parser.add_argument(
        "--snapshot",
        action="store_true",
        help="Print a single frame to stdout and exit",
    )
    parser.add_argument(
        "--size",
        type=parse_size,
        metavar="COLSxROWS",
        help="Frame size for --snapshot (default: terminal size)",
    )
    return parser


def _configure_logging(verbose: int, log_file: Optional[str]) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="[%(levelname)s] %(message)s", filename=log_file
    )


def snapshot(app: App, size: Tuple[int, int]) -> str:
    """Render one frame of ``app`` as ANSI text."""
    buffer = CellBuffer(*size)
    render(app, buffer)
    return buffer.to_ansi()


def is_interactive(stdin, stdout) -> bool:
    """Both streams must be ttys for the raw-mode viewer."""
    return stdin.isatty() and stdout.isatty()


def run(app: App) -> None:
    """Interactive loop: redraw, wait for a key, repeat until quit."""
    from .terminal import Terminal

    with Terminal() as term:
        while app.running:
            buffer = CellBuffer(*term.size())
            render(app, buffer)
            term.draw(buffer)
            key = term.read_key(TICK_RATE)
            if key is not None:
                app.handle_key(key)


def main(argv: List[str] | None = None) -> int:
    """CLI entry point."""

    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.log_file)

    try:
        config = load_config(args.config).with_overrides(color_mode=args.color_mode)
        app = App.from_file(args.file, config)
    except ConfigError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 1
    except VolumeLoadError as exc:
        LOGGER.error("Failed to load data '%s': %s", args.file, exc)
        return 1

    interactive = is_interactive(sys.stdin, sys.stdout)
    if not args.snapshot and not interactive:
        LOGGER.warning("stdin or stdout is not a terminal; printing a single frame")
    if args.snapshot or not interactive:
        import shutil

        size = args.size or tuple(shutil.get_terminal_size())
        sys.stdout.write(snapshot(app, size) + "\n")
        return 0

    run(app)
    LOGGER.info("Slice cache: %d hits, %d misses", app.cache.hits, app.cache.misses)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
