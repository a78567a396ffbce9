"""Command line entry point: ``termcam -s``, ``-r N FILE`` or ``-p FILE``."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import sys

from loguru import logger

from .capture import create_capture_source
from .config import TermcamConfig
from .errors import ConfigurationError, TermcamError
from .frame.render import AnsiRenderer, TerminalSink
from .pipeline import Pipeline
from .storage import RecordStore

USAGE_MSG = (
    "Usage:\n"
    "\ttermcam -s\n"
    "\ttermcam -r <number of frames> <filename>\n"
    "\ttermcam -p <filename>"
)


class UsageError(Exception):
    """Raised instead of argparse's own exit so the fixed usage text is shown."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="termcam",
        description="Block-colored webcam in the terminal.",
        add_help=False,
        allow_abbrev=False,
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("-s", "--stream", action="store_true", help="Capture and render until interrupted.")
    mode.add_argument(
        "-r",
        "--record",
        nargs=2,
        metavar=("FRAMES", "FILENAME"),
        help="Capture, render and save FRAMES frames to records/FILENAME.",
    )
    mode.add_argument("-p", "--play", metavar="FILENAME", help="Replay records/FILENAME.")
    parser.add_argument("--config", help="YAML configuration file (default: ./termcam_config.yaml if present).")
    parser.add_argument("--log-level", help="Minimum log level written to stderr.")
    parser.add_argument(
        "--mirror",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Render columns right to left (default from config).",
    )
    return parser


def configure_logging(level: str) -> None:
    try:
        logger.level(level.upper())
    except ValueError:
        raise ConfigurationError(f"Unknown log level {level!r}") from None
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def parse_frame_count(raw: str) -> int:
    try:
        frames = int(raw)
    except ValueError:
        raise ConfigurationError(f"Number of frames must be a non-negative integer, got {raw!r}") from None
    if frames < 0:
        raise ConfigurationError(f"Number of frames must be a non-negative integer, got {raw!r}")
    return frames


def run(args: argparse.Namespace) -> int:
    config = TermcamConfig.load(args.config)
    if args.log_level is None:
        configure_logging(config.log_level)
    if args.mirror is not None:
        config = config.model_copy(update={"mirror": args.mirror})

    renderer = AnsiRenderer(TerminalSink(), mirror=config.mirror)
    store = RecordStore(config.records_dir)

    if args.play is not None:
        Pipeline(config, renderer, store).play(args.play)
        return 0

    frames = parse_frame_count(args.record[0]) if args.record else None
    with create_capture_source(config.capture) as source:
        pipeline = Pipeline(config, renderer, store, source=source)
        if frames is not None:
            pipeline.record(frames, args.record[1])
        else:
            pipeline.stream()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except UsageError:
        print(USAGE_MSG, file=sys.stderr)
        return 1

    try:
        configure_logging(args.log_level or "WARNING")
        return run(args)
    except KeyboardInterrupt:
        logger.info("MAIN: Interrupted, stopping.")
        return 0
    except TermcamError as ex:
        logger.error("MAIN: {}", ex)
        return 1


if __name__ == "__main__":
    sys.exit(main())
