"""Line-oriented record format for averaged frames.

Each cell is one line holding three space-separated integers, ``r g b``,
written in row-major order regardless of how frames are mirrored on screen.
A recording is just consecutive frames with no header, count or separator,
so a reader must know the grid dimensions the file was written with.
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice
from typing import TextIO

from loguru import logger
import numpy as np

from .color import ACCUMULATOR_DTYPE
from .grid import Frame, GridConfig

MAX_CHANNEL = 255


def encode_frame(frame: Frame) -> str:
    """Return the record text for one frame, one ``r g b`` line per cell."""
    return "".join(f"{r} {g} {b}\n" for r, g, b in frame.cells())


def write_frame(stream: TextIO, frame: Frame) -> None:
    stream.write(encode_frame(frame))


def _parse_channel(token: str) -> int | None:
    if not (token.isascii() and token.isdigit()):
        return None
    value = int(token)
    if value > MAX_CHANNEL:
        return None
    return value


class RecordReader:
    """Reads frames of a fixed grid size back from a record stream.

    ``read_frame`` returns ``None`` once fewer than a full frame of values
    remain, or as soon as a token is not a channel value in ``0..255``. Both
    cases mean "no more frames": a cleanly ended file and a truncated or
    corrupt one look the same to the caller.
    """

    def __init__(self, stream: TextIO, config: GridConfig) -> None:
        self.config = config
        self._tokens = self._iter_tokens(stream)
        self._exhausted = False
        self.frames_read = 0

    @staticmethod
    def _iter_tokens(stream: TextIO) -> Iterator[str]:
        for line in stream:
            yield from line.split()

    def read_frame(self) -> Frame | None:
        if self._exhausted:
            return None

        needed = self.config.cell_count * 3
        values: list[int] = []
        for token in islice(self._tokens, needed):
            value = _parse_channel(token)
            if value is None:
                logger.debug("RecordReader: Non-channel token {!r} after {} frames.", token, self.frames_read)
                break
            values.append(value)

        if len(values) < needed:
            self._exhausted = True
            if values:
                logger.debug(
                    "RecordReader: Dropping partial frame of {} values after {} frames.",
                    len(values),
                    self.frames_read,
                )
            return None

        self.frames_read += 1
        colors = np.array(values, dtype=ACCUMULATOR_DTYPE).reshape(
            self.config.grid_height, self.config.grid_width, 3
        )
        return Frame(colors)

    def __iter__(self) -> Iterator[Frame]:
        while True:
            frame = self.read_frame()
            if frame is None:
                return
            yield frame
