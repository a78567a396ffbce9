"""ANSI renderer for averaged frames using 24-bit background colors."""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger

from .grid import Frame

# Move the cursor home and erase the display, which is what clear(1) sends.
CLEAR_SCREEN = "\033[H\033[2J"
BLACK_BACKGROUND = "\033[48;2;0;0;0m"


def background(r: int, g: int, b: int) -> str:
    """Escape sequence setting the terminal background to ``(r, g, b)``."""
    return f"\033[48;2;{r};{g};{b}m"


def frame_to_ansi(frame: Frame, mirror: bool = True) -> str:
    """Convert a frame to a block-colored string, one space per cell.

    Args:
        frame: Averaged frame to draw
        mirror: Draw columns right to left, so a camera facing the user
            behaves like a mirror

    Returns:
        The picture, framed by black-background resets, ending in a newline
    """
    parts = [BLACK_BACKGROUND]
    for row in frame.rows():
        if mirror:
            row.reverse()
        parts.extend(background(*cell) + " " for cell in row)
        parts.append(BLACK_BACKGROUND + "\n")
    parts.append(BLACK_BACKGROUND + "\n")
    return "".join(parts)


class TerminalSink:
    """Where rendered frames go. Wraps a text stream, stdout by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def clear(self) -> None:
        self._stream.write(CLEAR_SCREEN)

    def write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()


class AnsiRenderer:
    """Clears the terminal and draws each frame on it.

    Rendering is best effort: a failed write is logged and reported through
    the return value, and never stops the caller's loop.
    """

    def __init__(self, sink: TerminalSink, mirror: bool = True) -> None:
        self.sink = sink
        self.mirror = mirror

    def render(self, frame: Frame) -> str:
        return frame_to_ansi(frame, mirror=self.mirror)

    def display(self, frame: Frame) -> bool:
        picture = self.render(frame)
        try:
            self.sink.clear()
            self.sink.write(picture)
        except OSError as ex:
            logger.warning("AnsiRenderer: Failed to write frame to terminal: {}", ex)
            return False
        return True
