"""Frame pipeline: accumulation, averaging, rendering and recording."""

from .color import Color, PixelBlock
from .grid import Frame, FrameGrid, GridConfig
from .record import RecordReader, encode_frame, write_frame
from .render import AnsiRenderer, TerminalSink, frame_to_ansi

__all__ = [
    "AnsiRenderer",
    "Color",
    "Frame",
    "FrameGrid",
    "GridConfig",
    "PixelBlock",
    "RecordReader",
    "TerminalSink",
    "encode_frame",
    "frame_to_ansi",
    "write_frame",
]
