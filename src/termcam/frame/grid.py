"""Downsampling grid: accumulate raw pixels per block, then average them.

A frame is built in two phases. ``FrameGrid`` is the mutable accumulator
that raw source pixels are routed into; ``finalize_averages`` divides every
cell by the block area and hands back a ``Frame``, a read-only snapshot of
averaged colors that can be rendered or recorded. The grid refuses to be
accumulated into again until it is reset, so a finalized frame can never be
mixed with stale sums.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, Field, model_validator

from ..errors import FrameStateError
from .color import ACCUMULATOR_DTYPE, Color, PixelBlock


class GridConfig(BaseModel):
    """Source image size and the block size each grid cell averages over."""

    source_width: int = Field(default=640, gt=0, description="Width in pixels of the captured image used for a frame.")
    source_height: int = Field(default=460, gt=0, description="Height in pixels of the captured image used for a frame.")
    block_width: int = Field(default=5, gt=0, description="Source pixels per grid column.")
    block_height: int = Field(default=10, gt=0, description="Source pixels per grid row.")

    @model_validator(mode="after")
    def check_blocks_divide_source(self) -> "GridConfig":
        if self.source_width % self.block_width:
            raise ValueError(
                f"block_width {self.block_width} does not divide source_width {self.source_width}"
            )
        if self.source_height % self.block_height:
            raise ValueError(
                f"block_height {self.block_height} does not divide source_height {self.source_height}"
            )
        return self

    @property
    def grid_width(self) -> int:
        return self.source_width // self.block_width

    @property
    def grid_height(self) -> int:
        return self.source_height // self.block_height

    @property
    def block_area(self) -> int:
        return self.block_width * self.block_height

    @property
    def cell_count(self) -> int:
        return self.grid_width * self.grid_height


class Frame:
    """An averaged, read-only grid of colors.

    The backing array has shape ``(height, width, 3)`` and is not writable.
    """

    __slots__ = ("_colors",)

    def __init__(self, colors: NDArray[np.integer] | Sequence[Sequence[Sequence[int]]]) -> None:
        array = np.array(colors, dtype=ACCUMULATOR_DTYPE)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Frame needs shape (height, width, 3), got {array.shape}")
        if array.size and array.min() < 0:
            raise ValueError("Frame colors must be non-negative")
        array.setflags(write=False)
        self._colors = array

    @classmethod
    def from_colors(cls, rows: Sequence[Sequence[Color | tuple[int, int, int]]]) -> "Frame":
        """Build a frame from nested rows of ``(r, g, b)`` triples."""
        return cls([[tuple(cell) for cell in row] for row in rows])

    @property
    def height(self) -> int:
        return self._colors.shape[0]

    @property
    def width(self) -> int:
        return self._colors.shape[1]

    @property
    def colors(self) -> NDArray[np.int64]:
        return self._colors

    def __getitem__(self, index: tuple[int, int]) -> Color:
        row, col = index
        r, g, b = (int(v) for v in self._colors[row, col])
        return Color(r, g, b)

    def rows(self) -> Iterator[list[Color]]:
        for row in self._colors:
            yield [Color(int(r), int(g), int(b)) for r, g, b in row]

    def cells(self) -> Iterator[Color]:
        """Yield every cell in row-major order."""
        for row in self.rows():
            yield from row

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self._colors.shape == other._colors.shape and bool(np.array_equal(self._colors, other._colors))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Frame(height={self.height}, width={self.width})"


class FrameGrid:
    """Per-cell channel sums for one frame in progress.

    Callers drive it as ``reset()`` -> accumulate every source pixel exactly
    once -> ``finalize_averages()``. Violations raise ``FrameStateError``.
    """

    def __init__(self, config: GridConfig) -> None:
        self.config = config
        self._sums = np.zeros((config.grid_height, config.grid_width, 3), dtype=ACCUMULATOR_DTYPE)
        self._samples = 0
        self._finalized = False

    @property
    def shape(self) -> tuple[int, int]:
        return self.config.grid_height, self.config.grid_width

    @property
    def samples(self) -> int:
        """Number of source pixels accumulated since the last reset."""
        return self._samples

    def block(self, row: int, col: int) -> PixelBlock:
        """Return the accumulator for one cell, sharing the grid's storage."""
        return PixelBlock(self._sums[row, col])

    def reset(self) -> None:
        self._sums.fill(0)
        self._samples = 0
        self._finalized = False

    def accumulate_sample(self, x: int, y: int, sample: Color | tuple[int, int, int]) -> None:
        """Add the source pixel at ``(x, y)`` into the cell that covers it."""
        self._ensure_accumulating()
        cfg = self.config
        if not (0 <= x < cfg.source_width and 0 <= y < cfg.source_height):
            raise FrameStateError(
                f"Sample ({x}, {y}) outside source {cfg.source_width}x{cfg.source_height}"
            )
        self.block(y // cfg.block_height, x // cfg.block_width).accumulate(sample)
        self._samples += 1

    def accumulate_image(self, image: NDArray[np.uint8]) -> None:
        """Accumulate a whole ``(source_height, source_width, 3)`` image at once.

        Same result as calling ``accumulate_sample`` for every pixel.
        """
        self._ensure_accumulating()
        cfg = self.config
        expected = (cfg.source_height, cfg.source_width, 3)
        if image.shape != expected:
            raise FrameStateError(f"Image shape {image.shape} does not match source {expected}")

        blocks = image.reshape(
            cfg.grid_height, cfg.block_height, cfg.grid_width, cfg.block_width, 3
        )
        self._sums += blocks.sum(axis=(1, 3), dtype=ACCUMULATOR_DTYPE)
        self._samples += cfg.source_width * cfg.source_height

    def finalize_averages(self) -> Frame:
        """Divide every cell by the block area and return the averaged frame.

        This is ``PixelBlock.average(block_area)`` applied to every cell at
        once with numpy floor division.
        """
        self._ensure_accumulating()
        cfg = self.config
        expected = cfg.source_width * cfg.source_height
        if self._samples != expected:
            raise FrameStateError(
                f"Cannot finalize after {self._samples} samples; a full frame is {expected}"
            )
        self._sums //= cfg.block_area
        self._finalized = True
        return Frame(self._sums)

    def _ensure_accumulating(self) -> None:
        if self._finalized:
            raise FrameStateError("Grid already finalized; reset() it before the next frame")
