"""Color values and the per-block channel accumulator."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from ..errors import FrameStateError

# Wide enough for any block that fits in a 640x480 source: 640 * 480 * 255 < 2**63.
ACCUMULATOR_DTYPE = np.int64


class Color(NamedTuple):
    """An RGB triple of non-negative integer channel values."""

    r: int
    g: int
    b: int


class PixelBlock:
    """Running sum of the samples of one block, reducible to their mean.

    A block either wraps a 3-element slice of a larger accumulator array
    (that is how FrameGrid hands out its cells) or owns its own storage.
    """

    def __init__(self, sums: NDArray[np.int64] | None = None) -> None:
        if sums is None:
            sums = np.zeros(3, dtype=ACCUMULATOR_DTYPE)
        if sums.shape != (3,):
            raise ValueError(f"PixelBlock needs 3 channels, got shape {sums.shape}")
        self._sums = sums

    def reset(self) -> None:
        self._sums[:] = 0

    def accumulate(self, sample: Color | tuple[int, int, int]) -> None:
        self._sums += np.asarray(sample, dtype=ACCUMULATOR_DTYPE)

    def average(self, n: int) -> Color:
        """Replace the running sum with its floor mean over ``n`` samples.

        This is destructive: the sum is gone afterwards, so call it once
        per block, after all ``n`` samples have been accumulated.
        """
        if n <= 0:
            raise FrameStateError(f"Cannot average over {n} samples")
        self._sums //= n
        return self.color

    @property
    def color(self) -> Color:
        r, g, b = (int(v) for v in self._sums)
        return Color(r, g, b)
