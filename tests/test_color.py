import numpy as np
import pytest

from termcam.errors import FrameStateError
from termcam.frame.color import Color, PixelBlock


def test_accumulate_then_average_floors_each_channel() -> None:
    block = PixelBlock()
    block.accumulate(Color(1, 2, 3))
    block.accumulate((2, 2, 2))

    assert block.color == Color(3, 4, 5)
    assert block.average(2) == Color(1, 2, 2)
    # averaging replaces the sum
    assert block.color == Color(1, 2, 2)


def test_reset_zeroes_all_channels() -> None:
    block = PixelBlock()
    block.accumulate(Color(9, 8, 7))
    block.reset()
    assert block.color == Color(0, 0, 0)


def test_average_rejects_non_positive_counts() -> None:
    block = PixelBlock()
    with pytest.raises(FrameStateError):
        block.average(0)
    with pytest.raises(FrameStateError):
        block.average(-3)


def test_block_writes_through_to_shared_storage() -> None:
    storage = np.zeros((2, 3), dtype=np.int64)
    block = PixelBlock(storage[1])
    block.accumulate(Color(4, 5, 6))

    assert storage.tolist() == [[0, 0, 0], [4, 5, 6]]


def test_full_saturated_block_does_not_overflow() -> None:
    block = PixelBlock()
    samples = 640 * 480
    block.accumulate(Color(255 * samples, 255 * samples, 255 * samples))
    assert block.average(samples) == Color(255, 255, 255)


def test_rejects_storage_that_is_not_three_channels() -> None:
    with pytest.raises(ValueError):
        PixelBlock(np.zeros(4, dtype=np.int64))
