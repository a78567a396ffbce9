"""Still-image capture source."""

from __future__ import annotations

from pathlib import Path

import cv2
from loguru import logger
import numpy as np
from numpy.typing import NDArray

from ..errors import CaptureError
from .base import CaptureSource


def load_rgb_image(path: str | Path) -> NDArray[np.uint8]:
    """Decode an image file into an RGB array, raising ``CaptureError`` on failure."""
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise CaptureError(f"Unable to decode image {path}")
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


class ImageFileCapture(CaptureSource):
    """Returns the same image file, decoded afresh, on every grab."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def grab(self) -> NDArray[np.uint8]:
        if not self.path.is_file():
            raise CaptureError(f"Image file {self.path} does not exist")
        image = load_rgb_image(self.path)
        logger.debug("ImageFileCapture: Loaded {} ({}x{}).", self.path, image.shape[1], image.shape[0])
        return image
