"""Capture source backed by an OpenCV VideoCapture."""

from __future__ import annotations

import cv2
from loguru import logger
import numpy as np
from numpy.typing import NDArray

from ..errors import CaptureError
from .base import CaptureSource
from .capture_config import CaptureConfig


class OpenCVCapture(CaptureSource):
    """Keeps the camera open between grabs and reads one frame per call."""

    def __init__(self, config: CaptureConfig) -> None:
        """Initialize the OpenCV capture source.

        Args:
            config: Capture settings; ``camera_index`` picks the device and
                ``capture_width``/``capture_height`` the requested resolution
        """
        self.config = config
        self._capture: cv2.VideoCapture | None = None

    def _ensure_capture(self) -> cv2.VideoCapture:
        """Ensure camera capture is open."""
        if self._capture is not None and self._capture.isOpened():
            return self._capture

        if self._capture is not None:
            self._capture.release()

        self._capture = cv2.VideoCapture(self.config.camera_index)
        if not self._capture.isOpened():
            raise CaptureError(f"Unable to open camera {self.config.camera_index}")

        self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.capture_width)
        self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.capture_height)
        logger.info("OpenCVCapture: Camera {} opened.", self.config.camera_index)
        return self._capture

    def grab(self) -> NDArray[np.uint8]:
        capture = self._ensure_capture()
        ret, frame = capture.read()
        if not ret or frame is None:
            raise CaptureError(f"Failed to read a frame from camera {self.config.camera_index}")
        return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("OpenCVCapture: Camera {} released.", self.config.camera_index)
