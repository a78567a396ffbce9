"""Capture sources that supply raw images to the frame pipeline."""

from ..errors import ConfigurationError
from .base import CaptureSource
from .capture_config import CaptureConfig
from .fswebcam import FswebcamCapture
from .image_file import ImageFileCapture, load_rgb_image
from .opencv_camera import OpenCVCapture

__all__ = [
    "CaptureConfig",
    "CaptureSource",
    "FswebcamCapture",
    "ImageFileCapture",
    "OpenCVCapture",
    "create_capture_source",
    "load_rgb_image",
]


def create_capture_source(config: CaptureConfig) -> CaptureSource:
    """Build the capture source selected by ``config.backend``."""
    if config.backend == "fswebcam":
        return FswebcamCapture(config)
    if config.backend == "opencv":
        return OpenCVCapture(config)
    if config.image_path is None:
        raise ConfigurationError("The file capture backend needs capture.image_path")
    return ImageFileCapture(config.image_path)
