from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class CaptureConfig(BaseModel):
    """Configuration values for the capture source."""
    backend: Literal["fswebcam", "opencv", "file"] = Field(default="fswebcam", description="How raw images are obtained: the fswebcam utility, an OpenCV VideoCapture, or a still image file.")
    device: str = Field(default="/dev/video0", description="Video device passed to fswebcam.")
    camera_index: int = Field(default=0, ge=0, description="The index of the camera opened by the OpenCV backend.")
    capture_width: int = Field(default=640, gt=0, description="Horizontal resolution requested from the camera.")
    capture_height: int = Field(default=480, gt=0, description="Vertical resolution requested from the camera.")
    jpeg_quality: int = Field(default=85, ge=0, le=100, description="JPEG quality of the intermediate fswebcam shot.")
    temp_dir: str = Field(default="temp", description="Directory holding the intermediate fswebcam shot.")
    image_path: str | None = Field(default=None, description="Still image used by the file backend.")
    timeout_seconds: float = Field(default=10.0, gt=0.0, description="Longest time a single fswebcam invocation may take.")
