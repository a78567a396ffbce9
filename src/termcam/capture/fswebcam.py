"""Capture source that shells out to the fswebcam utility."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import subprocess
from typing import Any

from loguru import logger
import numpy as np
from numpy.typing import NDArray

from ..errors import CaptureError
from .base import CaptureSource
from .capture_config import CaptureConfig
from .image_file import load_rgb_image

SHOT_NAME = "web-cam-shot.jpg"


class FswebcamCapture(CaptureSource):
    """Takes a JPEG with fswebcam, decodes it, then deletes it.

    Each grab blocks for as long as fswebcam takes, which dominates the
    frame rate of a live stream.
    """

    def __init__(
        self,
        config: CaptureConfig,
        run: Callable[..., Any] = subprocess.run,
    ) -> None:
        self.config = config
        self._run = run

    def command(self, shot: Path) -> list[str]:
        cfg = self.config
        return [
            "fswebcam",
            "-r", f"{cfg.capture_width}x{cfg.capture_height}",
            "--jpeg", str(cfg.jpeg_quality),
            "-d", cfg.device,
            "-D", "0",
            str(shot),
            "--quiet",
        ]

    def grab(self) -> NDArray[np.uint8]:
        temp_dir = Path(self.config.temp_dir)
        try:
            temp_dir.mkdir(parents=True, exist_ok=True)
        except OSError as ex:
            raise CaptureError(f"Cannot create temp dir {temp_dir}: {ex}") from ex
        shot = temp_dir / SHOT_NAME

        try:
            self._run(
                self.command(shot),
                check=True,
                capture_output=True,
                text=True,
                timeout=self.config.timeout_seconds,
            )
        except FileNotFoundError as ex:
            raise CaptureError("fswebcam is not installed or not on PATH") from ex
        except subprocess.CalledProcessError as ex:
            detail = (ex.stderr or "").strip() or f"exit status {ex.returncode}"
            raise CaptureError(f"fswebcam failed on {self.config.device}: {detail}") from ex
        except subprocess.TimeoutExpired as ex:
            raise CaptureError(
                f"fswebcam did not finish within {self.config.timeout_seconds:.1f}s"
            ) from ex

        try:
            if not shot.is_file():
                raise CaptureError(f"fswebcam produced no image at {shot}")
            image = load_rgb_image(shot)
        finally:
            shot.unlink(missing_ok=True)

        logger.debug("FswebcamCapture: Captured {}x{} from {}.", image.shape[1], image.shape[0], self.config.device)
        return image
