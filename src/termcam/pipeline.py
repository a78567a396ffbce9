"""Frame pipeline: capture -> downsample -> render, record or replay."""

from __future__ import annotations

from collections.abc import Callable
import time

from loguru import logger
import numpy as np
from numpy.typing import NDArray

from .capture.base import CaptureSource
from .config import TermcamConfig
from .errors import CaptureError, ConfigurationError, ResourceError
from .frame.grid import Frame, FrameGrid, GridConfig
from .frame.record import RecordReader, write_frame
from .frame.render import AnsiRenderer
from .storage import RecordStore


def crop_to_source(image: NDArray[np.uint8], config: GridConfig) -> NDArray[np.uint8]:
    """Return the top-left ``source_height x source_width`` region of ``image``."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
        raise CaptureError(f"Expected an 8-bit RGB image, got {image.dtype} with shape {image.shape}")
    height, width = image.shape[:2]
    if height < config.source_height or width < config.source_width:
        raise CaptureError(
            f"Captured image is {width}x{height}, smaller than the "
            f"{config.source_width}x{config.source_height} source"
        )
    return image[: config.source_height, : config.source_width]


def capture_frame(grid: FrameGrid, source: CaptureSource) -> Frame:
    """Grab one image from ``source`` and downsample it through ``grid``.

    The grid is reset before accumulation, so whatever it held before is
    discarded. Capture failures propagate before the grid is touched.
    """
    image = crop_to_source(source.grab(), grid.config)
    grid.reset()
    grid.accumulate_image(image)
    return grid.finalize_averages()


class Pipeline:
    """Drives the stream, record and play loops.

    All environment access goes through the injected collaborators: the
    capture source, the renderer's terminal sink, the record store and the
    ``sleep`` callable used to pace playback.
    """

    def __init__(
        self,
        config: TermcamConfig,
        renderer: AnsiRenderer,
        store: RecordStore,
        source: CaptureSource | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.store = store
        self.source = source
        self._sleep = sleep
        self.grid = FrameGrid(config.grid)

    def _require_source(self) -> CaptureSource:
        if self.source is None:
            raise ConfigurationError("No capture source configured")
        return self.source

    def next_frame(self) -> Frame:
        return capture_frame(self.grid, self._require_source())

    def stream(self, max_frames: int | None = None) -> int:
        """Capture and render until interrupted, or ``max_frames`` frames."""
        self._require_source()
        logger.info("Pipeline: Streaming {}x{} grid.", self.config.grid.grid_width, self.config.grid.grid_height)
        shown = 0
        while max_frames is None or shown < max_frames:
            frame = self.next_frame()
            self.renderer.display(frame)
            shown += 1
            logger.debug("Pipeline: Streamed frame {}.", shown)
        return shown

    def validate_frame_count(self, frames: int) -> None:
        if frames < 0:
            raise ConfigurationError("Number of frames must be a non-negative integer")
        if frames > self.config.max_record_frames:
            raise ConfigurationError(
                f"Number of frames {frames} exceeds the maximum of {self.config.max_record_frames}"
            )

    def record(self, frames: int, filename: str) -> int:
        """Capture, persist and render exactly ``frames`` frames to ``filename``.

        The frame count is validated and the first frame captured before the
        record file is created, so a missing camera leaves an existing
        recording of the same name intact. Each frame is flushed as soon as it
        is written, so an interrupted recording keeps every complete frame.
        """
        self.validate_frame_count(frames)
        self._require_source()
        path = self.store.path_for(filename)

        frame = self.next_frame() if frames else None
        try:
            with self.store.open_for_writing(filename) as handle:
                logger.info("Pipeline: Recording {} frames to {}.", frames, path)
                for index in range(frames):
                    if index:
                        frame = self.next_frame()
                    write_frame(handle, frame)
                    handle.flush()
                    self.renderer.display(frame)
                    logger.debug("Pipeline: Recorded frame {}/{}.", index + 1, frames)
        except OSError as ex:
            raise ResourceError(f"Cannot write record file {path}: {ex.strerror or ex}") from ex

        logger.success("Pipeline: Recorded {} frames to {}.", frames, path)
        return frames

    def play(self, filename: str) -> int:
        """Replay ``filename``, pausing ``playback_interval_seconds`` before each frame.

        Playback stops at the first incomplete or unreadable frame.
        """
        path = self.store.path_for(filename)
        played = 0
        try:
            with self.store.open_for_reading(filename) as handle:
                reader = RecordReader(handle, self.config.grid)
                for frame in reader:
                    self._sleep(self.config.playback_interval_seconds)
                    self.renderer.display(frame)
                    played += 1
                    logger.debug("Pipeline: Played frame {}.", played)
        except OSError as ex:
            raise ResourceError(f"Cannot read record file {path}: {ex.strerror or ex}") from ex

        logger.info("Pipeline: Played {} frames from {}.", played, path)
        return played
