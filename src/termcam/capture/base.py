"""The boundary between the frame pipeline and whatever produces images."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

import numpy as np
from numpy.typing import NDArray


class CaptureSource(ABC):
    """Produces one raw RGB image per call.

    Images are uint8 arrays of shape ``(height, width, 3)``, row-major with
    the origin at the top-left corner.
    """

    @abstractmethod
    def grab(self) -> NDArray[np.uint8]:
        """Capture one image, raising ``CaptureError`` if that is impossible."""

    def close(self) -> None:
        """Release any device held by the source."""

    def __enter__(self) -> "CaptureSource":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
