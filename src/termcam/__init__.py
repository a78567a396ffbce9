"""termcam - webcam frames downsampled to colored blocks in the terminal."""

from .config import TermcamConfig
from .pipeline import Pipeline, capture_frame

__version__ = "0.1.0"
__all__ = ["Pipeline", "TermcamConfig", "capture_frame"]
