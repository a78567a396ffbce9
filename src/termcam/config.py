"""
Termcam configuration - configuration models and YAML loading.

The top-level ``TermcamConfig`` groups the grid geometry, the capture source
settings and the playback/recording limits. Every value has a default that
reproduces the classic 640x460 source averaged into 5x10 blocks, so a config
file is only needed to change something.
"""

from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError
import yaml

from .capture.capture_config import CaptureConfig
from .errors import ConfigurationError
from .frame.grid import GridConfig

DEFAULT_CONFIG_PATH = Path("termcam_config.yaml")


class TermcamConfig(BaseModel):
    """
    Main configuration model for termcam.

    Attributes:
        grid (GridConfig): Source size and block size of the downsampling grid
        capture (CaptureConfig): Which capture backend to use and how to drive it
        records_dir (str): Directory recordings are written to and played from
        mirror (bool): Render columns right to left
        playback_interval_seconds (float): Pause before each replayed frame
        max_record_frames (int): Largest frame count a recording may request
        log_level (str): Minimum loguru level written to stderr

    Notes:
        - The record format carries no dimensions, so a recording only plays
          back correctly under the grid it was recorded with
    """

    grid: GridConfig = Field(default_factory=GridConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    records_dir: str = "records"
    mirror: bool = True
    playback_interval_seconds: float = Field(default=0.5, gt=0.0)
    max_record_frames: int = Field(default=500, ge=0)
    log_level: str = "WARNING"

    @classmethod
    def from_yaml(
        cls,
        path: str | Path,
        key_to_config: tuple[str, ...] = ("Termcam",),
    ) -> "TermcamConfig":
        """
        Load a TermcamConfig from a YAML file.

        Parameters:
            path (str | Path): Path to the YAML configuration file
            key_to_config (tuple[str, ...], optional): Keys to follow to reach
                the termcam section. Defaults to ("Termcam",).

        Returns:
            TermcamConfig: The validated configuration

        Raises:
            ConfigurationError: If the file cannot be read, is not valid YAML,
                lacks one of the keys or fails validation

        Example:
            >>> # termcam_config.yaml:
            >>> # Termcam:
            >>> #   mirror: false
            >>> #   grid:
            >>> #     block_width: 10
            >>> config = TermcamConfig.from_yaml("termcam_config.yaml")
        """
        path = Path(path)

        try:
            # Try different encodings to handle various file formats
            for encoding in ["utf-8", "utf-8-sig"]:
                try:
                    data = yaml.safe_load(path.read_text(encoding=encoding))
                    break
                except UnicodeDecodeError:
                    if encoding == "utf-8-sig":
                        raise
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as ex:
            raise ConfigurationError(f"Cannot read configuration file {path}: {ex}") from ex

        config = data
        for key in key_to_config:
            if not isinstance(config, dict) or key not in config:
                raise ConfigurationError(f"Configuration file {path} has no '{key}' section")
            config = config[key]

        try:
            return cls.model_validate(config or {})
        except ValidationError as ex:
            raise ConfigurationError(f"Invalid configuration in {path}: {ex}") from ex

    @classmethod
    def load(cls, path: str | Path | None = None) -> "TermcamConfig":
        """Load ``path``, else ``termcam_config.yaml`` if present, else defaults."""
        if path is not None:
            return cls.from_yaml(path)
        if DEFAULT_CONFIG_PATH.is_file():
            logger.debug("Config: Using {}.", DEFAULT_CONFIG_PATH)
            return cls.from_yaml(DEFAULT_CONFIG_PATH)
        return cls()
