"""Filesystem access for recordings."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from loguru import logger

from .errors import ResourceError


class RecordStore:
    """Opens recordings by name inside a single records directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, filename: str) -> Path:
        return self.root / filename

    def open_for_writing(self, filename: str) -> TextIO:
        """Create (or truncate) a recording, creating the directory if needed."""
        path = self.path_for(filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handle = path.open("w", encoding="ascii", newline="\n")
        except OSError as ex:
            raise ResourceError(f"Cannot create record file {path}: {ex.strerror or ex}") from ex
        logger.debug("RecordStore: Opened {} for writing.", path)
        return handle

    def open_for_reading(self, filename: str) -> TextIO:
        path = self.path_for(filename)
        try:
            handle = path.open("r", encoding="ascii", errors="replace")
        except OSError as ex:
            raise ResourceError(f"File doesn't exist or cannot be opened: {path}") from ex
        logger.debug("RecordStore: Opened {} for reading.", path)
        return handle
