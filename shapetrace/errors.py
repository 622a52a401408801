"""Error types raised by the shape detection pipeline and its collaborators."""

from typing import Optional


class ShapetraceError(Exception):
    """Base class for every error surfaced to callers."""


class IoError(ShapetraceError):
    """A file could not be read or written."""


class DecodeError(ShapetraceError):
    """A raster (or map file) is corrupt or uses an unsupported layout."""


class ConfigError(ShapetraceError):
    """Configuration values are invalid or the config file is unreadable."""


class ProcessingError(ShapetraceError):
    """
    A geometric stage failed.

    `stage` names the failing stage: grayscale, edges, contours,
    approximate or render.
    """

    def __init__(self, stage: str, message: Optional[str] = None):
        self.stage = stage
        self.message = message or "stage failed"
        super().__init__(f"[{stage}] {self.message}")
