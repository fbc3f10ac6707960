from pathlib import Path
from typing import Optional


class CompressVidsError(Exception):
    """Base class for all errors raised by compress-vids."""


class StartupArgumentError(CompressVidsError):
    """Invalid mode or missing patterns; raised before any work starts."""


class PatternExpansionError(CompressVidsError):
    """A path pattern could not be expanded into a file list."""


class ProbeError(CompressVidsError):
    """ffprobe failed or returned output that does not match the expected schema."""


class MissingVideoStreamError(CompressVidsError):
    """The probed file carries no video stream."""


class FileAccessError(CompressVidsError):
    """A listed file vanished or became unreadable before it was processed."""


class EncodeError(CompressVidsError):
    """ffmpeg exited non-zero or could not be launched."""

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code


class ReplaceError(CompressVidsError):
    """Renaming the encoded temp file over the original failed.

    The encoded output is left at ``temp_path`` for the operator to recover.
    """

    def __init__(self, message: str, temp_path: Path):
        super().__init__(message)
        self.temp_path = temp_path
