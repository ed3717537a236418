"""Error types for media tool execution."""

from typing import Optional


class MediaToolError(Exception):
    """Base error for ffmpeg-tools."""


class ValidationError(MediaToolError):
    """Raised when input is rejected before any process is spawned."""


class SpawnError(MediaToolError):
    """Raised when an external executable cannot be launched."""


class ExecutionError(MediaToolError):
    """Raised when an external process exits with a nonzero status."""

    def __init__(self, message: str, return_code: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.return_code = return_code
        self.output = output


class CommandTimeoutError(MediaToolError):
    """Raised when an external process exceeds the time bound."""


class ProbeParseError(MediaToolError):
    """Raised when inspection output cannot be interpreted."""
