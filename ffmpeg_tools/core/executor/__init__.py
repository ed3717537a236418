"""External process execution modules."""

from .capture import CaptureSession, CaptureStopResult, get_capture_session
from .command_policy import inject_overwrite_flag, validate_command
from .process_runner import ArgvProcessRunner, CommandResult, ShellCommandRunner

__all__ = [
    "ArgvProcessRunner",
    "CaptureSession",
    "CaptureStopResult",
    "CommandResult",
    "ShellCommandRunner",
    "get_capture_session",
    "inject_overwrite_flag",
    "validate_command",
]
