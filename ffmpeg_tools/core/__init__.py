"""
ffmpeg-tools core

Process execution, capture lifecycle, ffprobe parsing and upload storage
shared by the media tools.
"""

from .config import RunnerConfig, get_config, load_config, set_config
from .executor.capture import CaptureSession, get_capture_session
from .executor.process_runner import ArgvProcessRunner, CommandResult, ShellCommandRunner
from .uploads import UploadStore
from .video.probe import MediaProber, ProbeError, ProbeResult, parse_probe_output

__all__ = [
    "ArgvProcessRunner",
    "CaptureSession",
    "CommandResult",
    "MediaProber",
    "ProbeError",
    "ProbeResult",
    "RunnerConfig",
    "ShellCommandRunner",
    "UploadStore",
    "get_capture_session",
    "get_config",
    "load_config",
    "parse_probe_output",
    "set_config",
]
