"""Media inspection with ffprobe's default section writer.

ffprobe's default output is a flat ``key=value`` dump split into
sections::

    [STREAM]
    index=0
    codec_name=h264
    [/STREAM]
    [FORMAT]
    duration=12.300000
    [/FORMAT]
"""

import logging
from typing import Optional, Union

from pydantic import BaseModel, Field

from ..config import RunnerConfig, get_config
from ..errors import ProbeParseError
from ..executor.process_runner import ArgvProcessRunner, CommandResult

logger = logging.getLogger("ffmpeg_tools")

FORMAT_MARKER = "[FORMAT]"
STREAM_MARKER = "[STREAM]"

PARSE_ERROR_MESSAGE = "Failed to parse ffprobe output"


class ProbeResult(BaseModel):
    """Parsed inspection output.

    Key order within each section and the order of ``[STREAM]`` sections
    follow the input.
    """
    format: dict[str, str] = Field(default_factory=dict)
    streams: list[dict[str, str]] = Field(default_factory=list)


class ProbeError(BaseModel):
    """Returned instead of a ProbeResult when the output cannot be parsed."""
    error: str


def _parse_lines(raw_text: str) -> ProbeResult:
    if not isinstance(raw_text, str):
        raise ProbeParseError(f"Expected text, got {type(raw_text).__name__}")

    result = ProbeResult()
    current_stream: dict[str, str] = {}
    in_stream = False

    for line in raw_text.split("\n"):
        if line.startswith(FORMAT_MARKER):
            in_stream = False
        elif line.startswith(STREAM_MARKER):
            if current_stream:
                result.streams.append(current_stream)
            current_stream = {}
            in_stream = True
        elif "=" in line:
            key, _, value = line.partition("=")
            if in_stream:
                current_stream[key.strip()] = value.strip()
            else:
                result.format[key.strip()] = value.strip()

    if current_stream:
        result.streams.append(current_stream)

    return result


def parse_probe_output(raw_text: str) -> Union[ProbeResult, ProbeError]:
    """Parse ffprobe's sectioned ``key=value`` output.

    Lines that are neither section markers nor ``key=value`` pairs are
    ignored, so closing markers and unexpected output are harmless.
    This function never raises.

    Args:
        raw_text: Raw ffprobe output.

    Returns:
        ProbeResult, or ProbeError if the input could not be interpreted.
    """
    try:
        return _parse_lines(raw_text)
    except Exception as e:
        logger.warning("%s: %s", PARSE_ERROR_MESSAGE, e)
        return ProbeError(error=PARSE_ERROR_MESSAGE)


class MediaProber:
    """Runs ffprobe on a file in the working directory and parses the output."""

    PROBE_ARGS = ["-v", "quiet", "-show_format", "-show_streams"]

    def __init__(
        self,
        config: Optional[RunnerConfig] = None,
        runner: Optional[ArgvProcessRunner] = None,
    ):
        self.config = config or get_config()
        self.runner = runner or ArgvProcessRunner(self.config)

    async def probe(
        self,
        filename: str,
        working_dir: Optional[str] = None,
    ) -> tuple[CommandResult, Optional[Union[ProbeResult, ProbeError]]]:
        """Inspect ``filename``.

        Returns:
            The raw command result and, when ffprobe succeeded, the parsed
            output (``None`` otherwise).
        """
        result = await self.runner.run_ffprobe([*self.PROBE_ARGS, filename], working_dir)
        if not result.success:
            return result, None
        return result, parse_probe_output(result.output)
