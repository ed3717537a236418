"""Media tool implementations.

Each tool turns structured parameters into an ffmpeg/ffprobe invocation
and returns a result envelope::

    {"success": bool, "message": str, "output": ..., "output_file": ..., "error": ...}

Keys whose value is ``None`` are left out.  Tools never raise.
"""

import asyncio
import functools
import logging
import tempfile
from pathlib import Path
from typing import Any, Optional

from ..core.config import RunnerConfig, get_config
from ..core.errors import ValidationError
from ..core.executor.capture import CaptureSession, get_capture_session
from ..core.executor.command_policy import inject_overwrite_flag, validate_command
from ..core.executor.process_runner import (
    ArgvProcessRunner,
    CommandResult,
    ShellCommandRunner,
)
from ..core.sanitize import escape_concat_path
from ..core.uploads import UploadStore
from ..core.video.probe import MediaProber, ProbeError

logger = logging.getLogger("ffmpeg_tools")

GIF_PALETTE_PREFIX = "palette_"
CONCAT_LIST_PREFIX = "filelist_"

STREAM_MAPS = {
    "video": "0:v:0",
    "audio": "0:a:0",
    "subtitle": "0:s:0",
}

BATCH_OPERATIONS = {
    "convert": lambda f: ["-i", f, "-c:v", "libx264", "-preset", "medium", f"converted_{f}"],
    "resize": lambda f: ["-i", f, "-vf", "scale=1280:720", f"resized_{f}"],
}


def _envelope(**fields: Any) -> dict:
    return {k: v for k, v in fields.items() if v is not None}


def _from_result(
    result: CommandResult,
    success_message: str,
    failure_message: str,
    output_file: Optional[str] = None,
) -> dict:
    return _envelope(
        success=result.success,
        message=success_message if result.success else failure_message,
        output=result.output,
        output_file=output_file if result.success else None,
        error=result.error,
    )


def _format_number(value: float) -> str:
    """Render a float the way it reads in a filter string (``2`` not ``2.0``)."""
    return str(int(value)) if value.is_integer() else repr(value)


def tool_boundary(failure_message: str):
    """Convert any exception raised by a tool into a failure envelope."""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except ValidationError as e:
                return _envelope(success=False, message=failure_message, error=str(e))
            except Exception as e:
                logger.exception("%s", failure_message)
                return _envelope(
                    success=False,
                    message=failure_message,
                    error=str(e) or type(e).__name__,
                )
        return wrapper
    return decorator


class MediaTools:
    """The media processing operations exposed to callers."""

    def __init__(
        self,
        config: Optional[RunnerConfig] = None,
        runner: Optional[ArgvProcessRunner] = None,
        shell: Optional[ShellCommandRunner] = None,
        capture: Optional[CaptureSession] = None,
        uploads: Optional[UploadStore] = None,
    ):
        self.config = config or get_config()
        self.runner = runner or ArgvProcessRunner(self.config)
        self.shell = shell or ShellCommandRunner(self.config)
        if capture is None:
            # The shared session is bound to the global config.
            capture = get_capture_session() if self.config is get_config() else CaptureSession(self.config)
        self.capture = capture
        self.uploads = uploads or UploadStore(self.config)
        self.prober = MediaProber(self.config, self.runner)

    def _scratch_file(self, prefix: str, suffix: str) -> Path:
        """Reserve a uniquely named file in the upload directory."""
        with tempfile.NamedTemporaryFile(
            dir=self.config.ensure_upload_dir(), prefix=prefix, suffix=suffix, delete=False
        ) as tmp:
            return Path(tmp.name)

    # ------------------------------------------------------------------
    # Files and free-form commands
    # ------------------------------------------------------------------

    @tool_boundary("Failed to upload file")
    async def upload_file(
        self,
        filename: str,
        content: str,
        mime_type: Optional[str] = None,
    ) -> dict:
        """Store a base64 encoded upload in the working directory."""
        saved = self.uploads.save_file(filename, content)
        return _envelope(
            success=True,
            message=f"File {filename} uploaded successfully as {saved}",
            filename=saved,
            mime_type=mime_type,
        )

    @tool_boundary("Failed to execute command")
    async def execute_command(
        self,
        command: str,
        input_file: Optional[str] = None,
        output_file: Optional[str] = None,
        working_directory: Optional[str] = None,
    ) -> dict:
        """Run a free-form ffmpeg or ffprobe command line."""
        try:
            command = validate_command(command, self.config)
        except ValidationError as e:
            return _envelope(success=False, message=str(e), error="Invalid command")

        command = inject_overwrite_flag(command, self.config)
        result = await self.shell.run(command, working_directory)
        return _envelope(
            success=result.success,
            message="Command executed successfully" if result.success else "Command failed",
            output=result.output,
            output_file=output_file,
            error=result.error,
        )

    # ------------------------------------------------------------------
    # Single-file operations
    # ------------------------------------------------------------------

    @tool_boundary("Failed to trim video")
    async def trim_video(self, input_filename: str, start: str, end: str) -> dict:
        """Cut ``input_filename`` to the ``start``..``end`` range without re-encoding."""
        output_filename = f"trimmed_{input_filename}"
        args = [
            "-i", input_filename,
            "-ss", start,
            "-to", end,
            "-c", "copy",
            output_filename,
        ]
        result = await self.runner.run_ffmpeg(args)
        return _from_result(
            result, "Video trimmed successfully", "Failed to trim video", output_filename
        )

    @tool_boundary("Failed to change frame rate")
    async def change_frame_rate(self, input_filename: str, frame_rate: str) -> dict:
        output_filename = f"fps_{frame_rate}_{input_filename}"
        args = [
            "-i", input_filename,
            "-r", str(frame_rate),
            "-c:v", "libx264",
            "-preset", "medium",
            output_filename,
        ]
        result = await self.runner.run_ffmpeg(args)
        return _from_result(
            result,
            "Frame rate changed successfully",
            "Failed to change frame rate",
            output_filename,
        )

    @tool_boundary("Failed to convert video")
    async def convert_to_gif_webp(
        self,
        input_filename: str,
        start_time: str,
        duration: str,
        format: str,
        scale_height: int,
        fps: int,
    ) -> dict:
        """Convert a clip to an animated GIF or WebP.

        GIFs are produced in two passes: a palette is generated first,
        then applied with ``paletteuse`` for better colour fidelity.
        """
        if format not in ("gif", "webp"):
            raise ValidationError(f"Unsupported format: {format}. Use gif or webp")

        output_filename = f"converted_{input_filename}.{format}"

        if format == "gif":
            palette = self._scratch_file(GIF_PALETTE_PREFIX, ".png")
            try:
                palette_args = [
                    "-i", input_filename,
                    "-ss", start_time,
                    "-t", duration,
                    "-vf", f"fps={fps},scale=-1:{scale_height}:flags=lanczos,palettegen",
                    "-y", palette.name,
                ]
                palette_result = await self.runner.run_ffmpeg(palette_args)
                if not palette_result.success:
                    return _envelope(
                        success=False,
                        message="Failed to generate palette",
                        output=palette_result.output,
                        error=palette_result.error,
                    )

                args = [
                    "-i", input_filename,
                    "-i", palette.name,
                    "-ss", start_time,
                    "-t", duration,
                    "-filter_complex",
                    f"fps={fps},scale=-1:{scale_height}:flags=lanczos[x];[x][1:v]paletteuse",
                    "-y", output_filename,
                ]
                result = await self.runner.run_ffmpeg(args)
            finally:
                palette.unlink(missing_ok=True)
        else:
            args = [
                "-i", input_filename,
                "-ss", start_time,
                "-t", duration,
                "-vf", f"fps={fps},scale=-1:{scale_height}",
                "-c:v", "libwebp",
                "-quality", "80",
                "-y", output_filename,
            ]
            result = await self.runner.run_ffmpeg(args)

        return _from_result(
            result,
            f"Converted to {format} successfully",
            f"Failed to convert to {format}",
            output_filename,
        )

    @tool_boundary("Failed to analyze media")
    async def analyze_media(self, input_filename: str) -> dict:
        """Report format and stream properties using ffprobe."""
        result, analysis = await self.prober.probe(input_filename)
        if not result.success:
            return _envelope(
                success=False,
                message="Failed to analyze media",
                output=result.output,
                error=result.error,
            )
        if isinstance(analysis, ProbeError):
            return _envelope(
                success=False,
                message="Failed to parse media analysis",
                output=result.output,
                error=analysis.error,
            )
        return _envelope(
            success=True,
            message="Media analysis completed",
            analysis=analysis.model_dump(),
            output=result.output,
        )

    @tool_boundary("Failed to extract bitstream")
    async def extract_bitstream(self, input_filename: str, stream_type: str) -> dict:
        stream_map = STREAM_MAPS.get(stream_type)
        if stream_map is None:
            return _envelope(
                success=False,
                message="Invalid stream type",
                error="Stream type must be video, audio, or subtitle",
            )

        output_filename = f"extracted_{stream_type}_{input_filename}"
        args = ["-i", input_filename, "-map", stream_map, "-c", "copy", output_filename]
        result = await self.runner.run_ffmpeg(args)
        return _from_result(
            result,
            "Bitstream extracted successfully",
            "Failed to extract bitstream",
            output_filename,
        )

    @tool_boundary("Failed to change speed")
    async def change_speed(self, input_filename: str, speed: str) -> dict:
        """Change playback speed; ``speed`` is a multiplier such as ``"2.0"``."""
        try:
            factor = float(speed)
        except (TypeError, ValueError):
            raise ValidationError(f"Speed must be a number, got {speed!r}")
        if factor <= 0:
            raise ValidationError("Speed must be greater than zero")

        output_filename = f"speed_{speed}x_{input_filename}"
        args = [
            "-i", input_filename,
            "-filter:v", f"setpts={_format_number(1 / factor)}*PTS",
            "-filter:a", f"atempo={speed}",
            "-c:v", "libx264",
            "-c:a", "aac",
            output_filename,
        ]
        result = await self.runner.run_ffmpeg(args)
        return _from_result(
            result, "Speed changed successfully", "Failed to change speed", output_filename
        )

    @tool_boundary("Failed to generate thumbnails")
    async def generate_thumbnails(
        self,
        input_filename: str,
        timestamp: str,
        cols: int = 1,
        rows: int = 1,
        multiple_sheets: bool = False,
        interval: str = "1",
        duration: str = "00:00:10",
    ) -> dict:
        """Grab a single thumbnail, or tile frames every ``interval`` into sheets."""
        if multiple_sheets:
            output_filename = f"thumbnails_{input_filename}_%d.jpg"
            args = [
                "-i", input_filename,
                "-ss", timestamp,
                "-t", duration,
                "-vf", f"fps=1/{interval},scale=320:240,tile={cols}x{rows}",
                "-y", output_filename,
            ]
        else:
            output_filename = f"thumbnail_{input_filename}.jpg"
            args = [
                "-i", input_filename,
                "-ss", timestamp,
                "-vframes", "1",
                "-vf", "scale=320:240",
                "-y", output_filename,
            ]

        result = await self.runner.run_ffmpeg(args)
        return _from_result(
            result,
            "Thumbnails generated successfully",
            "Failed to generate thumbnails",
            output_filename,
        )

    @tool_boundary("Failed to resize video")
    async def resize_video(
        self,
        input_filename: str,
        resolution: str,
        custom_width: Optional[str] = None,
        custom_height: Optional[str] = None,
    ) -> dict:
        """Scale to ``resolution`` (e.g. ``1280x720``) or to a custom size."""
        if resolution == "custom":
            if not custom_width or not custom_height:
                raise ValidationError("custom_width and custom_height are required for custom resolution")
            scale_filter = f"scale={custom_width}:{custom_height}"
        else:
            scale_filter = f"scale={resolution}"

        output_filename = f"resized_{input_filename}"
        args = [
            "-i", input_filename,
            "-vf", scale_filter,
            "-c:v", "libx264",
            "-preset", "medium",
            output_filename,
        ]
        result = await self.runner.run_ffmpeg(args)
        return _from_result(
            result, "Video resized successfully", "Failed to resize video", output_filename
        )

    # ------------------------------------------------------------------
    # Multi-file operations
    # ------------------------------------------------------------------

    @tool_boundary("Failed to join files")
    async def join_files(self, filenames: list[str], output: Optional[str] = None) -> dict:
        """Concatenate files with the concat demuxer (streams are copied)."""
        if not filenames:
            raise ValidationError("At least one filename is required")

        output_filename = output or f"joined_{filenames[0]}"
        file_list = "\n".join(f"file {escape_concat_path(name)}" for name in filenames)
        list_path = self._scratch_file(CONCAT_LIST_PREFIX, ".txt")
        try:
            list_path.write_text(file_list, encoding="utf-8")
            args = [
                "-f", "concat",
                "-safe", "0",
                "-i", list_path.name,
                "-c", "copy",
                output_filename,
            ]
            result = await self.runner.run_ffmpeg(args)
        finally:
            list_path.unlink(missing_ok=True)
        return _from_result(
            result, "Files joined successfully", "Failed to join files", output_filename
        )

    @tool_boundary("Failed to process batch")
    async def batch_process(self, filenames: list[str], operation: str) -> dict:
        """Apply ``operation`` to each file in turn.

        Per-file failures are reported in ``results``; the batch itself
        succeeds once every file has been attempted.
        """
        results = []
        for filename in filenames:
            build_args = BATCH_OPERATIONS.get(operation)
            if build_args is None:
                result = CommandResult(success=False, error="Unknown operation")
            else:
                result = await self.runner.run_ffmpeg(build_args(filename))

            results.append({"filename": filename, **result.to_dict()})

        return _envelope(
            success=True,
            message="Batch processing completed",
            results=results,
        )

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    @tool_boundary("Failed to start capture")
    async def start_capture(self, command: str, output_file: str) -> dict:
        """Start a background ffmpeg capture, replacing any running one."""
        command = validate_command(command, self.config, allowed=("ffmpeg",))
        command = inject_overwrite_flag(command, self.config)
        working_dir = str(self.config.ensure_upload_dir())
        await asyncio.to_thread(self.capture.start, command, output_file, working_dir=working_dir)
        return _envelope(
            success=True,
            message="Capture started",
            output_file=output_file,
        )

    @tool_boundary("Failed to stop capture")
    async def stop_capture(self) -> dict:
        stopped = await asyncio.to_thread(self.capture.stop)
        running = stopped.status == "stopped"
        return _envelope(
            success=True,
            message="Capture stopped" if running else "No capture is running",
            status=stopped.status,
            output_file=stopped.filename,
        )
