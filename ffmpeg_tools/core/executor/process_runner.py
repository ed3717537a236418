"""Process execution for ffmpeg and ffprobe.

Two runners share one timeout discipline: every invocation is a single
task that resolves exactly once, either when the process exits or when
the configured bound expires and the process is killed.
"""

import asyncio
import contextlib
import logging
import os
import signal
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import RunnerConfig, get_config
from ..errors import (
    CommandTimeoutError,
    ExecutionError,
    MediaToolError,
    SpawnError,
)
from .command_policy import validate_command

logger = logging.getLogger("ffmpeg_tools")

TIMEOUT_MESSAGE = "Command timed out"

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class CommandResult:
    """Result of one external process invocation."""
    success: bool
    output: str = ""
    error: Optional[str] = None
    return_code: Optional[int] = None

    def __post_init__(self):
        if self.success and self.error is not None:
            raise ValueError("A successful CommandResult cannot carry an error")

    @classmethod
    def from_error(cls, exc: MediaToolError) -> "CommandResult":
        """Convert a runner error into a failed result."""
        if isinstance(exc, ExecutionError):
            return cls(
                success=False,
                output=exc.output,
                error=str(exc),
                return_code=exc.return_code,
            )
        return cls(success=False, output="", error=str(exc))

    def to_dict(self) -> dict:
        """Return the result as a dict, omitting an unset error."""
        data = {"success": self.success, "output": self.output}
        if self.error is not None:
            data["error"] = self.error
        return data


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


async def _kill(process: asyncio.subprocess.Process, process_group: bool = False) -> None:
    """Forcibly terminate ``process`` and reap it."""
    if process.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            if process_group and os.name == "posix":
                os.killpg(process.pid, signal.SIGKILL)
            else:
                process.kill()
    await process.wait()


class _RunnerBase:
    """Shared configuration and working-directory handling."""

    def __init__(self, config: Optional[RunnerConfig] = None):
        self.config = config or get_config()

    def _resolve_cwd(self, working_dir: Optional[str]) -> str:
        if working_dir:
            return working_dir
        return str(self.config.ensure_upload_dir())


class ShellCommandRunner(_RunnerBase):
    """Runs allow-listed command lines through the shell.

    Standard error is redirected into standard output, so the captured
    text is in whatever order the shell produced it.
    """

    async def run(self, command: str, working_dir: Optional[str] = None) -> CommandResult:
        """Execute ``command`` and wait for it, bounded by the timeout.

        Args:
            command: Full command line, e.g. ``"ffmpeg -i a.mp4 b.webm"``.
            working_dir: Directory to run in. Defaults to the upload dir.

        Returns:
            CommandResult; failures never raise.
        """
        try:
            command = validate_command(command, self.config)
            output = await self._execute(command, working_dir)
        except MediaToolError as e:
            return CommandResult.from_error(e)
        return CommandResult(success=True, output=output, return_code=0)

    async def _execute(self, command: str, working_dir: Optional[str]) -> str:
        try:
            cwd = self._resolve_cwd(working_dir)
            logger.debug("Running shell command in %s: %s", cwd, command)
            process = await asyncio.create_subprocess_shell(
                command,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as e:
            raise SpawnError(f"Failed to start process: {e}") from e

        try:
            stdout, _ = await asyncio.wait_for(
                process.communicate(), timeout=self.config.timeout
            )
        except asyncio.TimeoutError:
            # The shell's children share its session; kill the whole group.
            await _kill(process, process_group=True)
            logger.warning("Shell command timed out after %ss: %s", self.config.timeout, command)
            raise CommandTimeoutError(TIMEOUT_MESSAGE)

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        if process.returncode != 0:
            raise ExecutionError(
                f"Command failed with exit code {process.returncode}",
                return_code=process.returncode,
                output=output,
            )
        return output


class ArgvProcessRunner(_RunnerBase):
    """Runs an executable with an explicit argument vector, no shell."""

    async def run_argv(
        self,
        executable: str,
        args: Sequence[str],
        working_dir: Optional[str] = None,
    ) -> CommandResult:
        """Execute ``executable`` with ``args`` and collect its output.

        Standard output and standard error are read concurrently as they
        arrive; the final output is stdout followed by stderr.

        Args:
            executable: Program name or path, resolved through ``PATH``.
            args: Arguments passed verbatim.
            working_dir: Directory to run in. Defaults to the upload dir.

        Returns:
            CommandResult; failures never raise.
        """
        try:
            output = await self._execute(executable, list(args), working_dir)
        except MediaToolError as e:
            return CommandResult.from_error(e)
        return CommandResult(success=True, output=output, return_code=0)

    async def run_ffmpeg(self, args: Sequence[str], working_dir: Optional[str] = None) -> CommandResult:
        return await self.run_argv(self.config.ffmpeg_binary, args, working_dir)

    async def run_ffprobe(self, args: Sequence[str], working_dir: Optional[str] = None) -> CommandResult:
        return await self.run_argv(self.config.ffprobe_binary, args, working_dir)

    async def _execute(self, executable: str, args: list[str], working_dir: Optional[str]) -> str:
        try:
            cwd = self._resolve_cwd(working_dir)
            logger.debug("Running %s %s in %s", executable, " ".join(args), cwd)
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise SpawnError(str(e)) from e

        stdout_chunks: list[bytes] = []
        stderr_chunks: list[bytes] = []

        async def pump(stream: asyncio.StreamReader, sink: list[bytes]) -> None:
            while True:
                chunk = await stream.read(_CHUNK_SIZE)
                if not chunk:
                    break
                sink.append(chunk)

        async def finish() -> int:
            await asyncio.gather(
                pump(process.stdout, stdout_chunks),
                pump(process.stderr, stderr_chunks),
            )
            return await process.wait()

        try:
            return_code = await asyncio.wait_for(finish(), timeout=self.config.timeout)
        except asyncio.TimeoutError:
            await _kill(process)
            logger.warning("%s timed out after %ss", executable, self.config.timeout)
            raise CommandTimeoutError(TIMEOUT_MESSAGE)

        output = _decode(stdout_chunks) + _decode(stderr_chunks)
        if return_code != 0:
            raise ExecutionError(
                f"Process exited with code {return_code}",
                return_code=return_code,
                output=output,
            )
        return output
