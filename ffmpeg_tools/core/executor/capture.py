"""Long-running background capture (e.g. screen or device recording).

A capture is a shell-executed ffmpeg command that runs until it is
stopped or superseded by a new capture.  It is not bound by the runner
timeout.
"""

import logging
import os
import signal
import subprocess
import threading
from dataclasses import dataclass
from typing import Optional

from ..config import RunnerConfig, get_config

logger = logging.getLogger("ffmpeg_tools")

STATUS_STOPPED = "stopped"
STATUS_NOT_RUNNING = "not_running"


@dataclass(frozen=True)
class CaptureStopResult:
    """Outcome of :meth:`CaptureSession.stop`."""
    status: str
    filename: Optional[str] = None


class CaptureSession:
    """Owns at most one background capture process.

    ``start`` while running terminates the current process first; its
    output file is abandoned.  ``start`` and ``stop`` are serialized by a
    lock so concurrent callers supersede each other in a definite order.
    """

    def __init__(self, config: Optional[RunnerConfig] = None):
        self.config = config or get_config()
        self._lock = threading.Lock()
        self._process: Optional[subprocess.Popen] = None
        self._output_file: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._process is not None

    @property
    def output_file(self) -> Optional[str]:
        return self._output_file

    def start(self, command: str, output_file: str, working_dir: Optional[str] = None) -> None:
        """Start ``command`` in the background, superseding any active capture.

        Args:
            command: Shell command line to run.
            output_file: File the command writes to, reported by ``stop``.
            working_dir: Directory to run in. Defaults to the current one.
        """
        with self._lock:
            if self._process is not None:
                logger.info("Superseding capture writing %s", self._output_file)
                self._terminate(self._process)

            # Cleared first so a failed spawn leaves the session not running.
            self._process = None
            self._output_file = None

            self._process = subprocess.Popen(
                command,
                shell=True,
                cwd=working_dir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
            self._output_file = output_file
            logger.info("Capture started (pid %d) writing %s", self._process.pid, output_file)

    def stop(self) -> CaptureStopResult:
        """Stop the active capture, if any.

        Returns:
            ``stopped`` with the recorded output file, or ``not_running``
            when no capture is active.
        """
        with self._lock:
            if self._process is None:
                return CaptureStopResult(status=STATUS_NOT_RUNNING)

            process, filename = self._process, self._output_file
            self._process = None
            self._output_file = None
            self._terminate(process)

        logger.info("Capture stopped, output %s", filename)
        return CaptureStopResult(status=STATUS_STOPPED, filename=filename)

    def _terminate(self, process: subprocess.Popen) -> None:
        """Terminate the capture's process group and reap it.

        SIGTERM lets ffmpeg finalize its output; SIGKILL follows after the
        grace period.
        """
        if process.poll() is not None:
            return

        self._signal(process, graceful=True)
        try:
            process.wait(timeout=self.config.capture_stop_grace)
        except subprocess.TimeoutExpired:
            logger.warning("Capture pid %d ignored SIGTERM, killing", process.pid)
            self._signal(process, graceful=False)
            process.wait()

    @staticmethod
    def _signal(process: subprocess.Popen, graceful: bool) -> None:
        try:
            if os.name == "posix":
                os.killpg(process.pid, signal.SIGTERM if graceful else signal.SIGKILL)
            elif graceful:
                process.terminate()
            else:
                process.kill()
        except ProcessLookupError:
            # Exited between poll() and the signal.
            pass


_session: Optional[CaptureSession] = None
_session_lock = threading.Lock()


def get_capture_session() -> CaptureSession:
    """Get the process-wide capture session.

    Returns:
        CaptureSession instance.
    """
    global _session
    with _session_lock:
        if _session is None:
            _session = CaptureSession()
        return _session
