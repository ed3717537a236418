"""Validation of free-form command lines before they reach the shell."""

import re
from typing import Optional

from ..config import RunnerConfig, get_config
from ..errors import ValidationError

_FFMPEG_PREFIX = re.compile(r"^ffmpeg\s+")


def executable_of(command: str) -> str:
    """Return the first whitespace-delimited token of ``command``."""
    parts = command.split(maxsplit=1)
    return parts[0] if parts else ""


def validate_command(
    command: str,
    config: Optional[RunnerConfig] = None,
    allowed: Optional[tuple[str, ...]] = None,
) -> str:
    """Check a command line against the executable allow-list.

    Args:
        command: Command line as supplied by the caller.
        config: Configuration holding ``allowed_executables``.
        allowed: Explicit allow-list overriding the configured one.

    Returns:
        The command with surrounding whitespace removed.

    Raises:
        ValidationError: If the command does not start with an allowed
            executable.
    """
    config = config or get_config()
    allowed = allowed if allowed is not None else config.allowed_executables
    stripped = (command or "").strip()
    if executable_of(stripped) not in allowed:
        names = " and ".join(allowed) if allowed else "no"
        raise ValidationError(f"Only {names} commands are allowed")
    return stripped


def inject_overwrite_flag(command: str, config: Optional[RunnerConfig] = None) -> str:
    """Insert ``-y`` after ``ffmpeg`` so existing outputs are overwritten.

    Commands that already decide overwrite behaviour with ``-y`` or
    ``-n`` are left alone, as is everything when ``overwrite_output`` is
    disabled.
    """
    config = config or get_config()
    stripped = command.strip()
    if not config.overwrite_output or not _FFMPEG_PREFIX.match(stripped):
        return stripped
    if {"-y", "-n"} & set(stripped.split()):
        return stripped
    return _FFMPEG_PREFIX.sub("ffmpeg -y ", stripped, count=1)
