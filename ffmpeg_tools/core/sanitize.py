"""Filename sanitization and escaping utilities.

Uploaded filenames are reduced to a safe character set before they are
written to the working directory or handed to ffmpeg as arguments.
"""

import re

DEFAULT_FILENAME = "uploaded_file"

_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def sanitize_filename(filename: str) -> str:
    """Reduce a filename to letters, digits, dots and hyphens.

    Invalid characters become ``_``, the result is lower-cased, runs of
    ``_`` collapse to one and leading/trailing ``_`` are stripped.  The
    transformation is idempotent.

    Args:
        filename: Raw filename as supplied by the caller.

    Returns:
        The sanitized name, or ``DEFAULT_FILENAME`` if nothing survives.
    """
    sanitized = _INVALID_CHARS.sub("_", filename or "").lower()
    sanitized = _REPEATED_UNDERSCORES.sub("_", sanitized)
    sanitized = sanitized.strip("_")
    return sanitized or DEFAULT_FILENAME


def escape_concat_path(path: str) -> str:
    """Quote a path for an ffmpeg concat demuxer list (``file '...'``).

    Single quotes cannot appear inside a quoted string, so each one
    closes the quote, emits an escaped quote and reopens.
    """
    return "'" + path.replace("'", "'\\''") + "'"
