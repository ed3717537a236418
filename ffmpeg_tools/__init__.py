"""
ffmpeg-tools: media processing operations backed by ffmpeg and ffprobe.

Structured parameters become ffmpeg/ffprobe invocations; results come
back as uniform envelopes.

Example usage:
    - Trim ``in.mp4`` to the 00:00:01-00:00:05 range
    - Probe a file's streams and container format
    - Start a background capture and stop it later
"""

import logging

__version__ = "1.0.0"

logging.getLogger("ffmpeg_tools").addHandler(logging.NullHandler())
