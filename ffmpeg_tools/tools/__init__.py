"""Media processing tools for function-calling clients.

Exposes the ffmpeg/ffprobe operations and a small dispatcher that maps
tool calls onto them.
"""

from .media_tools import MediaTools
from .server import MediaToolServer, get_server, handle_request
from .tool_defs import TOOL_DEFINITIONS

__all__ = [
    "MediaTools",
    "MediaToolServer",
    "TOOL_DEFINITIONS",
    "get_server",
    "handle_request",
]
