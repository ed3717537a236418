"""Tool definitions formatted for function-calling clients.

Parameter names match the keyword arguments of :class:`MediaTools`.
"""


def _tool(name: str, description: str, properties: dict, required: list[str]) -> dict:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


_STRING = {"type": "string"}
_INPUT_FILENAME = {"type": "string", "description": "Input media filename in the working directory"}


TOOL_DEFINITIONS = [
    _tool(
        "upload_file",
        "Upload a file to the FFmpeg processing environment.",
        {
            "filename": {"type": "string", "description": "Name of the file to upload"},
            "content": {"type": "string", "description": "Base64 encoded file content"},
            "mime_type": {"type": "string", "description": "MIME type of the file"},
        },
        ["filename", "content"],
    ),
    _tool(
        "execute_command",
        (
            "Execute a custom FFmpeg or FFprobe command line. "
            "Commands must start with 'ffmpeg' or 'ffprobe'; "
            "'-y' is added to ffmpeg commands automatically."
        ),
        {
            "command": {"type": "string", "description": "The FFmpeg command to execute"},
            "input_file": {"type": "string", "description": "Input file path"},
            "output_file": {"type": "string", "description": "Output file path"},
            "working_directory": {"type": "string", "description": "Working directory for the command"},
        },
        ["command"],
    ),
    _tool(
        "trim_video",
        "Trim a video file to a specific time range without re-encoding.",
        {
            "input_filename": _INPUT_FILENAME,
            "start": {"type": "string", "description": "Start time (HH:MM:SS format)"},
            "end": {"type": "string", "description": "End time (HH:MM:SS format)"},
        },
        ["input_filename", "start", "end"],
    ),
    _tool(
        "change_frame_rate",
        "Change the frame rate of a video file.",
        {
            "input_filename": _INPUT_FILENAME,
            "frame_rate": {"type": "string", "description": "Target frame rate (e.g. 24, 30, 60)"},
        },
        ["input_filename", "frame_rate"],
    ),
    _tool(
        "convert_to_gif_webp",
        "Convert a section of a video to an animated GIF or WebP.",
        {
            "input_filename": _INPUT_FILENAME,
            "start_time": {"type": "string", "description": "Start time (HH:MM:SS format)"},
            "duration": {"type": "string", "description": "Duration (HH:MM:SS format)"},
            "format": {"type": "string", "enum": ["gif", "webp"], "description": "Output format"},
            "scale_height": {"type": "integer", "description": "Output height in pixels"},
            "fps": {"type": "integer", "description": "Frames per second for output"},
        },
        ["input_filename", "start_time", "duration", "format", "scale_height", "fps"],
    ),
    _tool(
        "analyze_media",
        "Analyze media file format and stream properties using ffprobe.",
        {"input_filename": _INPUT_FILENAME},
        ["input_filename"],
    ),
    _tool(
        "batch_process",
        "Process multiple files with the same operation.",
        {
            "filenames": {"type": "array", "items": _STRING, "description": "Filenames to process"},
            "operation": {
                "type": "string",
                "enum": ["convert", "resize"],
                "description": "Operation to perform",
            },
        },
        ["filenames", "operation"],
    ),
    _tool(
        "extract_bitstream",
        "Copy the first video, audio or subtitle stream into its own file.",
        {
            "input_filename": _INPUT_FILENAME,
            "stream_type": {
                "type": "string",
                "enum": ["video", "audio", "subtitle"],
                "description": "Type of stream to extract",
            },
        },
        ["input_filename", "stream_type"],
    ),
    _tool(
        "change_speed",
        "Change the playback speed of a video and its audio.",
        {
            "input_filename": _INPUT_FILENAME,
            "speed": {"type": "string", "description": "Speed multiplier (e.g. 2.0 or 0.5)"},
        },
        ["input_filename", "speed"],
    ),
    _tool(
        "generate_thumbnails",
        "Generate a thumbnail, or tiled thumbnail sheets, from a video.",
        {
            "input_filename": _INPUT_FILENAME,
            "timestamp": {"type": "string", "description": "Timestamp for the first thumbnail (HH:MM:SS)"},
            "cols": {"type": "integer", "description": "Columns per sheet"},
            "rows": {"type": "integer", "description": "Rows per sheet"},
            "multiple_sheets": {"type": "boolean", "description": "Generate tiled sheets"},
            "interval": {"type": "string", "description": "Seconds between thumbnails"},
            "duration": {"type": "string", "description": "Duration to process (HH:MM:SS)"},
        },
        ["input_filename", "timestamp"],
    ),
    _tool(
        "resize_video",
        "Resize video dimensions.",
        {
            "input_filename": _INPUT_FILENAME,
            "resolution": {
                "type": "string",
                "description": "Target resolution (e.g. 1920x1080, 1280x720) or 'custom'",
            },
            "custom_width": {"type": "string", "description": "Width when resolution is custom"},
            "custom_height": {"type": "string", "description": "Height when resolution is custom"},
        },
        ["input_filename", "resolution"],
    ),
    _tool(
        "join_files",
        "Join multiple media files with the concat demuxer.",
        {
            "filenames": {"type": "array", "items": _STRING, "description": "Filenames to join, in order"},
            "output": {"type": "string", "description": "Output filename"},
        },
        ["filenames"],
    ),
    _tool(
        "start_capture",
        "Start a background ffmpeg capture; replaces any capture already running.",
        {
            "command": {"type": "string", "description": "ffmpeg command line writing to output_file"},
            "output_file": {"type": "string", "description": "File the capture writes to"},
        },
        ["command", "output_file"],
    ),
    _tool(
        "stop_capture",
        "Stop the running capture and report its output file.",
        {},
        [],
    ),
]


def get_tool_names() -> list[str]:
    """Return the names of all defined tools."""
    return [t["function"]["name"] for t in TOOL_DEFINITIONS]
