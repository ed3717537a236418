"""Tool server: lists tool definitions and dispatches tool calls."""

import json
import logging
from typing import Optional

from .media_tools import MediaTools
from .tool_defs import TOOL_DEFINITIONS

logger = logging.getLogger("ffmpeg_tools")


class MediaToolServer:
    """Dispatches named tool calls to :class:`MediaTools`."""

    def __init__(self, tools: Optional[MediaTools] = None):
        self.tools = tools or MediaTools()
        self._definitions = {t["function"]["name"]: t["function"] for t in TOOL_DEFINITIONS}

    def list_tools(self) -> list[dict]:
        """List available tools.

        Returns:
            List of tool definitions with ``name``, ``description`` and
            ``inputSchema``.
        """
        return [
            {
                "name": name,
                "description": definition["description"],
                "inputSchema": definition["parameters"],
            }
            for name, definition in self._definitions.items()
        ]

    async def call_tool(self, name: str, arguments: Optional[dict] = None) -> dict:
        """Call a tool.

        Args:
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            ``{"content": [...]}`` holding the JSON result envelope, or
            ``{"error": ...}`` when the call itself is malformed.
        """
        definition = self._definitions.get(name)
        if definition is None:
            return {"error": f"Unknown tool: {name}"}

        arguments = arguments or {}
        schema = definition["parameters"]
        missing = [p for p in schema.get("required", []) if p not in arguments]
        if missing:
            return {"error": f"Missing required arguments: {', '.join(missing)}"}
        unknown = [p for p in arguments if p not in schema.get("properties", {})]
        if unknown:
            return {"error": f"Unknown arguments: {', '.join(unknown)}"}

        logger.debug("Tool call: %s(%s)", name, ", ".join(arguments))
        result = await getattr(self.tools, name)(**arguments)
        return {"content": [{"type": "text", "text": json.dumps(result, indent=2)}]}


# Singleton server instance
_server: Optional[MediaToolServer] = None


def get_server() -> MediaToolServer:
    """Get the singleton tool server instance."""
    global _server
    if _server is None:
        _server = MediaToolServer()
    return _server


async def handle_request(request: dict, server: Optional[MediaToolServer] = None) -> dict:
    """Handle a ``tools/list`` or ``tools/call`` request.

    Args:
        request: Request dictionary with ``method`` and optional ``params``.
        server: Server to use; defaults to the singleton.

    Returns:
        Response dictionary.
    """
    server = server or get_server()
    method = request.get("method", "")

    if method == "tools/list":
        return {"tools": server.list_tools()}

    elif method == "tools/call":
        params = request.get("params", {})
        name = params.get("name", "")
        arguments = params.get("arguments", {})
        return await server.call_tool(name, arguments)

    else:
        return {"error": f"Unknown method: {method}"}
