"""Tests for the tool server and tool definitions."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ffmpeg_tools.tools.media_tools import MediaTools
from ffmpeg_tools.tools.server import MediaToolServer, get_server, handle_request
from ffmpeg_tools.tools.tool_defs import TOOL_DEFINITIONS, get_tool_names


@pytest.fixture
def tools():
    mock = MagicMock(spec=MediaTools)
    mock.stop_capture = AsyncMock(return_value={
        "success": True, "message": "No capture is running", "status": "not_running",
    })
    mock.trim_video = AsyncMock(return_value={"success": True, "message": "Video trimmed successfully"})
    return mock


@pytest.fixture
def server(tools):
    return MediaToolServer(tools)


class TestToolDefinitions:
    """Tests for TOOL_DEFINITIONS."""

    def test_every_tool_has_an_implementation(self):
        for name in get_tool_names():
            assert callable(getattr(MediaTools, name, None)), name

    def test_required_parameters_are_declared(self):
        for tool in TOOL_DEFINITIONS:
            params = tool["function"]["parameters"]
            for required in params["required"]:
                assert required in params["properties"]

    def test_names_unique(self):
        names = get_tool_names()
        assert len(names) == len(set(names))


class TestMediaToolServer:
    """Tests for MediaToolServer."""

    def test_list_tools(self, server):
        listed = server.list_tools()
        assert [t["name"] for t in listed] == get_tool_names()
        assert all("inputSchema" in t for t in listed)

    @pytest.mark.asyncio
    async def test_call_tool_wraps_envelope(self, server, tools):
        response = await server.call_tool(
            "trim_video", {"input_filename": "in.mp4", "start": "0", "end": "5"}
        )
        tools.trim_video.assert_awaited_once_with(input_filename="in.mp4", start="0", end="5")
        payload = json.loads(response["content"][0]["text"])
        assert payload["message"] == "Video trimmed successfully"

    @pytest.mark.asyncio
    async def test_call_tool_without_arguments(self, server):
        response = await server.call_tool("stop_capture")
        payload = json.loads(response["content"][0]["text"])
        assert payload["status"] == "not_running"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, server):
        assert await server.call_tool("format_disk", {}) == {"error": "Unknown tool: format_disk"}

    @pytest.mark.asyncio
    async def test_missing_arguments(self, server, tools):
        response = await server.call_tool("trim_video", {"input_filename": "in.mp4"})
        tools.trim_video.assert_not_called()
        assert response == {"error": "Missing required arguments: start, end"}

    @pytest.mark.asyncio
    async def test_unknown_arguments(self, server, tools):
        response = await server.call_tool("stop_capture", {"force": True})
        tools.stop_capture.assert_not_called()
        assert response == {"error": "Unknown arguments: force"}


class TestHandleRequest:
    """Tests for handle_request."""

    @pytest.mark.asyncio
    async def test_tools_list(self, server):
        response = await handle_request({"method": "tools/list"}, server)
        assert len(response["tools"]) == len(TOOL_DEFINITIONS)

    @pytest.mark.asyncio
    async def test_tools_call(self, server):
        response = await handle_request(
            {"method": "tools/call", "params": {"name": "stop_capture", "arguments": {}}},
            server,
        )
        assert "content" in response

    @pytest.mark.asyncio
    async def test_unknown_method(self, server):
        response = await handle_request({"method": "resources/list"}, server)
        assert response == {"error": "Unknown method: resources/list"}


def test_get_server_is_singleton():
    assert get_server() is get_server()
