from __future__ import annotations

import asyncio

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError

import exec_server
import operations
from conftest import FakeTransport
from dispatcher import Dispatcher


@pytest.fixture
def transport(tmp_path, monkeypatch: pytest.MonkeyPatch) -> FakeTransport:
    fake = FakeTransport(tmp_path, result="done")
    monkeypatch.setattr(exec_server, "dispatcher", Dispatcher(fake))
    return fake


def test_list_tools_serves_whole_catalog() -> None:
    tools = asyncio.run(exec_server.list_tools())
    assert [tool.name for tool in tools] == [op.name for op in operations.CATALOG]
    delete = next(tool for tool in tools if tool.name == "delete_page")
    assert delete.inputSchema["required"] == ["pageIndex"]
    assert delete.annotations.title == "Delete Page"


def test_call_tool_returns_labelled_text(transport: FakeTransport) -> None:
    content = asyncio.run(exec_server.call_tool("delete_page", {"pageIndex": 1}))
    assert len(content) == 1
    assert content[0].type == "text"
    assert content[0].text == "Delete Page: done"
    assert transport.calls[0]["undo_name"] == "MCP: Delete Page"


def test_call_tool_without_arguments(transport: FakeTransport) -> None:
    content = asyncio.run(exec_server.call_tool("list_layers", None))
    assert content[0].text == "List Layers: done"


@pytest.mark.parametrize(
    "name, arguments, code",
    [
        ("make_coffee", {}, types.METHOD_NOT_FOUND),
        ("delete_page", {}, types.INVALID_PARAMS),
        ("delete_page", {"pageIndex": "two"}, types.INVALID_PARAMS),
    ],
)
def test_call_tool_rejections(transport: FakeTransport, name: str, arguments: dict, code: int) -> None:
    with pytest.raises(McpError) as excinfo:
        asyncio.run(exec_server.call_tool(name, arguments))
    assert excinfo.value.error.code == code
    assert transport.calls == []


def test_call_tool_engine_error(transport: FakeTransport) -> None:
    transport.result = "ERROR: Invalid object (Line: 3)"
    with pytest.raises(McpError) as excinfo:
        asyncio.run(exec_server.call_tool("list_layers", {}))
    assert excinfo.value.error.code == types.INTERNAL_ERROR
    assert excinfo.value.error.message == "Error executing tool list_layers: Invalid object (Line: 3)"


def _call(name: str, arguments: dict | None) -> types.ServerResult:
    handler = exec_server.server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    return asyncio.run(handler(request))


def test_registered_handler_returns_tool_result(transport: FakeTransport) -> None:
    result = _call("delete_page", {"pageIndex": 1}).root
    assert result.isError is False
    assert result.content[0].text == "Delete Page: done"


@pytest.mark.parametrize(
    "name, arguments, code",
    [
        ("make_coffee", {}, types.METHOD_NOT_FOUND),
        ("delete_page", {"pageIndex": "two"}, types.INVALID_PARAMS),
    ],
)
def test_registered_handler_keeps_error_codes(transport: FakeTransport, name: str, arguments: dict, code: int) -> None:
    with pytest.raises(McpError) as excinfo:
        _call(name, arguments)
    assert excinfo.value.error.code == code
    assert transport.calls == []


def test_registered_handler_engine_error_code(transport: FakeTransport) -> None:
    transport.result = "ERROR: Invalid object (Line: 3)"
    with pytest.raises(McpError) as excinfo:
        _call("list_layers", None)
    assert excinfo.value.error.code == types.INTERNAL_ERROR
    assert "Invalid object (Line: 3)" in excinfo.value.error.message


def test_usage_resource() -> None:
    resources = asyncio.run(exec_server.list_resources())
    assert [str(r.uri).rstrip("/") for r in resources] == [exec_server.USAGE_URI]
    contents = asyncio.run(exec_server.read_resource(exec_server.USAGE_URI))
    assert "delete_page" in contents[0].content
    assert contents[0].mime_type == "text/markdown"


def test_unknown_resource() -> None:
    with pytest.raises(McpError):
        asyncio.run(exec_server.read_resource("config://nope"))
