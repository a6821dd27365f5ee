# /// script
# requires-python = ">=3.11"
# dependencies = [
#     "mcp>=1.10.0",
#     "anyio>=4.0",
#     "pywin32>=306; sys_platform == 'win32'",
# ]
# ///
"""
InDesign Bridge MCP Server.

Serves the fixed operation catalog (see ``operations.py``) over MCP stdio:
  - list_tools  one tool per operation, with its JSON Schema
  - call_tool   validate, render, run in InDesign, return "<Label>: <text>"
  - resource    config://usage, a short guide for agents

Runs against InDesign Desktop on macOS (osascript) or Windows (COM).
Mutating operations are grouped into one InDesign undo step each.
"""

import logging
import os
import sys
from pathlib import Path

# Add script directory to sys.path so the bridge modules can be imported
sys.path.insert(0, str(Path(__file__).parent))

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

import operations
from dispatcher import Dispatcher, DispatchError

log = logging.getLogger("indesign_bridge.server")

SERVER_NAME = "indesign-bridge"
USAGE_URI = "config://usage"

INSTRUCTIONS = (
    "This server edits documents in a running Adobe InDesign through a fixed set of tools "
    "(documents, pages, text, graphics, styles, colors, tables, layers, export, utilities).\n\n"
    "Conventions:\n"
    "  - Page, frame, object and table indices are 0-based.\n"
    "  - Positions and sizes are in millimetres; font sizes and stroke widths in points.\n"
    "  - Colors are swatch names or #RRGGBB (created as RGB swatches on first use).\n"
    "  - A successful call returns '<Tool Label>: <status line>'. Out-of-range indices are "
    "reported in that status line rather than as errors.\n"
    "  - Every mutating call is a single undo step in InDesign (Edit > Undo 'MCP: <Label>').\n"
    "  - execute_indesign_code runs arbitrary ExtendScript; the value of its last expression "
    "is returned.\n"
    "Read config://usage for more detail."
)

server = Server(SERVER_NAME, instructions=INSTRUCTIONS)
dispatcher = Dispatcher()


# ---------------------------------------------------------------------------
# MCP Resource: usage guide
# ---------------------------------------------------------------------------

def usage_guide() -> str:
    groups: dict[str, list[str]] = {}
    for op in operations.CATALOG:
        groups.setdefault(op.group, []).append(op.name)
    catalog_lines = "\n".join(f"- **{group}**: {', '.join(names)}" for group, names in groups.items())
    return f"""\
# InDesign Bridge: Usage Guide

## Tools
{catalog_lines}

## Results
Successful calls return `<Tool Label>: <status line>`, e.g.
`Delete Page: Page 2 deleted. Remaining pages: 3`.

Validation problems (unknown tool, missing or mistyped parameters) are rejected
before anything is sent to InDesign. Errors raised inside InDesign come back as
`Error executing tool <name>: <message> (Line: <n>)`.

## Units
- x, y, width, height, margins, bleed, slug, spaceBefore/After: millimetres
- fontSize, leading, strokeWidth: points
- indices: 0-based; page ranges (`pageRange`, `recordRange`): 1-based, e.g. `1-3, 5`

## Custom code
`execute_indesign_code` runs ExtendScript as-is. Return a value by making it the
last expression statement:

    var doc = app.activeDocument;
    doc.pages.length + " pages";

Long-running tools (exports, packaging, preflight, data merge) get a longer timeout.
"""


@server.list_resources()
async def list_resources() -> list[types.Resource]:
    return [
        types.Resource(
            uri=USAGE_URI,
            name="usage",
            description="Usage guide for the InDesign Bridge tools",
            mimeType="text/markdown",
        )
    ]


@server.read_resource()
async def read_resource(uri) -> list[ReadResourceContents]:
    if str(uri).rstrip("/") != USAGE_URI:
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=f"Unknown resource: {uri}"))
    return [ReadResourceContents(content=usage_guide(), mime_type="text/markdown")]


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

def tool_definition(op: operations.Operation) -> types.Tool:
    return types.Tool(
        name=op.name,
        description=op.description,
        inputSchema=op.input_schema(),
        annotations=types.ToolAnnotations(title=op.label),
    )


@server.list_tools()
async def list_tools() -> list[types.Tool]:
    return [tool_definition(op) for op in operations.CATALOG]


async def call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
    """Run one catalog operation off the event loop."""
    try:
        text = await anyio.to_thread.run_sync(dispatcher.invoke, name, arguments or {})
    except DispatchError as e:
        log.info("%s rejected: %s", name, e)
        raise McpError(types.ErrorData(code=e.code, message=str(e))) from e
    return [types.TextContent(type="text", text=text)]


async def handle_call_tool(req: types.CallToolRequest) -> types.ServerResult:
    """tools/call handler; McpError propagates as a JSON-RPC error with its code."""
    content = await call_tool(req.params.name, req.params.arguments)
    return types.ServerResult(types.CallToolResult(content=content, isError=False))


server.request_handlers[types.CallToolRequest] = handle_call_tool


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def configure_logging(level: str | None = None):
    """Log to stderr; stdout carries the MCP protocol."""
    level = (level or os.environ.get("INDESIGN_LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def serve():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    """Run the MCP server via stdio transport."""
    configure_logging()
    log.info("Starting %s with %d tools", SERVER_NAME, len(operations.CATALOG))
    anyio.run(serve)


if __name__ == "__main__":
    main()
