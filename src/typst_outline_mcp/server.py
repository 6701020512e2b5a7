"""MCP server for typst-outline-mcp."""

import asyncio
import json

from mcp.server import Server
from mcp.types import Tool, TextContent

from .config import Settings
from .log import configure_logging, get_logger
from .tools.index_folder import index_folder
from .tools.list_workspaces import list_workspaces
from .tools.get_document_outline import get_document_outline
from .tools.get_folding_ranges import get_folding_ranges
from .tools.get_symbol import get_symbol
from .tools.search_symbols import SYMBOL_KINDS, search_symbols

logger = get_logger(__name__)

# Create server
server = Server("typst-outline-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="index_folder",
            description="Index a local folder of Typst documents. Walks the directory, outlines every .typ file and saves the symbols for workspace search.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to local folder (absolute or relative, supports ~ for home directory)"
                    }
                },
                "required": ["path"]
            }
        ),
        Tool(
            name="list_workspaces",
            description="List indexed workspaces (folders of Typst documents) with document and symbol counts.",
            inputSchema={
                "type": "object",
                "properties": {}
            }
        ),
        Tool(
            name="get_document_outline",
            description="Get the nested outline of a Typst document: headings, labels, functions and variables (scope 'symbol'), or the block structure (scope 'braced').",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to a .typ file"
                    },
                    "scope": {
                        "type": "string",
                        "description": "Which constructs count as symbols",
                        "enum": ["symbol", "braced"],
                        "default": "symbol"
                    }
                },
                "required": ["path"]
            }
        ),
        Tool(
            name="get_folding_ranges",
            description="Get the foldable regions of a Typst document: blocks, bracketed groups, comment runs and heading sections.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to a .typ file"
                    }
                },
                "required": ["path"]
            }
        ),
        Tool(
            name="search_symbols",
            description="Search for symbols matching a query across an indexed workspace.",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspace": {
                        "type": "string",
                        "description": "Workspace name (indexed folder name)"
                    },
                    "query": {
                        "type": "string",
                        "description": "Search query (matches symbol names)"
                    },
                    "kind": {
                        "type": "string",
                        "description": "Optional filter by symbol kind",
                        "enum": SYMBOL_KINDS
                    },
                    "file_pattern": {
                        "type": "string",
                        "description": "Optional glob pattern to filter files (e.g., 'chapters/*.typ')"
                    },
                    "max_results": {
                        "type": "integer",
                        "description": "Maximum number of results to return",
                        "default": 10
                    }
                },
                "required": ["workspace", "query"]
            }
        ),
        Tool(
            name="get_symbol",
            description="Get the source text of a specific symbol. Use after finding it with search_symbols.",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspace": {
                        "type": "string",
                        "description": "Workspace name (indexed folder name)"
                    },
                    "symbol_id": {
                        "type": "string",
                        "description": "Symbol ID from search_symbols"
                    }
                },
                "required": ["workspace", "symbol_id"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    storage_path = Settings().index_path

    try:
        if name == "index_folder":
            result = index_folder(
                path=arguments["path"],
                storage_path=storage_path
            )
        elif name == "list_workspaces":
            result = list_workspaces(storage_path=storage_path)
        elif name == "get_document_outline":
            result = get_document_outline(
                path=arguments["path"],
                scope=arguments.get("scope", "symbol")
            )
        elif name == "get_folding_ranges":
            result = get_folding_ranges(path=arguments["path"])
        elif name == "search_symbols":
            result = search_symbols(
                workspace=arguments["workspace"],
                query=arguments["query"],
                kind=arguments.get("kind"),
                file_pattern=arguments.get("file_pattern"),
                max_results=arguments.get("max_results", 10),
                storage_path=storage_path
            )
        elif name == "get_symbol":
            result = get_symbol(
                workspace=arguments["workspace"],
                symbol_id=arguments["symbol_id"],
                storage_path=storage_path
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        logger.exception("tool failed", tool=name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}, indent=2))]


async def run_server():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Main entry point."""
    settings = Settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json)
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
