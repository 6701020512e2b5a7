"""End-to-end server tests."""

import json

import pytest

from conftest import MAIN

from typst_outline_mcp.server import call_tool, list_tools
from typst_outline_mcp.tools.search_symbols import SYMBOL_KINDS


@pytest.mark.asyncio
async def test_server_lists_six_tools():
    """Test that server lists all 6 tools."""
    tools = await list_tools()

    assert len(tools) == 6

    names = {t.name for t in tools}
    expected = {
        "index_folder", "list_workspaces", "get_document_outline",
        "get_folding_ranges", "search_symbols", "get_symbol",
    }
    assert names == expected


@pytest.mark.asyncio
async def test_get_document_outline_tool_schema():
    tools = await list_tools()

    outline = next(t for t in tools if t.name == "get_document_outline")

    assert outline.inputSchema["required"] == ["path"]
    assert outline.inputSchema["properties"]["scope"]["enum"] == ["symbol", "braced"]


@pytest.mark.asyncio
async def test_search_symbols_tool_schema():
    """Test search_symbols tool has correct schema."""
    tools = await list_tools()

    search = next(t for t in tools if t.name == "search_symbols")

    props = search.inputSchema["properties"]
    assert "workspace" in props
    assert "query" in props
    assert "file_pattern" in props
    assert "max_results" in props
    assert set(props["kind"]["enum"]) == set(SYMBOL_KINDS) == {"heading", "label", "function", "variable"}


@pytest.mark.asyncio
async def test_call_document_outline(fake_parser, tmp_path):
    path = tmp_path / "main.typ"
    path.write_text(MAIN, encoding="utf-8")

    (content,) = await call_tool("get_document_outline", {"path": str(path)})
    result = json.loads(content.text)

    assert result["symbols"][0]["name"] == "Intro"


@pytest.mark.asyncio
async def test_call_uses_configured_index_path(fake_parser, workspace, storage_path, monkeypatch):
    monkeypatch.setenv("TYPST_OUTLINE_INDEX_PATH", storage_path)

    await call_tool("index_folder", {"path": str(workspace)})
    (content,) = await call_tool("list_workspaces", {})

    assert json.loads(content.text)["count"] == 1


@pytest.mark.asyncio
async def test_call_unknown_tool(monkeypatch, storage_path):
    monkeypatch.setenv("TYPST_OUTLINE_INDEX_PATH", storage_path)

    (content,) = await call_tool("rename_symbol", {})

    assert json.loads(content.text) == {"error": "Unknown tool: rename_symbol"}


@pytest.mark.asyncio
async def test_call_missing_argument_reports_error(monkeypatch, storage_path):
    monkeypatch.setenv("TYPST_OUTLINE_INDEX_PATH", storage_path)

    (content,) = await call_tool("get_symbol", {"workspace": "thesis"})

    assert "symbol_id" in json.loads(content.text)["error"]
