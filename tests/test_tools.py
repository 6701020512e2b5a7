"""Tests for tools module."""

from conftest import BLOCKS, BLOCKS_TREE, BROKEN, MAIN, MAIN_TREE

from typst_outline_mcp.parser import LineIndex, LinkedNode, ScopeConfiguration, build_hierarchy
from typst_outline_mcp.tools.get_document_outline import get_document_outline
from typst_outline_mcp.tools.get_folding_ranges import folding_ranges, get_folding_ranges
from typst_outline_mcp.tools.get_symbol import get_symbol
from typst_outline_mcp.tools.index_folder import (
    discover_local_files,
    index_folder,
    should_skip_file,
)
from typst_outline_mcp.tools.list_workspaces import list_workspaces
from typst_outline_mcp.tools.outline_format import collect_symbols, subtree_end
from typst_outline_mcp.tools.search_symbols import search_symbols


def test_should_skip_file():
    """Test skip patterns."""
    assert should_skip_file("node_modules/pkg/lib.typ") is True
    assert should_skip_file(".git/hooks/x.typ") is True
    assert should_skip_file("chapters/intro.typ") is False


def test_discover_local_files(workspace):
    """Only .typ files outside skipped folders, shallow ones first."""
    files = discover_local_files(workspace)

    assert [f.relative_to(workspace).as_posix() for f in files] == [
        "main.typ",
        "chapters/notes.typ",
    ]


def test_discover_local_files_respects_limits(tmp_path):
    for i in range(5):
        (tmp_path / f"doc{i}.typ").write_text("x", encoding="utf-8")
    (tmp_path / "big.typ").write_text("x" * 100, encoding="utf-8")

    assert len(discover_local_files(tmp_path, max_files=3)) == 3
    assert all(f.name != "big.typ" for f in discover_local_files(tmp_path, max_size=50))


def test_get_document_outline(fake_parser, tmp_path):
    path = tmp_path / "main.typ"
    path.write_text(MAIN, encoding="utf-8")

    result = get_document_outline(str(path))

    assert result["scope"] == "symbol"
    assert result["language"] == "typst"
    (intro,) = result["symbols"]
    assert intro["name"] == "Intro"
    assert intro["kind"] == "heading"
    assert intro["level"] == 1
    assert intro["line"] == 1
    assert intro["lsp_kind"] == 3  # Namespace

    function, setup = intro["children"]
    assert function["name"] == "f"
    assert function["kind"] == "function"
    assert function["lsp_kind"] == 12
    assert function["range"] == [13, 21]
    assert function["line"] == 2
    assert "children" not in function

    assert setup["level"] == 2
    assert setup["children"][0]["name"] == "setup"
    assert setup["children"][0]["kind"] == "label"


def test_get_document_outline_braced(fake_parser, tmp_path):
    path = tmp_path / "blocks.typ"
    path.write_text(BLOCKS, encoding="utf-8")

    result = get_document_outline(str(path), scope="braced")

    assert result["scope"] == "braced"
    assert [s["kind"] for s in result["symbols"]] == ["group", "group", "comment_run"]
    assert all(s["lsp_kind"] is None for s in result["symbols"])


def test_get_document_outline_errors(fake_parser, tmp_path):
    broken = tmp_path / "broken.typ"
    broken.write_text(BROKEN, encoding="utf-8")
    other = tmp_path / "notes.md"
    other.write_text("x", encoding="utf-8")

    assert "error" in get_document_outline(str(tmp_path / "missing.typ"))
    assert "Unsupported" in get_document_outline(str(other))["error"]
    assert "Unknown scope" in get_document_outline(str(broken), scope="everything")["error"]
    assert "Outline analysis failed" in get_document_outline(str(broken))["error"]


def test_get_folding_ranges(fake_parser, tmp_path):
    path = tmp_path / "blocks.typ"
    path.write_text(BLOCKS, encoding="utf-8")

    result = get_folding_ranges(str(path))

    assert result["range_count"] == 2
    assert result["ranges"] == [
        {"start_line": 0, "end_line": 2, "kind": "region"},
        {"start_line": 3, "end_line": 4, "kind": "comment"},
    ]


def test_heading_folds_with_its_section():
    forest = build_hierarchy(LinkedNode(MAIN_TREE))

    assert subtree_end(forest[0]) == 38
    assert folding_ranges(forest, LineIndex(MAIN)) == [
        {"start_line": 0, "end_line": 2, "kind": "region"},
    ]


def test_collect_symbols_qualifies_names():
    forest = build_hierarchy(LinkedNode(MAIN_TREE))
    symbols = collect_symbols(forest, "main.typ", LineIndex(MAIN))

    assert [s["qualified_name"] for s in symbols] == [
        "Intro",
        "Intro.f",
        "Intro.Setup",
        "Intro.Setup.setup",
    ]
    assert symbols[1]["id"] == "main-typ::Intro.f"
    assert symbols[1]["parent"] == "main-typ::Intro"
    assert symbols[1]["byte_offset"] == 13
    assert symbols[1]["byte_length"] == 8
    assert symbols[0]["parent"] is None


def test_collect_symbols_skips_groups_and_comments():
    forest = build_hierarchy(LinkedNode(BLOCKS_TREE), ScopeConfiguration.BRACED)

    assert collect_symbols(forest, "blocks.typ", LineIndex(BLOCKS)) == []


def test_index_folder(fake_parser, workspace, storage_path):
    (workspace / "broken.typ").write_text(BROKEN, encoding="utf-8")

    result = index_folder(str(workspace), storage_path=storage_path)

    assert result["success"] is True
    assert result["workspace"] == "thesis"
    assert result["documents"] == ["main.typ", "chapters/notes.typ"]
    assert result["document_count"] == 2
    assert result["symbol_count"] == 4
    assert result["warnings"] == ["Outline analysis failed for broken.typ"]


def test_index_folder_errors(tmp_path, storage_path):
    assert index_folder(str(tmp_path / "missing"), storage_path=storage_path)["success"] is False

    (tmp_path / "empty").mkdir()
    result = index_folder(str(tmp_path / "empty"), storage_path=storage_path)
    assert result["error"] == "No Typst documents found"


def test_search_and_get_symbol(fake_parser, workspace, storage_path):
    index_folder(str(workspace), storage_path=storage_path)

    result = search_symbols("thesis", "setup", storage_path=storage_path)
    assert [r["qualified_name"] for r in result["results"]] == ["Intro.Setup", "Intro.Setup.setup"]
    assert result["results"][0]["score"] == 25

    labels = search_symbols("thesis", "setup", kind="label", storage_path=storage_path)
    assert [r["kind"] for r in labels["results"]] == ["label"]

    symbol = get_symbol("thesis", "main-typ::Intro.f", storage_path=storage_path)
    assert symbol["source"] == "f(x) = x"
    assert symbol["line"] == 2
    assert symbol["parent"] == "main-typ::Intro"


def test_search_errors(fake_parser, workspace, storage_path):
    assert "error" in search_symbols("nope", "x", storage_path=storage_path)

    index_folder(str(workspace), storage_path=storage_path)
    assert "error" in search_symbols("thesis", "x", kind="class", storage_path=storage_path)
    assert "error" in get_symbol("thesis", "main-typ::missing", storage_path=storage_path)


def test_list_workspaces(fake_parser, workspace, storage_path):
    assert list_workspaces(storage_path=storage_path) == {
        "count": 0, "document_total": 0, "symbol_total": 0, "workspaces": [],
    }

    index_folder(str(workspace), storage_path=storage_path)
    result = list_workspaces(storage_path=storage_path)

    assert result["count"] == 1
    assert result["workspaces"][0]["workspace"] == "thesis"
    assert result["workspaces"][0]["document_count"] == 2
    assert result["workspaces"][0]["symbol_count"] == 4
    assert result["document_total"] == 2
    assert result["symbol_total"] == 4
