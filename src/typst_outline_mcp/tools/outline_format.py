"""Shared conversion of outline forests into tool output."""

from pathlib import Path
from typing import Optional

from ..parser import LANGUAGE_EXTENSIONS, LineIndex, SymbolNode, make_symbol_id, to_lsp_symbol_kind


def node_to_dict(node: SymbolNode, lines: LineIndex) -> dict:
    """Convert SymbolNode to output dict."""
    entry = node.entry
    start, end = entry.range
    lsp_kind = to_lsp_symbol_kind(entry.kind)

    result = {
        "name": entry.name,
        "kind": entry.kind.label(),
        "lsp_kind": int(lsp_kind) if lsp_kind is not None else None,
        "line": lines.line_of(start) + 1,
        "end_line": lines.end_line_of(entry.range) + 1,
        "range": [start, end],
    }
    if entry.kind.is_heading:
        result["level"] = entry.kind.level

    if node.children:
        result["children"] = [node_to_dict(c, lines) for c in node.children]

    return result


def collect_symbols(
    forest: list[SymbolNode],
    file_path: str,
    lines: LineIndex,
    parent: Optional[dict] = None,
    seen: Optional[dict] = None,
) -> list[dict]:
    """Flatten the protocol-facing symbols of an outline for indexing.

    Groups and comment runs are not symbols, but their contents are kept
    under the nearest symbol that encloses them.
    """
    if seen is None:
        seen = {}
    symbols = []

    for node in forest:
        entry = node.entry
        lsp_kind = to_lsp_symbol_kind(entry.kind)
        current = parent

        if lsp_kind is not None:
            qualified_name = entry.name
            if parent:
                qualified_name = f"{parent['qualified_name']}.{entry.name}"

            symbol_id = make_symbol_id(file_path, qualified_name)
            seen[symbol_id] = seen.get(symbol_id, 0) + 1
            if seen[symbol_id] > 1:
                symbol_id = f"{symbol_id}~{seen[symbol_id]}"

            start, end = entry.range
            current = {
                "id": symbol_id,
                "file": file_path,
                "name": entry.name,
                "qualified_name": qualified_name,
                "kind": entry.kind.label(),
                "lsp_kind": int(lsp_kind),
                "parent": parent["id"] if parent else None,
                "line": lines.line_of(start) + 1,
                "end_line": lines.end_line_of(entry.range) + 1,
                "byte_offset": start,
                "byte_length": end - start,
            }
            symbols.append(current)

        if node.children:
            symbols.extend(collect_symbols(node.children, file_path, lines, current, seen))

    return symbols


def subtree_end(node: SymbolNode) -> int:
    """End offset of a node including everything nested under it."""
    end = node.entry.range[1]
    for child in node.children or []:
        end = max(end, subtree_end(child))
    return end


def load_document(path: str) -> tuple[Optional[str], Optional[str], Optional[str]]:
    """Read a document from disk.

    Returns:
        (content, language, error); error is set when the file is unusable
    """
    file_path = Path(path).expanduser()

    if not file_path.is_file():
        return None, None, f"File not found: {path}"

    language = LANGUAGE_EXTENSIONS.get(file_path.suffix)
    if not language:
        return None, None, f"Unsupported file type: {file_path.suffix or path}"

    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        return None, None, f"Failed to read {path}: {e}"

    return content, language, None
