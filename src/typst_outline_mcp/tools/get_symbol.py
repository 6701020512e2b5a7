"""Get symbol source text."""

from typing import Optional

from ..storage import IndexStore


def get_symbol(
    workspace: str,
    symbol_id: str,
    storage_path: Optional[str] = None
) -> dict:
    """Get the source of a specific symbol.

    Args:
        workspace: Workspace name
        symbol_id: Symbol ID from search_symbols
        storage_path: Custom storage path

    Returns:
        Dict with symbol details and source text
    """
    store = IndexStore(base_path=storage_path)
    index = store.load_index(workspace)

    if not index:
        return {"error": f"Workspace not indexed: {workspace}"}

    symbol = index.get_symbol(symbol_id)

    if not symbol:
        return {"error": f"Symbol not found: {symbol_id}"}

    # Get source via byte-offset read
    source = store.get_symbol_content(workspace, symbol_id)

    return {
        "id": symbol["id"],
        "kind": symbol["kind"],
        "name": symbol["name"],
        "qualified_name": symbol["qualified_name"],
        "file": symbol["file"],
        "line": symbol["line"],
        "end_line": symbol["end_line"],
        "parent": symbol.get("parent"),
        "source": source or ""
    }
