"""Search symbols across an indexed workspace."""

from typing import Optional

from ..storage import IndexStore, score_symbol

SYMBOL_KINDS = ["heading", "label", "function", "variable"]


def search_symbols(
    workspace: str,
    query: str,
    kind: Optional[str] = None,
    file_pattern: Optional[str] = None,
    max_results: int = 10,
    storage_path: Optional[str] = None
) -> dict:
    """Search for symbols matching a query.

    Args:
        workspace: Workspace name
        query: Search query
        kind: Optional filter by symbol kind
        file_pattern: Optional glob pattern to filter files
        max_results: Maximum results to return
        storage_path: Custom storage path

    Returns:
        Dict with search results
    """
    if kind and kind not in SYMBOL_KINDS:
        return {"error": f"Unknown symbol kind: {kind}"}

    store = IndexStore(base_path=storage_path)
    index = store.load_index(workspace)

    if not index:
        return {"error": f"Workspace not indexed: {workspace}"}

    results = index.search(query, kind=kind, file_pattern=file_pattern)

    query_lower = query.lower()
    query_words = set(query_lower.split())

    scored_results = []
    for sym in results[:max_results]:
        scored_results.append({
            "id": sym["id"],
            "kind": sym["kind"],
            "lsp_kind": sym["lsp_kind"],
            "name": sym["name"],
            "qualified_name": sym["qualified_name"],
            "file": sym["file"],
            "line": sym["line"],
            "score": score_symbol(sym, query_lower, query_words)
        })

    return {
        "workspace": workspace,
        "query": query,
        "result_count": len(scored_results),
        "results": scored_results
    }
