"""List the Typst workspaces in the index store."""

from typing import Optional

from ..storage import IndexStore


def list_workspaces(storage_path: Optional[str] = None) -> dict:
    """List every workspace that index_folder has outlined.

    A workspace is one indexed folder of `.typ` documents, stored under the
    folder's name. Unreadable index files are skipped.

    Args:
        storage_path: Index directory (default ~/.typst-outline/)

    Returns:
        Dict with the workspace count, documents and symbols summed over all
        workspaces, and per workspace its name, index time and counts
    """
    workspaces = IndexStore(base_path=storage_path).list_workspaces()

    return {
        "count": len(workspaces),
        "document_total": sum(w["document_count"] for w in workspaces),
        "symbol_total": sum(w["symbol_count"] for w in workspaces),
        "workspaces": workspaces,
    }
