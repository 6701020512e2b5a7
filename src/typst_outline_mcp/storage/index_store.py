"""Workspace outline index with save/load and byte-offset content retrieval."""

import fnmatch
import json
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..log import get_logger
from ..parser.hierarchy import SymbolNode

logger = get_logger(__name__)


@dataclass
class OutlineIndex:
    """Index of the outlines of a workspace's Typst documents."""
    workspace: str               # Workspace name (folder name)
    indexed_at: str              # ISO timestamp
    documents: list[str]         # Indexed document paths (relative)
    symbols: list[dict]          # Flattened protocol-facing symbols
    outlines: dict[str, list]    # Document path -> serialized outline forest

    def get_symbol(self, symbol_id: str) -> Optional[dict]:
        """Find a symbol by ID."""
        for sym in self.symbols:
            if sym.get("id") == symbol_id:
                return sym
        return None

    def get_outline(self, document: str) -> Optional[list[SymbolNode]]:
        """Deserialize the stored outline of one document."""
        data = self.outlines.get(document)
        if data is None:
            return None
        return [SymbolNode.from_dict(node) for node in data]

    def search(self, query: str, kind: Optional[str] = None, file_pattern: Optional[str] = None) -> list[dict]:
        """Search symbols with weighted scoring."""
        query_lower = query.lower()
        query_words = set(query_lower.split())

        scored = []
        for sym in self.symbols:
            # Apply filters
            if kind and sym.get("kind") != kind:
                continue
            if file_pattern and not self._match_pattern(sym.get("file", ""), file_pattern):
                continue

            score = score_symbol(sym, query_lower, query_words)
            if score > 0:
                scored.append((score, sym))

        # Sort by score descending, document order on ties
        scored.sort(key=lambda x: x[0], reverse=True)
        return [sym for _, sym in scored]

    def _match_pattern(self, file_path: str, pattern: str) -> bool:
        """Match file path against glob pattern."""
        return fnmatch.fnmatch(file_path, pattern) or fnmatch.fnmatch(file_path, f"*/{pattern}")


def score_symbol(sym: dict, query_lower: str, query_words: set) -> int:
    """Calculate search score for a symbol."""
    score = 0

    # 1. Exact name match (highest weight)
    name_lower = sym.get("name", "").lower()
    if query_lower == name_lower:
        score += 20
    elif query_lower in name_lower:
        score += 10

    # 2. Name word overlap
    for word in query_words:
        if word in name_lower:
            score += 5

    # 3. Enclosing symbol match
    qualified_lower = sym.get("qualified_name", "").lower()
    for word in query_words:
        if word in qualified_lower and word not in name_lower:
            score += 1

    return score


class IndexStore:
    """Storage for workspace indexes with byte-offset content retrieval."""

    def __init__(self, base_path: Optional[str] = None):
        """Initialize store.

        Args:
            base_path: Base directory for storage. Defaults to ~/.typst-outline/
        """
        if base_path:
            self.base_path = Path(base_path)
        else:
            self.base_path = Path.home() / ".typst-outline"

        self.base_path.mkdir(parents=True, exist_ok=True)

    def _index_path(self, workspace: str) -> Path:
        """Path to index JSON file."""
        return self.base_path / f"{workspace}.json"

    def _content_dir(self, workspace: str) -> Path:
        """Path to raw content directory."""
        return self.base_path / workspace

    def save_index(
        self,
        workspace: str,
        documents: list[str],
        symbols: list[dict],
        outlines: dict[str, list[SymbolNode]],
        raw_files: dict[str, str],
    ) -> OutlineIndex:
        """Save index and raw documents to storage.

        Args:
            workspace: Workspace name
            documents: List of indexed document paths
            symbols: Flattened symbol dicts
            outlines: Dict mapping document path to its outline forest
            raw_files: Dict mapping document path to raw content

        Returns:
            OutlineIndex object
        """
        index = OutlineIndex(
            workspace=workspace,
            indexed_at=datetime.now().isoformat(),
            documents=documents,
            symbols=symbols,
            outlines={
                path: [node.to_dict() for node in forest]
                for path, forest in outlines.items()
            },
        )

        # Save index JSON
        index_path = self._index_path(workspace)
        with open(index_path, "w", encoding="utf-8") as f:
            json.dump(self._index_to_dict(index), f, indent=2)

        # Save raw documents
        content_dir = self._content_dir(workspace)
        content_dir.mkdir(parents=True, exist_ok=True)

        for file_path, content in raw_files.items():
            file_dest = content_dir / file_path
            file_dest.parent.mkdir(parents=True, exist_ok=True)
            with open(file_dest, "w", encoding="utf-8", newline="") as f:
                f.write(content)

        logger.info("index saved", workspace=workspace, documents=len(documents), symbols=len(symbols))
        return index

    def load_index(self, workspace: str) -> Optional[OutlineIndex]:
        """Load index from storage."""
        index_path = self._index_path(workspace)

        if not index_path.exists():
            return None

        with open(index_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return OutlineIndex(
            workspace=data["workspace"],
            indexed_at=data["indexed_at"],
            documents=data["documents"],
            symbols=data["symbols"],
            outlines=data.get("outlines", {}),
        )

    def get_symbol_content(self, workspace: str, symbol_id: str) -> Optional[str]:
        """Read symbol source using stored byte offsets.

        No re-parsing, just seek + read.
        """
        index = self.load_index(workspace)
        if not index:
            return None

        symbol = index.get_symbol(symbol_id)
        if not symbol:
            return None

        file_path = self._content_dir(workspace) / symbol["file"]

        if not file_path.exists():
            return None

        with open(file_path, "rb") as f:
            f.seek(symbol["byte_offset"])
            source_bytes = f.read(symbol["byte_length"])

        return source_bytes.decode("utf-8", errors="replace")

    def list_workspaces(self) -> list[dict]:
        """List all indexed workspaces."""
        workspaces = []

        for index_file in sorted(self.base_path.glob("*.json")):
            try:
                with open(index_file, "r", encoding="utf-8") as f:
                    data = json.load(f)

                workspaces.append({
                    "workspace": data["workspace"],
                    "indexed_at": data["indexed_at"],
                    "symbol_count": len(data["symbols"]),
                    "document_count": len(data["documents"]),
                })
            except (OSError, ValueError, KeyError) as e:
                logger.warning("skipping unreadable index", path=str(index_file), error=str(e))
                continue

        return workspaces

    def delete_index(self, workspace: str) -> bool:
        """Delete an index and its raw documents."""
        index_path = self._index_path(workspace)
        content_dir = self._content_dir(workspace)

        deleted = False

        if index_path.exists():
            index_path.unlink()
            deleted = True

        if content_dir.exists():
            shutil.rmtree(content_dir)
            deleted = True

        return deleted

    def _index_to_dict(self, index: OutlineIndex) -> dict:
        """Convert OutlineIndex to dict."""
        return {
            "workspace": index.workspace,
            "indexed_at": index.indexed_at,
            "documents": index.documents,
            "symbols": index.symbols,
            "outlines": index.outlines,
        }
