"""Storage package for index save/load operations."""

from .index_store import OutlineIndex, IndexStore, score_symbol

__all__ = ["OutlineIndex", "IndexStore", "score_symbol"]
