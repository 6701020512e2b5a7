"""Error types raised while building outlines."""

from typing import Any


class OutlineError(Exception):
    """Base error carrying structured context for the log line."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details


class HierarchyError(OutlineError):
    """The syntax tree disagrees with itself; the outline is abandoned."""

    @classmethod
    def cast_failed(cls, node) -> "HierarchyError":
        return cls(
            f"cast to ast node failed: {node!r}",
            kind=node.kind.value,
            range=list(node.range),
        )

    @classmethod
    def too_deep(cls, node, limit: int) -> "HierarchyError":
        return cls(
            f"syntax nesting deeper than {limit} levels at {node!r}",
            kind=node.kind.value,
            limit=limit,
        )

    @classmethod
    def source_too_deep(cls, node_type: str, offset: int, limit: int) -> "HierarchyError":
        return cls(
            f"source nesting deeper than {limit} levels at byte {offset}",
            node_type=node_type,
            offset=offset,
            limit=limit,
        )
