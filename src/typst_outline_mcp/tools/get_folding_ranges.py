"""Get folding ranges - foldable blocks, comment runs and heading sections."""

from lsprotocol import types

from ..parser import KindTag, LineIndex, ScopeConfiguration, SymbolNode, extract_outline
from .outline_format import load_document, subtree_end


def folding_ranges(forest: list[SymbolNode], lines: LineIndex) -> list[dict]:
    """Folding ranges for every outline entry spanning several lines.

    A heading folds together with everything nested under it.
    """
    ranges = []
    for node in forest:
        entry = node.entry
        start, end = entry.range
        if entry.kind.is_heading:
            end = subtree_end(node)

        start_line = lines.line_of(start)
        end_line = lines.end_line_of((start, end))
        if end_line > start_line:
            if entry.kind.tag is KindTag.COMMENT_RUN:
                kind = types.FoldingRangeKind.Comment
            else:
                kind = types.FoldingRangeKind.Region
            ranges.append({
                "start_line": start_line,
                "end_line": end_line,
                "kind": kind.value,
            })

        if node.children:
            ranges.extend(folding_ranges(node.children, lines))

    return ranges


def get_folding_ranges(path: str) -> dict:
    """Get folding ranges of a document (zero-based lines).

    Args:
        path: Path to a .typ file

    Returns:
        Dict with folding ranges in document order
    """
    content, language, error = load_document(path)
    if error:
        return {"error": error}

    forest = extract_outline(content, ScopeConfiguration.BRACED, language)
    if forest is None:
        return {"error": f"Outline analysis failed for {path}"}

    ranges = folding_ranges(forest, LineIndex(content))
    return {
        "file": path,
        "range_count": len(ranges),
        "ranges": ranges,
    }
