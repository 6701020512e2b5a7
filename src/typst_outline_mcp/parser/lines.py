"""Byte offset to line/column conversion."""

import bisect


class LineIndex:
    """Line start offsets of a document, for zero-based line lookups."""

    def __init__(self, content: str):
        data = content.encode("utf-8")
        self.length = len(data)
        self.line_starts = [0]
        start = data.find(b"\n")
        while start != -1:
            self.line_starts.append(start + 1)
            start = data.find(b"\n", start + 1)

    def line_of(self, offset: int) -> int:
        offset = max(0, min(offset, self.length))
        return bisect.bisect_right(self.line_starts, offset) - 1

    def position(self, offset: int) -> tuple[int, int]:
        """Zero-based (line, byte column) of a byte offset."""
        line = self.line_of(offset)
        return line, max(0, min(offset, self.length)) - self.line_starts[line]

    def end_line_of(self, span: tuple[int, int]) -> int:
        """Line holding the last byte of a half-open span."""
        start, end = span
        return self.line_of(max(start, end - 1))
