"""
hql.reader.spans - Source positions and spans

Positions locate a single character (1-based line and column plus a 0-based
character offset). Spans are half-open offset ranges attached to every node
the reader produces. LineIndex converts between the two without touching the
tree.
"""

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A point in the source text."""

    line: int = 1  # 1-based line number
    column: int = 1  # 1-based column number
    offset: int = 0  # 0-based character offset

    def __repr__(self):
        return f"Position({self.line}:{self.column}@{self.offset})"

    def advance(self, text: str) -> "Position":
        """Return the position just past ``text`` when read from here."""
        line = self.line
        column = self.column
        for ch in text:
            if ch == "\n":
                line += 1
                column = 1
            else:
                column += 1
        return Position(line, column, self.offset + len(text))


START = Position(1, 1, 0)


def line_containing(source: str, offset: int) -> str:
    """Text of the line holding ``offset``, without its line terminator."""
    offset = max(0, min(offset, len(source)))
    start = source.rfind("\n", 0, offset) + 1
    end = source.find("\n", offset)
    if end == -1:
        end = len(source)
    return source[start:end].rstrip("\r")


@dataclass(frozen=True)
class Span:
    """Half-open range of character offsets ``[start, end)``."""

    start: int
    end: int

    def __repr__(self):
        return f"Span({self.start}, {self.end})"

    def __len__(self):
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def encloses(self, other: "Span") -> bool:
        """True if ``other`` lies entirely within this span."""
        return self.start <= other.start and other.end <= self.end

    def text(self, source: str) -> str:
        return source[self.start : self.end]


class LineIndex:
    """
    Offset <-> line/column conversion for one source string.

    Built once per document; lookups are a binary search over line starts.
    """

    def __init__(self, source: str):
        self.source = source
        self.line_starts = [0]
        for i, ch in enumerate(source):
            if ch == "\n":
                self.line_starts.append(i + 1)

    def position(self, offset: int) -> Position:
        """Convert a character offset to a Position (clamped to the source)."""
        offset = max(0, min(offset, len(self.source)))
        line_idx = bisect_right(self.line_starts, offset) - 1
        return Position(line_idx + 1, offset - self.line_starts[line_idx] + 1, offset)

    def offset(self, line: int, column: int) -> int:
        """Convert a 1-based line/column pair to a character offset."""
        if line < 1:
            return 0
        if line > len(self.line_starts):
            return len(self.source)
        start = self.line_starts[line - 1]
        if line < len(self.line_starts):
            line_end = self.line_starts[line] - 1
        else:
            line_end = len(self.source)
        return min(start + max(column - 1, 0), line_end)

    def line_text(self, line: int) -> str:
        """Text of a 1-based line without its line terminator."""
        if line < 1 or line > len(self.line_starts):
            return ""
        start = self.line_starts[line - 1]
        end = self.source.find("\n", start)
        if end == -1:
            end = len(self.source)
        return self.source[start:end].rstrip("\r")


__all__ = ["Position", "Span", "LineIndex", "START", "line_containing"]
