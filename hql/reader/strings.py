"""
hql.reader.strings - String literal unescaping and interpolation

A string token is split into segments: literal text (unescaped) and
interpolated expression source taken from ``\\(...)``. Every segment records
its absolute start and end Position so the reader can give the parts of an
interpolated string their own spans.

Only ``\\"`` and ``\\\\`` are escapes. Any other backslash pair is kept
verbatim, so ``"a\\nb"`` holds a backslash followed by ``n``.
"""

from dataclasses import dataclass
from typing import Optional

from hql.reader.errors import ParseError
from hql.reader.spans import Position

TEXT = "text"
EXPR = "expr"


@dataclass(frozen=True)
class Segment:
    kind: str  # TEXT or EXPR
    value: str  # unescaped text, or raw source of the interpolated expression
    start: Position
    end: Position


class _Cursor:
    """Maps indexes in the literal back to Positions, moving forward only."""

    def __init__(self, text: str, start: Position):
        self.text = text
        self.index = 0
        self.pos = start

    def at(self, index: int) -> Position:
        if index < self.index:
            raise ValueError("cursor cannot move backwards")
        self.pos = self.pos.advance(self.text[self.index : index])
        self.index = index
        return self.pos


def escape(value: str) -> str:
    """Quote backslashes and double quotes."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def split_string(
    text: str, start: Position, document: Optional[str] = None
) -> list[Segment]:
    """
    Split a string token (including its quotes) into segments.

    Empty text segments are dropped. Raises ParseError for a ``\\(`` whose
    parenthesis is never balanced inside the literal.
    """
    cursor = _Cursor(text, start)
    body_end = len(text) - 1
    segments: list[Segment] = []
    buf: list[str] = []
    buf_start = 1
    i = 1

    def flush(end: int) -> None:
        if buf:
            seg_start = cursor.at(buf_start)
            segments.append(Segment(TEXT, "".join(buf), seg_start, cursor.at(end)))
            buf.clear()

    while i < body_end:
        c = text[i]
        if c != "\\" or i + 1 >= body_end:
            buf.append(c)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt != "(":
            buf.append(nxt if nxt in '"\\' else c + nxt)
            i += 2
            continue

        # \( ... ) interpolation
        flush(i)
        depth = 1
        j = i + 2
        while j < body_end:
            if text[j] == "(":
                depth += 1
            elif text[j] == ")":
                depth -= 1
                if depth == 0:
                    break
            j += 1
        if depth != 0:
            raise ParseError.at("Unclosed string interpolation", cursor.at(i), document)
        expr_start = cursor.at(i + 2)
        segments.append(Segment(EXPR, text[i + 2 : j], expr_start, cursor.at(j)))
        i = j + 1
        buf_start = i

    flush(body_end)
    return segments


def is_interpolated(segments: list[Segment]) -> bool:
    return any(seg.kind == EXPR for seg in segments)


__all__ = [
    "Segment",
    "TEXT",
    "EXPR",
    "escape",
    "split_string",
    "is_interpolated",
]
