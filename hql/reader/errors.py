"""
hql.reader.errors - The reader's single error type

Every failure of the lexer or the reader is a ParseError. The kind field
separates lexical problems (unterminated strings) from
structural ones (unbalanced delimiters, malformed literals), but callers only
ever need to catch one class.
"""

from enum import Enum
from typing import Optional

from hql.reader.spans import Position, line_containing


class ParseErrorKind(Enum):
    LEXICAL = "lexical"
    STRUCTURAL = "structural"


class ParseError(SyntaxError):
    """
    Raised when source text cannot be read.

    Attributes:
        message: Human-readable description ("Unclosed list", ...)
        position: Where the problem was detected
        source_excerpt: The source line containing ``position``
        kind: LEXICAL or STRUCTURAL
    """

    def __init__(
        self,
        message: str,
        position: Position,
        source_excerpt: str = "",
        kind: ParseErrorKind = ParseErrorKind.STRUCTURAL,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.source_excerpt = source_excerpt
        self.kind = kind
        # SyntaxError fields, so generic tooling can show the location too
        self.lineno = position.line
        self.offset = position.column
        self.text = source_excerpt

    @classmethod
    def at(
        cls,
        message: str,
        position: Position,
        source: Optional[str] = None,
        kind: ParseErrorKind = ParseErrorKind.STRUCTURAL,
    ) -> "ParseError":
        """Build an error, cutting the excerpt for ``position`` out of ``source``."""
        excerpt = line_containing(source, position.offset) if source else ""
        return cls(message, position, excerpt, kind)

    def __str__(self):
        return (
            f"{self.message} at line {self.position.line}, "
            f"column {self.position.column}"
        )

    def __repr__(self):
        return f"ParseError({self.message!r}, {self.position!r})"

    def __reduce__(self):
        return (
            self.__class__,
            (self.message, self.position, self.source_excerpt, self.kind),
        )

    def format_message(self) -> str:
        """Render the error with the offending line and a caret under the column."""
        result = str(self)
        if self.source_excerpt:
            pointer = " " * (self.position.column - 1) + "^"
            result += f"\n\n{self.source_excerpt}\n{pointer}\n"
        return result

    @property
    def suggestion(self) -> str:
        msg = self.message.lower()
        if msg.startswith(("unexpected ')'", "unexpected ']'", "unexpected '}'")):
            return (
                "Check for mismatched parentheses or brackets. You might have an "
                "extra closing delimiter or be missing an opening one."
            )
        if msg.startswith("unclosed"):
            return "Add the missing closing delimiter."
        if "end of input" in msg or "unterminated" in msg:
            return (
                "Your expression is incomplete. Check for unclosed parentheses, "
                "brackets, or strings."
            )
        return (
            "Review your syntax carefully, paying attention to brackets, "
            "quotes, and other delimiters."
        )


__all__ = ["ParseError", "ParseErrorKind"]
