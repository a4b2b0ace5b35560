"""
hql.reader.lexer - Tokenizer for HQL source code

Converts source text into a flat list of Tokens, each carrying its start and
end Position. Comments and whitespace are consumed here and never reach the
reader.

At every position the rules are tried in a fixed order:

1. Special tokens: ``#[`` and ``~@``, then ``( ) [ ] { } . : , ' ~`` and backtick
2. String literals, with ``\\"`` and ``\\\\`` escapes, possibly multi-line
3. Comments: ``;`` or ``//`` to end of line, ``/* ... */`` blocks
4. Whitespace
5. Symbol runs, tagged ``number`` when they read as a decimal literal
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hql.reader.errors import ParseError, ParseErrorKind
from hql.reader.spans import START, Position, Span


class TokenKind(Enum):
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"
    SET_OPEN = "#["
    QUOTE = "'"
    QUASIQUOTE = "`"
    UNQUOTE = "~"
    UNQUOTE_SPLICING = "~@"
    DOT = "."
    COLON = ":"
    COMMA = ","
    STRING = "string"
    NUMBER = "number"
    SYMBOL = "symbol"


@dataclass(frozen=True)
class Token:
    """A classified lexeme with its source location."""

    kind: TokenKind
    text: str
    start: Position
    end: Position

    def __repr__(self):
        return f"Token({self.kind.name}, {self.text!r}, {self.start.line}:{self.start.column})"

    @property
    def span(self) -> Span:
        return Span(self.start.offset, self.end.offset)


# Two-character specials must be tried before their one-character prefixes
_MULTI_SPECIALS = {
    "#[": TokenKind.SET_OPEN,
    "~@": TokenKind.UNQUOTE_SPLICING,
}
_SINGLE_SPECIALS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ".": TokenKind.DOT,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    "'": TokenKind.QUOTE,
    "`": TokenKind.QUASIQUOTE,
    "~": TokenKind.UNQUOTE,
}

STRING_RE = re.compile(r'"(?:\\.|[^\\"])*"', re.DOTALL)
WHITESPACE_RE = re.compile(r"\s+")
# A colon ends a symbol run so that `{a: 1}` reads as key, colon, value
SYMBOL_RE = re.compile(r"[^\s(){}\[\]\"'`;,:]+")
NUMBER_RE = re.compile(r"[+-]?[0-9]+(?:\.[0-9]*)?")


def is_number_literal(text: str) -> bool:
    return NUMBER_RE.fullmatch(text) is not None


class Lexer:
    """
    Single-use tokenizer over one source string.

    In strict mode the first lexical error is raised. With ``errors`` given,
    lexical errors are appended there instead and an unterminated string ends
    the token stream. There is no other lexical error: any character that is
    not a delimiter, quote, comment start or whitespace begins a symbol run.
    """

    def __init__(
        self,
        source: str,
        start: Optional[Position] = None,
        errors: Optional[list[ParseError]] = None,
        document: Optional[str] = None,
    ):
        self.source = source
        self.pos = start or START
        self.errors = errors
        # Full document text, used for error excerpts when lexing a fragment
        self.document = document if document is not None else source
        self.tokens: list[Token] = []

    def _consume(self, text: str) -> tuple[Position, Position]:
        start = self.pos
        self.pos = start.advance(text)
        return start, self.pos

    def _emit(self, kind: TokenKind, text: str) -> None:
        start, end = self._consume(text)
        self.tokens.append(Token(kind, text, start, end))

    def _fail(self, message: str) -> None:
        err = ParseError.at(message, self.pos, self.document, ParseErrorKind.LEXICAL)
        if self.errors is None:
            raise err
        self.errors.append(err)

    def run(self) -> list[Token]:
        src = self.source
        n = len(src)
        i = 0
        while i < n:
            c = src[i]
            pair = src[i : i + 2]

            if pair in _MULTI_SPECIALS:
                self._emit(_MULTI_SPECIALS[pair], pair)
                i += 2
                continue
            if c in _SINGLE_SPECIALS:
                self._emit(_SINGLE_SPECIALS[c], c)
                i += 1
                continue

            if c == '"':
                m = STRING_RE.match(src, i)
                if m is None:
                    self._fail("Unterminated string")
                    # Tolerant: the rest of the input belongs to the string
                    self._consume(src[i:])
                    break
                self._emit(TokenKind.STRING, m.group())
                i = m.end()
                continue

            # comments
            if c == ";" or pair == "//":
                end = src.find("\n", i)
                if end == -1:
                    end = n
                self._consume(src[i:end])
                i = end
                continue
            if pair == "/*":
                end = src.find("*/", i + 2)
                end = n if end == -1 else end + 2
                self._consume(src[i:end])
                i = end
                continue

            m = WHITESPACE_RE.match(src, i)
            if m:
                self._consume(m.group())
                i = m.end()
                continue

            # Every character not handled above starts a symbol run
            m = SYMBOL_RE.match(src, i)
            text = m.group()
            kind = TokenKind.NUMBER if is_number_literal(text) else TokenKind.SYMBOL
            self._emit(kind, text)
            i = m.end()
        return self.tokens


def tokenize(source: str, start: Optional[Position] = None) -> list[Token]:
    """
    Tokenize source code into a list of Tokens.

    ``start`` is the position of ``source[0]`` when the text is a fragment of
    a larger document; token positions are then absolute in that document.
    Raises ParseError on an unterminated string.
    """
    return Lexer(source, start).run()


__all__ = ["TokenKind", "Token", "Lexer", "tokenize", "is_number_literal"]
