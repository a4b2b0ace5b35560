"""
hql.reader.reader - Recursive-descent reader for HQL

Consumes the lexer's tokens and produces top-level expression trees. Every
node gets its span here, at construction time, from the tokens it was read
from.

Surface syntax is desugared while reading:

    [1, 2]          -> (vector 1 2)          []  -> (empty-array)
    {a: 1}          -> (hash-map a 1)        {}  -> (empty-map)
    #[1, 2]         -> (hash-set 1 2)        #[] -> (empty-set)
    'x `x ~x ~@x    -> (quote x) (quasiquote x) (unquote x) (unquote-splicing x)
    "hi \\(name)"   -> (str "hi " name)
    obj.some-prop   -> (get obj "some-prop")
    (enum OS : Int) -> (enum OS:Int)
    (fn f () -> [T] ...) keeps [T] as the array type (T)

Strict mode raises the first ParseError. Tolerant mode records errors and
recovers (see Reader.read).
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from hql.reader.errors import ParseError
from hql.reader.lexer import Lexer, Token, TokenKind
from hql.reader.options import (
    DEFAULT_OPTIONS,
    TOLERANT_OPTIONS,
    DottedAccess,
    ReaderOptions,
)
from hql.reader.spans import START, Position, Span
from hql.reader.strings import TEXT, Segment, is_interpolated, split_string
from hql.reader.types import (
    EMPTY_ARRAY,
    EMPTY_MAP,
    EMPTY_SET,
    GET,
    HASH_MAP,
    HASH_SET,
    QUASIQUOTE,
    QUOTE,
    STR,
    UNQUOTE,
    UNQUOTE_SPLICING,
    VECTOR,
    Boolean,
    Expr,
    List,
    Nil,
    Number,
    String,
    Symbol,
)

logger = logging.getLogger(__name__)

_WRAPPERS = {
    TokenKind.QUOTE: QUOTE,
    TokenKind.QUASIQUOTE: QUASIQUOTE,
    TokenKind.UNQUOTE: UNQUOTE,
    TokenKind.UNQUOTE_SPLICING: UNQUOTE_SPLICING,
}
_CLOSERS = (TokenKind.RPAREN, TokenKind.RBRACKET, TokenKind.RBRACE)
_LITERALS = {"true": Boolean(True), "false": Boolean(False), "nil": Nil()}
_TYPED_FN_HEADS = ("fn", "fx")
# Deepest nesting of forms read before giving up with "Nesting too deep".
# Each level costs a few Python frames, so this stays well below the
# interpreter recursion limit.
MAX_DEPTH = 150


class Reader:
    """
    Reader that parses tokens into expressions with source spans.

    Args:
        tokens: Output of the lexer
        source: The full document text, used for error excerpts
        options: Reader configuration
        errors: List that receives recovered errors in tolerant mode
    """

    def __init__(
        self,
        tokens: list[Token],
        source: str = "",
        options: Optional[ReaderOptions] = None,
        errors: Optional[list[ParseError]] = None,
    ):
        self.tokens = tokens
        self.i = 0
        self.source = source
        self.options = options or DEFAULT_OPTIONS
        self.errors = errors if errors is not None else []
        self.depth = 0

    def eof(self) -> bool:
        return self.i >= len(self.tokens)

    def peek(self) -> Optional[Token]:
        if self.eof():
            return None
        return self.tokens[self.i]

    def peek_kind(self) -> Optional[TokenKind]:
        tok = self.peek()
        return tok.kind if tok else None

    def next(self) -> Optional[Token]:
        tok = self.peek()
        self.i += 1
        return tok

    def _error(self, message: str, position: Position) -> ParseError:
        return ParseError.at(message, position, self.source)

    def _last_position(self) -> Position:
        return self.tokens[-1].start if self.tokens else START

    # =========================================================================
    # Top level
    # =========================================================================

    def read(self) -> list[Expr]:
        """
        Read all forms from the token stream.

        In tolerant mode a failing top-level form is dropped and reading
        resumes at the next line-initial token after the error. A stray
        closing delimiter at top level only drops that token. Collections
        left open at end of input are closed implicitly by _unclosed.
        """
        forms = []
        while not self.eof():
            if not self.options.tolerant:
                forms.append(self.read_form())
                continue
            start = self.i
            try:
                forms.append(self.read_form())
            except ParseError as err:
                self.errors.append(err)
                self._recover(start, err)
        return forms

    def _recover(self, start: int, err: ParseError) -> None:
        if self.tokens[start].kind in _CLOSERS:
            self.i = start + 1
        else:
            self.i = len(self.tokens)
            for k in range(start + 1, len(self.tokens)):
                tok = self.tokens[k]
                if tok.start.column == 1 and tok.start.offset > err.position.offset:
                    self.i = k
                    break
        logger.debug("Recovered from %s; resuming at token %d", err, self.i)

    def _unclosed(self, open_tok: Token, what: str) -> int:
        """Handle end of input inside a collection; returns the span end."""
        err = self._error(f"Unclosed {what}", open_tok.start)
        if not self.options.tolerant:
            raise err
        self.errors.append(err)
        logger.debug("Closing %s at end of input: %s", what, err)
        return self.tokens[-1].end.offset

    # =========================================================================
    # Forms
    # =========================================================================

    def read_form(self) -> Expr:
        """Read a single expression from the token stream."""
        tok = self.next()
        if tok is None:
            raise self._error("Unexpected end of input", self._last_position())
        if self.depth >= MAX_DEPTH:
            raise self._error("Nesting too deep", tok.start)
        self.depth += 1
        try:
            return self._read_token(tok)
        finally:
            self.depth -= 1

    def _read_token(self, tok: Token) -> Expr:
        kind = tok.kind
        if kind is TokenKind.LPAREN:
            return self._read_list(tok)
        if kind is TokenKind.LBRACKET:
            return self._read_vector(tok)
        if kind is TokenKind.LBRACE:
            return self._read_map(tok)
        if kind is TokenKind.SET_OPEN:
            return self._read_set(tok)
        if kind in _WRAPPERS:
            inner = self.read_form()
            return List(
                (Symbol(_WRAPPERS[kind], tok.span), inner),
                Span(tok.start.offset, inner.span.end),
            )
        if kind in _CLOSERS:
            raise self._error(f"Unexpected '{tok.text}'", tok.start)
        if kind is TokenKind.COMMA or kind is TokenKind.COLON:
            # Separators outside a collection pass through as symbols
            return Symbol(tok.text, tok.span)
        if kind is TokenKind.DOT:
            return self._read_dot_access(tok)
        if kind is TokenKind.STRING:
            return self._read_string(tok)
        if kind is TokenKind.NUMBER:
            return Number(float(tok.text), tok.span)
        return self._read_symbol(tok)

    def _read_list(self, open_tok: Token) -> List:
        first = self.peek()
        head = first.text if first and first.kind is TokenKind.SYMBOL else None
        items: list[Expr] = []
        while True:
            tok = self.peek()
            if tok is None:
                end = self._unclosed(open_tok, "list")
                break
            if tok.kind is TokenKind.RPAREN:
                self.next()
                end = tok.end.offset
                break
            if head == "enum" and len(items) == 2 and tok.kind is TokenKind.COLON:
                if isinstance(items[1], Symbol):
                    items[1] = self._read_enum_type(items[1])
                    continue
            if (
                head in _TYPED_FN_HEADS
                and tok.kind is TokenKind.SYMBOL
                and tok.text == "->"
            ):
                items.append(self.read_form())
                nxt = self.peek_kind()
                if nxt is TokenKind.LBRACKET:
                    items.append(self._read_array_type())
                elif nxt is not None:
                    items.append(self.read_form())
                continue
            items.append(self.read_form())
        return List(tuple(items), Span(open_tok.start.offset, end))

    def _read_enum_type(self, name: Symbol) -> Symbol:
        """(enum Name : Type ...) - fold the colon and type into the name."""
        colon = self.next()
        type_tok = self.peek()
        if type_tok is None or type_tok.kind is not TokenKind.SYMBOL:
            raise self._error("Expected type name after colon", colon.start)
        self.next()
        return Symbol(
            f"{name.name}:{type_tok.text}",
            Span(name.span.start, type_tok.end.offset),
        )

    def _read_array_type(self) -> List:
        """``-> [T]`` in a fn signature: the array type (T), not a vector."""
        open_tok = self.next()
        if self.eof():
            raise self._error("Unclosed array type notation", open_tok.start)
        inner = self.read_form()
        close = self.peek()
        if close is None or close.kind is not TokenKind.RBRACKET:
            raise self._error(
                "Missing closing bracket in array type notation", open_tok.start
            )
        self.next()
        return List((inner,), Span(open_tok.start.offset, close.end.offset))

    def _read_elements(
        self, open_tok: Token, close: TokenKind, what: str
    ) -> tuple[list[Expr], int]:
        """Read comma-optional elements up to ``close``."""
        items: list[Expr] = []
        while True:
            tok = self.peek()
            if tok is None:
                return items, self._unclosed(open_tok, what)
            if tok.kind is close:
                self.next()
                return items, tok.end.offset
            items.append(self.read_form())
            if self.peek_kind() is TokenKind.COMMA:
                self.next()

    def _collection(
        self, open_tok: Token, op: str, empty_op: str, items: list[Expr], end: int
    ) -> List:
        head = Symbol(op if items else empty_op, open_tok.span)
        return List((head, *items), Span(open_tok.start.offset, end))

    def _read_vector(self, open_tok: Token) -> List:
        items, end = self._read_elements(open_tok, TokenKind.RBRACKET, "vector")
        return self._collection(open_tok, VECTOR, EMPTY_ARRAY, items, end)

    def _read_set(self, open_tok: Token) -> List:
        items, end = self._read_elements(open_tok, TokenKind.RBRACKET, "set")
        return self._collection(open_tok, HASH_SET, EMPTY_SET, items, end)

    def _read_map(self, open_tok: Token) -> List:
        entries: list[Expr] = []
        while True:
            tok = self.peek()
            if tok is None:
                end = self._unclosed(open_tok, "map")
                break
            if tok.kind is TokenKind.RBRACE:
                self.next()
                end = tok.end.offset
                break
            key = self.read_form()
            colon = self.peek()
            if colon is None or colon.kind is not TokenKind.COLON:
                position = colon.start if colon else open_tok.start
                raise self._error("Expected ':' in map literal", position)
            self.next()
            entries.append(key)
            entries.append(self.read_form())
            if self.peek_kind() is TokenKind.COMMA:
                self.next()
        return self._collection(open_tok, HASH_MAP, EMPTY_MAP, entries, end)

    # =========================================================================
    # Atoms
    # =========================================================================

    def _read_dot_access(self, dot: Token) -> Symbol:
        """``.name`` - member access or enum case, joined into one symbol."""
        nxt = self.peek()
        if (
            nxt is None
            or nxt.kind not in (TokenKind.SYMBOL, TokenKind.NUMBER)
            or nxt.start.offset != dot.end.offset
        ):
            raise self._error("Expected property name after '.'", dot.start)
        self.next()
        return Symbol("." + nxt.text, Span(dot.start.offset, nxt.end.offset))

    def _read_symbol(self, tok: Token) -> Expr:
        text = tok.text
        if text in _LITERALS:
            return replace(_LITERALS[text], span=tok.span)
        if "." in text[1:-1] and not text.endswith("."):
            return self._read_dotted(tok)
        return Symbol(text, tok.span)

    def _read_dotted(self, tok: Token) -> Expr:
        text = tok.text
        head, _, rest = text.partition(".")
        policy = self.options.dotted_access
        if policy is DottedAccess.OPAQUE or (
            policy is DottedAccess.HYPHENATED and "-" not in rest
        ):
            return Symbol(text, tok.span)
        start = tok.start.offset
        return List(
            (
                Symbol(GET),
                Symbol(head, Span(start, start + len(head))),
                String(rest, Span(start + len(head) + 1, tok.end.offset)),
            ),
            tok.span,
        )

    def _read_string(self, tok: Token) -> Expr:
        segments = split_string(tok.text, tok.start, self.source)
        if not is_interpolated(segments):
            return String(segments[0].value if segments else "", tok.span)

        start = tok.start.offset
        parts: list[Expr] = [Symbol(STR, Span(start, start + 1))]
        for seg in segments:
            if seg.kind == TEXT:
                parts.append(String(seg.value, Span(seg.start.offset, seg.end.offset)))
            else:
                parts.append(self._read_interpolation(seg))
        return List(tuple(parts), tok.span)

    def _read_interpolation(self, seg: Segment) -> Expr:
        tokens = Lexer(seg.value, seg.start, document=self.source).run()
        if not tokens:
            raise self._error("Empty string interpolation", seg.start)
        sub = Reader(tokens, self.source, replace(self.options, tolerant=False))
        sub.depth = self.depth
        form = sub.read_form()
        if not sub.eof():
            raise self._error(
                "Expected a single expression in string interpolation",
                sub.peek().start,
            )
        return form


# =============================================================================
# Convenience Functions
# =============================================================================


@dataclass
class ParseResult:
    """Forms read from a document plus the errors recovered along the way."""

    forms: list[Expr]
    errors: list[ParseError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_document(
    source: str, options: Optional[ReaderOptions] = None
) -> ParseResult:
    """
    Tokenize and read a whole document.

    Strict options raise the first ParseError. Tolerant options collect
    errors (sorted by position) next to the best-effort forms.
    """
    options = options or DEFAULT_OPTIONS
    errors: list[ParseError] = []
    sink = errors if options.tolerant else None
    tokens = Lexer(source, errors=sink).run()
    forms = Reader(tokens, source, options, errors).read()
    errors.sort(key=lambda e: e.position.offset)
    return ParseResult(forms, errors)


def parse(
    source: str, tolerant: bool = False, *, options: Optional[ReaderOptions] = None
) -> list[Expr]:
    """Read source text into a list of top-level expressions."""
    if options is None:
        options = TOLERANT_OPTIONS if tolerant else DEFAULT_OPTIONS
    elif tolerant and not options.tolerant:
        options = replace(options, tolerant=True)
    return parse_document(source, options).forms


__all__ = ["Reader", "ParseResult", "parse", "parse_document"]
