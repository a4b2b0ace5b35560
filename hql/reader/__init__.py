"""
hql.reader - The HQL front end

Turns source text into span-annotated expression trees.

Phases:
1. Lex (lexer.py): Text -> Tokens
2. Read (reader.py): Tokens -> Expressions, with surface syntax desugared

Supporting modules:
- types.py: Expression node types
- spans.py: Positions, spans and line/column conversion
- errors.py: ParseError
- strings.py: String literal escapes and interpolation
- printer.py: Canonical text for expressions
- locate.py: Node lookup by offset for editor tooling
- options.py: Reader configuration
"""

from hql.reader.errors import ParseError, ParseErrorKind
from hql.reader.lexer import Lexer, Token, TokenKind, tokenize
from hql.reader.locate import (
    enclosing_nodes,
    innermost_list_at,
    innermost_node_at,
    iter_nodes,
    outermost_node_at,
)
from hql.reader.options import DottedAccess, ReaderOptions
from hql.reader.printer import expression_to_string, forms_to_string
from hql.reader.reader import ParseResult, Reader, parse, parse_document
from hql.reader.spans import LineIndex, Position, Span
from hql.reader.types import (
    Boolean,
    Expr,
    List,
    Nil,
    Number,
    String,
    Symbol,
    head_name,
    is_form,
    is_symbol,
)

__all__ = [
    # Entry points
    "parse",
    "parse_document",
    "ParseResult",
    "tokenize",
    "expression_to_string",
    "forms_to_string",
    # Machinery
    "Lexer",
    "Reader",
    "Token",
    "TokenKind",
    "ReaderOptions",
    "DottedAccess",
    # Errors
    "ParseError",
    "ParseErrorKind",
    # Nodes
    "Expr",
    "Nil",
    "Boolean",
    "Number",
    "String",
    "Symbol",
    "List",
    "head_name",
    "is_form",
    "is_symbol",
    # Source locations
    "Position",
    "Span",
    "LineIndex",
    "iter_nodes",
    "enclosing_nodes",
    "innermost_node_at",
    "innermost_list_at",
    "outermost_node_at",
]
