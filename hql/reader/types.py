"""
hql.reader.types - Expression node types produced by the reader

The reader turns HQL source into a tree built from six node types:

- Nil: the ``nil`` literal
- Boolean: ``true`` / ``false``
- Number: numeric literals (always floats, IEEE double semantics)
- String: string literals, fully unescaped
- Symbol: identifiers, including enum cases (``.case``) and dotted paths
- List: parenthesized forms and every desugared literal

Vector, map, set, quote and interpolation syntax never get node types of
their own. They are read as Lists headed by a synthetic operator symbol
(``vector``, ``hash-map``, ``quote``, ...), see the constants below.

Nodes are frozen. Each carries an optional ``span`` which is excluded from
equality, so ``==`` compares structure only.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from hql.reader.spans import Span

# Synthetic operator names used by desugared forms
VECTOR = "vector"
HASH_MAP = "hash-map"
HASH_SET = "hash-set"
EMPTY_ARRAY = "empty-array"
EMPTY_MAP = "empty-map"
EMPTY_SET = "empty-set"
QUOTE = "quote"
QUASIQUOTE = "quasiquote"
UNQUOTE = "unquote"
UNQUOTE_SPLICING = "unquote-splicing"
STR = "str"
GET = "get"


@dataclass(frozen=True)
class Nil:
    span: Optional[Span] = field(default=None, compare=False)

    def __repr__(self):
        return "Nil"


@dataclass(frozen=True)
class Boolean:
    value: bool
    span: Optional[Span] = field(default=None, compare=False)

    def __repr__(self):
        return f"Boolean({self.value})"


@dataclass(frozen=True)
class Number:
    value: float
    span: Optional[Span] = field(default=None, compare=False)

    def __repr__(self):
        return f"Number({self.value!r})"


@dataclass(frozen=True)
class String:
    value: str
    span: Optional[Span] = field(default=None, compare=False)

    def __repr__(self):
        return f"String({self.value!r})"


@dataclass(frozen=True)
class Symbol:
    """
    A symbolic identifier.

    Enum-case symbols are spelled with a leading dot (``.macOS``); their bare
    case name is available as ``enum_case_name``. Dotted paths such as
    ``math.floor`` stay single symbols unless the reader rewrote them to a
    ``get`` form.

    Attributes:
        name: The symbol text exactly as written (after dot-access joining)
        span: Source range, if the symbol came from source
    """

    name: str
    span: Optional[Span] = field(default=None, compare=False)

    def __repr__(self):
        return f"Symbol({self.name!r})"

    @property
    def is_enum_case(self) -> bool:
        return len(self.name) > 1 and self.name.startswith(".")

    @property
    def enum_case_name(self) -> Optional[str]:
        """The case name without its leading dot, or None for other symbols."""
        return self.name[1:] if self.is_enum_case else None


@dataclass(frozen=True)
class List:
    """
    An ordered sequence of expressions.

    Behaves as a read-only sequence: ``len(lst)``, ``lst[0]`` and iteration
    all go to ``elements``.
    """

    elements: tuple["Expr", ...] = ()
    span: Optional[Span] = field(default=None, compare=False)

    def __post_init__(self):
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))

    def __repr__(self):
        return f"List({list(self.elements)!r})"

    def __iter__(self):
        return iter(self.elements)

    def __len__(self):
        return len(self.elements)

    def __getitem__(self, index):
        return self.elements[index]

    @property
    def head(self) -> Optional["Expr"]:
        return self.elements[0] if self.elements else None


Expr = Union[Nil, Boolean, Number, String, Symbol, List]


def head_name(expr: Expr) -> Optional[str]:
    """Name of the leading symbol of a list form, or None."""
    if isinstance(expr, List) and isinstance(expr.head, Symbol):
        return expr.head.name
    return None


def is_form(expr: Expr, name: str) -> bool:
    """Check whether ``expr`` is a list whose head is the symbol ``name``."""
    return head_name(expr) == name


def is_symbol(expr: Expr, name: Optional[str] = None) -> bool:
    if not isinstance(expr, Symbol):
        return False
    return name is None or expr.name == name


__all__ = [
    "Nil",
    "Boolean",
    "Number",
    "String",
    "Symbol",
    "List",
    "Expr",
    "head_name",
    "is_form",
    "is_symbol",
    "VECTOR",
    "HASH_MAP",
    "HASH_SET",
    "EMPTY_ARRAY",
    "EMPTY_MAP",
    "EMPTY_SET",
    "QUOTE",
    "QUASIQUOTE",
    "UNQUOTE",
    "UNQUOTE_SPLICING",
    "STR",
    "GET",
]
