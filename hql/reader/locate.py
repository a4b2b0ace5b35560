"""
hql.reader.locate - Finding nodes by source offset

Editor features (expression selection, hover, evaluation of the form at the
cursor) need the node around an offset. These helpers answer that from the
spans recorded by the reader; they never look at source text.
"""

from collections.abc import Iterator
from typing import Optional

from hql.reader.types import Expr, List


def iter_nodes(forms: list[Expr]) -> Iterator[Expr]:
    """Yield every node, parents before children, in source order."""
    stack = list(reversed(forms))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, List):
            stack.extend(reversed(node.elements))


def enclosing_nodes(forms: list[Expr], offset: int) -> list[Expr]:
    """
    Nodes whose span contains ``offset``, outermost first.

    Spans nest, so the result is a single path from a top-level form down to
    the innermost node at ``offset``. Nodes without a span are skipped.
    """
    path: list[Expr] = []
    candidates = forms
    while True:
        for node in candidates:
            if node.span is not None and node.span.contains(offset):
                path.append(node)
                candidates = node.elements if isinstance(node, List) else ()
                break
        else:
            return path


def _at_or_before(forms: list[Expr], offset: int) -> list[Expr]:
    path = enclosing_nodes(forms, offset)
    if not path and offset > 0:
        # Cursor right after a form: `(foo)|`
        path = enclosing_nodes(forms, offset - 1)
    return path


def innermost_node_at(forms: list[Expr], offset: int) -> Optional[Expr]:
    path = _at_or_before(forms, offset)
    return path[-1] if path else None


def innermost_list_at(forms: list[Expr], offset: int) -> Optional[List]:
    """The innermost list form around ``offset`` (the form to select or evaluate)."""
    for node in reversed(_at_or_before(forms, offset)):
        if isinstance(node, List):
            return node
    return None


def outermost_node_at(forms: list[Expr], offset: int) -> Optional[Expr]:
    """The top-level form containing ``offset``."""
    path = _at_or_before(forms, offset)
    return path[0] if path else None


__all__ = [
    "iter_nodes",
    "enclosing_nodes",
    "innermost_node_at",
    "innermost_list_at",
    "outermost_node_at",
]
