"""
hql.reader.printer - Canonical text for expressions

expression_to_string renders a tree back to HQL surface text for hover and
diagnostic display. Desugared forms print in their list form, so
``[1, 2]`` comes back as ``(vector 1 2)``; reading the output again gives a
tree equal to the one printed.
"""

from decimal import Decimal

from hql.reader.strings import escape
from hql.reader.types import Boolean, Expr, List, Nil, Number, String, Symbol


def format_number(value: float) -> str:
    """Integral values print without a trailing ``.0``; never in exponent form."""
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        text = format(Decimal(text), "f")
    return text


def expression_to_string(expr: Expr) -> str:
    if isinstance(expr, Symbol):
        return expr.name
    if isinstance(expr, List):
        return "(" + " ".join(expression_to_string(e) for e in expr.elements) + ")"
    if isinstance(expr, String):
        return f'"{escape(expr.value)}"'
    if isinstance(expr, Number):
        return format_number(expr.value)
    if isinstance(expr, Boolean):
        return "true" if expr.value else "false"
    if isinstance(expr, Nil):
        return "nil"
    raise TypeError(f"Cannot print {type(expr).__name__}: {expr!r}")


def forms_to_string(forms: list[Expr]) -> str:
    """Print a sequence of top-level forms, one per line."""
    return "\n".join(expression_to_string(form) for form in forms)


__all__ = ["expression_to_string", "forms_to_string", "format_number"]
