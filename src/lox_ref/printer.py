"""Debug rendering of expression trees as parenthesized prefix text."""

from __future__ import annotations

from .tree import Binary, Expr, Grouping, Literal, LiteralValue, Unary, children


def render(expr: Expr) -> str:
    match expr:
        case Binary(operator=op) | Unary(operator=op):
            return parenthesize(op.lexeme, *children(expr))
        case Grouping():
            return parenthesize("group", *children(expr))
        case Literal(value=value):
            return render_literal(value)

    raise TypeError(f"cannot render {type(expr).__name__}")


def parenthesize(name: str, *exprs: Expr) -> str:
    parts = [name]
    parts.extend(render(e) for e in exprs)
    return "(" + " ".join(parts) + ")"


def render_literal(value: LiteralValue) -> str:
    match value:
        case None:
            return "nil"
        case bool():
            return "true" if value else "false"
        case float():
            # Shortest round-tripping form, minus the ".0" of integral values.
            text = repr(value)
            return text[:-2] if text.endswith(".0") else text
        case _:
            return str(value)
