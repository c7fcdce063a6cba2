"""Expression tree produced by the parser.

A closed set of node kinds. Consumers dispatch with ``match`` over the four
classes; there is no visitor hierarchy at runtime.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Union
from typing_extensions import TypeAlias

from .token_types import Tok

LiteralValue: TypeAlias = Union[float, str, bool, None]


@dataclass(frozen=True)
class Binary:
    left: Expr
    operator: Tok
    right: Expr


@dataclass(frozen=True)
class Grouping:
    expression: Expr


@dataclass(frozen=True)
class Literal:
    value: LiteralValue


@dataclass(frozen=True)
class Unary:
    operator: Tok
    right: Expr


Expr: TypeAlias = Union[Binary, Grouping, Literal, Unary]


def children(node: Expr) -> List[Expr]:
    """Operand subtrees of *node*, left to right."""
    match node:
        case Binary(left=left, right=right):
            return [left, right]
        case Grouping(expression=inner):
            return [inner]
        case Unary(right=right):
            return [right]
        case Literal():
            return []

    raise TypeError(f"not an expression node: {node!r}")
