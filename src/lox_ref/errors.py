"""Diagnostics collection shared by the lexer and parser.

A reporter is owned by one unit of work (a script run or a single REPL line).
Lexer and parser record errors through it and keep going; the driver inspects
``had_error`` between stages to decide whether to continue.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, TextIO

from .token_types import TT, Tok


@dataclass(frozen=True)
class Diagnostic:
    line: int
    where: str
    message: str

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


def token_location(token: Tok) -> str:
    """Return the ``<WHERE>`` part of a diagnostic that points at *token*."""
    if token.type == TT.EOF:
        return " at end"

    return f" at '{token.lexeme}'"


class ErrorReporter:
    """Collects diagnostics and optionally echoes them to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.diagnostics: List[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    def report(self, line: int, where: str, message: str) -> Diagnostic:
        diag = Diagnostic(line, where, message)
        self.diagnostics.append(diag)

        if self.stream is not None:
            print(diag, file=self.stream)

        return diag

    def error(self, line: int, message: str) -> Diagnostic:
        """Report at a raw source line (lexer shape)."""
        return self.report(line, "", message)

    def error_at(self, token: Tok, message: str) -> Diagnostic:
        """Report at a token (parser shape)."""
        return self.report(token.line, token_location(token), message)

    def reset(self) -> None:
        self.diagnostics.clear()

    def __repr__(self) -> str:
        return f"ErrorReporter({len(self.diagnostics)} diagnostics)"
