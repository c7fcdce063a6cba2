"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .errors import ErrorReporter
from .lexer_rd import Lexer as LoxTokenizer
from .token_types import TT

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
}

_KEYWORD_TT = {
    TT.AND, TT.CLASS, TT.ELSE, TT.FOR, TT.FUN, TT.IF, TT.OR, TT.PRINT,
    TT.RETURN, TT.SUPER, TT.THIS, TT.VAR, TT.WHILE,
}
_OPERATOR_TT = {
    TT.MINUS, TT.PLUS, TT.SLASH, TT.STAR,
    TT.BANG, TT.BANG_EQUAL, TT.EQUAL, TT.EQUAL_EQUAL,
    TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL,
}
_PUNCT_TT = {
    TT.LEFT_PAREN, TT.RIGHT_PAREN, TT.LEFT_BRACE, TT.RIGHT_BRACE,
    TT.COMMA, TT.DOT, TT.SEMICOLON,
}


def token_group(tt: TT) -> str:
    if tt in _KEYWORD_TT:
        return "keyword"
    if tt in (TT.TRUE, TT.FALSE):
        return "boolean"
    if tt == TT.NIL:
        return "constant"
    if tt == TT.NUMBER:
        return "number"
    if tt == TT.STRING:
        return "string"
    if tt == TT.IDENTIFIER:
        return "identifier"
    if tt in _OPERATOR_TT:
        return "operator"
    if tt in _PUNCT_TT:
        return "punctuation"
    return ""


def _gap_fragments(gap: str) -> StyleAndTextTuples:
    """Style the text between tokens: whitespace, comments, bad characters."""
    starts = [i for i in (gap.find("//"), gap.find("/*")) if i >= 0]
    if not starts:
        return [("", gap)]

    cut = min(starts)
    frags: StyleAndTextTuples = []
    if cut:
        frags.append(("", gap[:cut]))
    frags.append((GROUP_STYLE["comment"], gap[cut:]))
    return frags


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    # Diagnostics are for the pipeline, not for the highlighter.
    tokens = LoxTokenizer(text, ErrorReporter()).tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.type == TT.EOF or not tok.lexeme:
            continue

        # Find actual position of this lexeme in the line from pos onwards.
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue

        # Gap before token.
        if idx > pos:
            result.extend(_gap_fragments(text[pos:idx]))

        style = GROUP_STYLE.get(token_group(tok.type), "")
        result.append((style, tok.lexeme))
        pos = idx + len(tok.lexeme)

    # Trailing text.
    if pos < len(text):
        result.extend(_gap_fragments(text[pos:]))

    return result if result else [("", text)]


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
