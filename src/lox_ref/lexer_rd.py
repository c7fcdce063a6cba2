"""
Lexer for Lox - Recursive Descent Front End

Tokenizes Lox source code into a list of tokens.

Features:
- Single-pass tokenization
- Line tracking (newlines inside strings and comments count)
- Line and block comments (block comments do not nest)
- Errors are reported through an ErrorReporter and scanning continues
"""

from typing import List, Optional

from .errors import ErrorReporter
from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Lox lexer.

    Each call to scan_token() consumes exactly one lexeme (or one skipped
    span: whitespace, a comment, a bad character) starting at self.start.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    SINGLE_CHAR = {
        '(': TT.LEFT_PAREN,
        ')': TT.RIGHT_PAREN,
        '{': TT.LEFT_BRACE,
        '}': TT.RIGHT_BRACE,
        ',': TT.COMMA,
        '.': TT.DOT,
        '-': TT.MINUS,
        '+': TT.PLUS,
        ';': TT.SEMICOLON,
        '*': TT.STAR,
    }

    # char => (type without '=', type with '=')
    EQUAL_SUFFIXED = {
        '!': (TT.BANG, TT.BANG_EQUAL),
        '=': (TT.EQUAL, TT.EQUAL_EQUAL),
        '<': (TT.LESS, TT.LESS_EQUAL),
        '>': (TT.GREATER, TT.GREATER_EQUAL),
    }

    WHITESPACE = (' ', '\r', '\t')

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.start = 0
        self.pos = 0
        self.line = 1
        self.start_line = 1
        self.tokens: List[Tok] = []
        self.done = False

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending in EOF"""
        if self.done:
            raise RuntimeError("Lexer.tokenize() may only be called once")

        while not self.at_end():
            self.start = self.pos
            self.start_line = self.line
            self.scan_token()

        self.tokens.append(Tok(TT.EOF, '', None, self.line))
        self.done = True
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.advance()

        if ch in self.SINGLE_CHAR:
            self.emit(self.SINGLE_CHAR[ch])
            return

        if ch in self.EQUAL_SUFFIXED:
            plain, suffixed = self.EQUAL_SUFFIXED[ch]
            self.emit(suffixed if self.match('=') else plain)
            return

        if ch == '/':
            if self.match('/'):
                self.skip_line_comment()
            elif self.match('*'):
                self.skip_block_comment()
            else:
                self.emit(TT.SLASH)
            return

        if ch in self.WHITESPACE:
            return

        if ch == '\n':
            self.line += 1
            return

        if ch == '"':
            self.scan_string()
            return

        if is_digit(ch):
            self.scan_number()
            return

        if is_alpha(ch):
            self.scan_identifier()
            return

        self.reporter.error(self.line, "Unexpected character.")

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (no escape sequences)"""
        while self.peek() != '"' and not self.at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.at_end():
            self.reporter.error(self.line, "Unterminated string.")
            return

        self.advance()  # Closing quote
        self.emit(TT.STRING, self.source[self.start + 1:self.pos - 1])

    def scan_number(self):
        """Scan number literal"""
        while is_digit(self.peek()):
            self.advance()

        # Fraction needs a digit after the dot; `1.` leaves the dot alone
        if self.peek() == '.' and is_digit(self.peek(1)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.current_lexeme()))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while is_alnum(self.peek()):
            self.advance()

        token_type = self.KEYWORDS.get(self.current_lexeme(), TT.IDENTIFIER)
        self.emit(token_type)

    def skip_line_comment(self):
        """Skip comment until end of line"""
        while self.peek() != '\n' and not self.at_end():
            self.advance()

    def skip_block_comment(self):
        """Skip to the first closing */; an inner /* has no effect."""
        while not (self.peek() == '*' and self.peek(1) == '/') and not self.at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.at_end():
            self.reporter.error(self.line, "Unterminated block comment.")
            return

        self.advance(2)

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = self.source[self.pos:self.pos + n]
        self.pos = min(self.pos + n, len(self.source))
        return result

    def match(self, expected: str) -> bool:
        """Consume the next character only if it is *expected*"""
        if self.peek() != expected or self.at_end():
            return False
        self.pos += 1
        return True

    def current_lexeme(self) -> str:
        return self.source[self.start:self.pos]

    def emit(self, token_type: TT, literal=None):
        """Emit a token"""
        tok = Tok(
            type=token_type,
            lexeme=self.current_lexeme(),
            literal=literal,
            line=self.start_line,
        )
        self.tokens.append(tok)


def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def is_alnum(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


def tokenize(source: str, reporter: Optional[ErrorReporter] = None) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source, reporter)
    return lexer.tokenize()
