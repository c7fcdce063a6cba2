"""
Recursive Descent Parser for Lox expressions

Structure:
- Lexer: Token list from source
- Parser: one method per precedence level, iterative left fold for binaries
- AST: frozen dataclasses from tree.py

Grammar methods return either an Expr or a ParseFailure. A failure has
already been reported to the ErrorReporter when it is created; callers pass
it upward unchanged and parse() turns it into None.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Union

from .errors import ErrorReporter
from .token_types import TT, Tok
from .tree import Binary, Expr, Grouping, Literal, Unary

# ============================================================================
# Parser
# ============================================================================

@dataclass(frozen=True)
class ParseFailure:
    """Result of a grammar rule that hit a syntax error"""
    token: Tok
    message: str


ParseResult = Union[Expr, ParseFailure]

# Tokens that begin a declaration or statement; synchronize() stops before them.
STATEMENT_STARTS = frozenset({
    TT.CLASS, TT.FUN, TT.VAR, TT.FOR, TT.IF, TT.WHILE, TT.PRINT, TT.RETURN,
})

# Combined depth limit for nested groupings and unary operators.
MAX_NESTING = 50


class Parser:
    """
    Recursive descent parser for Lox expressions.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. comparison (>, >=, <, <=)
    3. addition (+, -)
    4. multiplication (*, /)
    5. unary (!, -)
    6. primary (literals, parens)
    """

    def __init__(self, tokens: Sequence[Tok], reporter: Optional[ErrorReporter] = None):
        if not tokens or tokens[-1].type != TT.EOF:
            raise ValueError("token sequence must end with an EOF token")
        self.tokens = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.pos = 0
        self.nesting = 0

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Tok:
        """Current token, not yet consumed"""
        return self.tokens[self.pos]

    def previous(self) -> Tok:
        """Most recently consumed token"""
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and return it; EOF is never consumed"""
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        if self.is_at_end():
            return False
        return self.peek().type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def consume(self, token_type: TT, message: str) -> Union[Tok, ParseFailure]:
        """Consume token of expected type or report and fail"""
        if self.check(token_type):
            return self.advance()
        return self.error(self.peek(), message)

    def error(self, token: Tok, message: str) -> ParseFailure:
        self.reporter.error_at(token, message)
        return ParseFailure(token, message)

    def synchronize(self) -> None:
        """
        Discard tokens until a likely statement boundary: just past a ';' or
        right before a token that starts a declaration/statement.
        """
        self.advance()

        while not self.is_at_end():
            if self.previous().type == TT.SEMICOLON:
                return

            if self.peek().type in STATEMENT_STARTS:
                return

            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Optional[Expr]:
        """Parse one expression; None if a syntax error was reported"""
        result = self.parse_expression()
        if isinstance(result, ParseFailure):
            return None
        return result

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self) -> ParseResult:
        return self.parse_equality()

    def parse_equality(self) -> ParseResult:
        """Parse equality: expr == expr, expr != expr"""
        return self._left_assoc(self.parse_comparison, TT.BANG_EQUAL, TT.EQUAL_EQUAL)

    def parse_comparison(self) -> ParseResult:
        """Parse comparison: expr < expr, expr >= expr, ..."""
        return self._left_assoc(
            self.parse_addition,
            TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL,
        )

    def parse_addition(self) -> ParseResult:
        """Parse addition/subtraction: expr + expr"""
        return self._left_assoc(self.parse_multiplication, TT.MINUS, TT.PLUS)

    def parse_multiplication(self) -> ParseResult:
        """Parse multiplication/division: expr * expr"""
        return self._left_assoc(self.parse_unary, TT.SLASH, TT.STAR)

    def _nested(self, opener: Tok, rule: Callable[[], ParseResult]) -> ParseResult:
        """Run *rule* one nesting level deeper; fail past MAX_NESTING"""
        if self.nesting >= MAX_NESTING:
            return self.error(opener, "Expression nesting too deep.")

        self.nesting += 1
        try:
            return rule()
        finally:
            self.nesting -= 1

    def _left_assoc(self, operand: Callable[[], ParseResult], *ops: TT) -> ParseResult:
        """Fold `operand (op operand)*` into left-nested Binary nodes"""
        left = operand()
        if isinstance(left, ParseFailure):
            return left

        while self.match(*ops):
            op = self.previous()
            right = operand()
            if isinstance(right, ParseFailure):
                return right
            left = Binary(left, op, right)

        return left

    def parse_unary(self) -> ParseResult:
        """Parse unary operators: -expr, !expr (right recursive)"""
        if self.match(TT.BANG, TT.MINUS):
            op = self.previous()
            right = self._nested(op, self.parse_unary)
            if isinstance(right, ParseFailure):
                return right
            return Unary(op, right)

        return self.parse_primary()

    def parse_primary(self) -> ParseResult:
        """
        Parse primary expressions:
        - Literals (numbers, strings, true, false, nil)
        - Parenthesized expressions
        """
        if self.match(TT.FALSE):
            return Literal(False)
        if self.match(TT.TRUE):
            return Literal(True)
        if self.match(TT.NIL):
            return Literal(None)

        if self.match(TT.NUMBER, TT.STRING):
            return Literal(self.previous().literal)

        if self.match(TT.LEFT_PAREN):
            inner = self._nested(self.previous(), self.parse_expression)
            if isinstance(inner, ParseFailure):
                return inner

            closing = self.consume(TT.RIGHT_PAREN, "Expect ')' after expression.")
            if isinstance(closing, ParseFailure):
                return closing

            return Grouping(inner)

        return self.error(self.peek(), "Expect expression.")

# ============================================================================
# Entry Points
# ============================================================================

def parse_tokens(tokens: List[Tok], reporter: Optional[ErrorReporter] = None) -> Optional[Expr]:
    return Parser(tokens, reporter).parse()


def parse_source(source: str, reporter: Optional[ErrorReporter] = None) -> Optional[Expr]:
    """
    Lex and parse Lox source to an expression tree.

    Returns None when the parser reported a syntax error. Lexical errors are
    recorded on *reporter* but do not stop parsing of the tokens that were
    produced; callers check ``reporter.had_error``.
    """
    from .lexer_rd import tokenize

    reporter = reporter if reporter is not None else ErrorReporter()
    tokens = tokenize(source, reporter)
    return Parser(tokens, reporter).parse()
