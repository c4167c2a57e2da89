"""
Tokenizer for the num expression language.

The Lexer walks a SourceText one token at a time; the parser pulls tokens
from it on demand, which lets the ``def`` command read a name and parameter
list before handing the same lexer to the expression parser.
"""

from __future__ import annotations

import math
import re
from enum import StrEnum, auto
from typing import NoReturn

from num.core.errors import ErrorKind, ExpressionError
from num.core.number import INT64_MAX, Number
from num.core.source import SourceText


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals and names
    NAME = auto()
    NUMBER = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    POWER = auto()  # **
    EQ = auto()
    NE = auto()
    LT = auto()
    GT = auto()
    LE = auto()
    GE = auto()
    AMP = auto()
    PIPE = auto()
    QUESTION = auto()
    COLON = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    LAMBDA = auto()  # =>

    # End of input
    EOF = auto()


class Token:
    """A single token from the lexer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str | Number, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    @property
    def name(self) -> str:
        """Identifier text of a NAME token."""
        assert isinstance(self.value, str)
        return self.value

    @property
    def number(self) -> Number:
        """Value of a NUMBER token."""
        assert isinstance(self.value, Number)
        return self.value


# Number pattern: digits with an optional fraction
_NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]+)?")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

_TWO_CHAR: dict[str, TokenKind] = {
    "**": TokenKind.POWER,
    "=>": TokenKind.LAMBDA,
    "!=": TokenKind.NE,
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
}

_ONE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "=": TokenKind.EQ,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "&": TokenKind.AMP,
    "|": TokenKind.PIPE,
    "?": TokenKind.QUESTION,
    ":": TokenKind.COLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}


class Lexer:
    """Produces tokens from a SourceText on demand."""

    def __init__(self, source: SourceText | str) -> None:
        self.source = source if isinstance(source, SourceText) else SourceText(source)
        self._text = self.source.text
        self._next = 0
        self.current = self._scan()

    def advance(self) -> Token:
        """Move to the next token and return the one just consumed."""
        tok = self.current
        if tok.kind != TokenKind.EOF:
            self.current = self._scan()
        return tok

    def peek(self) -> Token:
        """Return the token after ``current`` without consuming anything."""
        if self.current.kind == TokenKind.EOF:
            return self.current
        saved = self._next
        try:
            return self._scan()
        finally:
            self._next = saved

    def fail(self, message: str, kind: ErrorKind = ErrorKind.SYNTAX, pos: int | None = None) -> NoReturn:
        """Raise an ExpressionError at the current token (or ``pos``)."""
        raise ExpressionError(
            kind,
            message,
            self.source,
            self.current.pos if pos is None else pos,
        )

    def _scan(self) -> Token:
        source = self._text
        n = len(source)
        i = self._next

        # Skip whitespace
        while i < n and source[i] in " \t\n\r":
            i += 1

        if i >= n:
            self._next = n
            return Token(TokenKind.EOF, "", n)

        c = source[i]

        if c in "0123456789":
            m = _NUMBER_RE.match(source, i)
            assert m is not None
            self._next = m.end()
            return Token(TokenKind.NUMBER, self._number(m.group(0), i), i)

        if c.isalpha() or c == "_":
            m = _IDENT_RE.match(source, i)
            if m is not None:
                self._next = m.end()
                return Token(TokenKind.NAME, m.group(0), i)

        two = source[i : i + 2]
        if two in _TWO_CHAR:
            self._next = i + 2
            return Token(_TWO_CHAR[two], two, i)

        if c in _ONE_CHAR:
            self._next = i + 1
            return Token(_ONE_CHAR[c], c, i)

        raise ExpressionError(ErrorKind.LEX, f"Unexpected character: {c!r}", self.source, i)

    def _number(self, text: str, pos: int) -> Number:
        if "." in text:
            value = float(text)
            if math.isinf(value):
                raise ExpressionError(ErrorKind.LEX, f"Real literal too large: {text}", self.source, pos)
            return Number.real(value)
        value = int(text)
        if value > INT64_MAX:
            raise ExpressionError(ErrorKind.LEX, f"Integer literal too large: {text}", self.source, pos)
        return Number.integer(value)


def tokenize(source: SourceText | str) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending in EOF."""
    lexer = Lexer(source)
    tokens = [lexer.current]
    while lexer.current.kind != TokenKind.EOF:
        lexer.advance()
        tokens.append(lexer.current)
    return tokens
