"""
Error types for num lexing, parsing, evaluation, and configuration.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from num.core.source import SourceText


class NumError(Exception):
    """Base exception for all num errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ErrorKind(StrEnum):
    """What went wrong while processing an expression."""

    LEX = "lex"
    SYNTAX = "syntax"
    NAME = "name"
    ARITY = "arity"
    DOMAIN = "domain"
    DIVIDE_BY_ZERO = "divide_by_zero"
    ALLOCATION = "allocation"
    STACK_EXHAUSTION = "stack_exhaustion"


class ExpressionError(NumError):
    """
    Raised for any failure while lexing, parsing or evaluating an expression.

    Callers need a single handler: the kind tag distinguishes the failure,
    and the source text plus offset allow a caret under the offending
    character.

    Attributes:
        kind: Failure category
        message: Human-readable description
        source: Text of the expression being processed (may be None when the
            text itself could not be created)
        offset: Character offset into the source text
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        source: SourceText | None = None,
        offset: int = 0,
    ) -> None:
        self.kind = kind
        self.source = source
        self.offset = offset
        super().__init__(message)

    def __repr__(self) -> str:
        return f"ExpressionError({self.kind}, {self.message!r}, offset={self.offset})"

    def format_caret(self) -> str:
        """
        Format the source line with a caret under the error offset.

        Returns:
            Two lines, the source text and the marker, or an empty string if
            there is no source.
        """
        if self.source is None:
            return ""
        return self.source.snippet(self.offset)


class ConfigError(NumError):
    """
    Raised when configuration cannot be loaded.

    Examples:
    - Malformed num.toml
    - Non-numeric NUM_MAX_CALL_DEPTH
    - Unknown log level
    """

    pass
