"""
Immutable source text shared by the lexer, tokens and diagnostics.
"""

from __future__ import annotations

from num.core.errors import ErrorKind, ExpressionError

# Offsets are stored as unsigned 32-bit values downstream.
MAX_SOURCE_LENGTH = 2**32 - 1


class SourceText:
    """One line of input, shared by reference and never mutated."""

    __slots__ = ("_text",)

    def __init__(self, text: str) -> None:
        if len(text) > MAX_SOURCE_LENGTH:
            raise ExpressionError(
                ErrorKind.ALLOCATION,
                f"Source text too long ({len(text)} characters)",
            )
        object.__setattr__(self, "_text", text)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("SourceText is immutable")

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"SourceText({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SourceText):
            return self._text == other._text
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._text)

    def snippet(self, offset: int) -> str:
        """Return the text with a ``^`` marker under ``offset``."""
        offset = max(0, min(offset, len(self._text)))
        return f"{self._text}\n{' ' * offset}^"
