"""
Named constants and functions.

A Definition is built in two steps so that its body can refer to it:

1. The parser creates it with a name and parameter list.
2. While parsing the body, calls to that name resolve to this object.
3. ``bind()`` attaches the body, after which the Definition never changes.

Expression trees hold Definitions by reference. Redefining a name creates a
new Definition; trees built earlier keep evaluating the old one.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from num.core.ir.expressions import Expr
    from num.core.source import SourceText


class Definition:
    """A constant (no parameter list) or a fixed-arity function."""

    __slots__ = ("name", "params", "is_function", "_body", "_source")

    name: str
    params: tuple[str, ...]
    is_function: bool

    def __init__(self, name: str, params: Iterable[str] = (), is_function: bool = False) -> None:
        params = tuple(params)
        if params and not is_function:
            raise ValueError("Only functions take parameters")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "params", params)
        object.__setattr__(self, "is_function", is_function)
        object.__setattr__(self, "_body", None)
        object.__setattr__(self, "_source", None)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Definition is immutable; use bind() to attach the body")

    def __repr__(self) -> str:
        return f"Definition({self.name!r}, params={self.params!r}, is_function={self.is_function})"

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def is_bound(self) -> bool:
        return self._body is not None

    @property
    def body(self) -> Expr:
        if self._body is None:
            raise RuntimeError(f"Definition '{self.name}' has no body yet")
        return self._body

    @property
    def source(self) -> SourceText | None:
        """Text the body was parsed from, used to place runtime errors."""
        return self._source

    def bind(self, body: Expr, source: SourceText | None = None) -> None:
        """Attach the body. Allowed once."""
        if self._body is not None:
            raise RuntimeError(f"Definition '{self.name}' is already bound")
        object.__setattr__(self, "_body", body)
        object.__setattr__(self, "_source", source)

    def param_index(self, name: str) -> int | None:
        try:
            return self.params.index(name)
        except ValueError:
            return None

    @property
    def signature(self) -> str:
        if not self.is_function:
            return self.name
        return f"{self.name}({', '.join(self.params)})"

    def __str__(self) -> str:
        body = str(self._body) if self._body is not None else "..."
        return f"{self.signature} => {body}"
