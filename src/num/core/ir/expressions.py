"""
Expression tree types for num.

Supports:
- Arithmetic: +, -, *, /, %, **
- Comparison: =, !=, <, >, <=, >=
- Bitwise: &, |
- Conditionals: cond ? a : b
- Parameter references inside function bodies
- Constant references and function calls, bound to Definitions at parse time

Every node records ``pos``, the offset of the token it came from, so that
evaluation errors can point back into the source. ``str(node)`` renders text
that parses back to an equivalent tree.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from num.core.ir.definition import Definition
from num.core.number import Number
from num.core.source import SourceText

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"
    # Comparison
    EQ = "="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    # Bitwise
    AND = "&"
    OR = "|"


class UnaryOp(StrEnum):
    """Unary operators for expressions."""

    NEG = "-"


_NODE_CONFIG = ConfigDict(frozen=True, arbitrary_types_allowed=True)


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A numeric literal."""

    value: Number = Field(description="The literal value")
    pos: int = 0

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        return self.value.to_source()


class ParamRef(BaseModel):
    """
    Reference to a parameter of the enclosing function.

    Examples:
        - in ``def sq(x) => x * x``, both ``x`` are ParamRef(index=0, name="x")
    """

    index: int = Field(ge=0, description="Position in the caller's argument frame")
    name: str = Field(description="Parameter name, kept for rendering")
    pos: int = 0

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        return self.name


class GlobalRef(BaseModel):
    """Reference to a constant Definition."""

    definition: Definition
    pos: int = 0

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        return self.definition.name


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr
    pos: int = 0

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr
    pos: int = 0

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class Conditional(BaseModel):
    """
    Conditional expression: condition ? then_expr : else_expr.

    Only the selected branch is evaluated.
    """

    condition: Expr = Field(description="Selects then_expr when non-zero")
    then_expr: Expr = Field(description="Value when condition is non-zero")
    else_expr: Expr = Field(description="Value when condition is zero")
    pos: int = 0

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        return f"({self.condition} ? {self.then_expr} : {self.else_expr})"


class Call(BaseModel):
    """
    Function call: name(arg1, arg2, ...).

    The argument count matches the Definition's arity; the parser checks it.
    """

    definition: Definition
    args: tuple[Expr, ...] = Field(default=(), description="Arguments")
    pos: int = 0

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.definition.name}({args_str})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | ParamRef | GlobalRef | BinaryExpr | UnaryExpr | Conditional | Call


class ExpressionTree(BaseModel):
    """A parsed top-level expression and the text it came from."""

    root: Expr
    source: SourceText

    model_config = _NODE_CONFIG

    def __str__(self) -> str:
        return str(self.root)


# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
Conditional.model_rebuild()
Call.model_rebuild()
ExpressionTree.model_rebuild()
