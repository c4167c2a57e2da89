"""
num Intermediate Representation (IR) types.

Expression tree nodes and the Definitions they reference.
"""

from .definition import Definition
from .expressions import (
    BinaryExpr,
    BinaryOp,
    Call,
    Conditional,
    Expr,
    ExpressionTree,
    GlobalRef,
    Literal,
    ParamRef,
    UnaryExpr,
    UnaryOp,
)

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "Call",
    "Conditional",
    "Definition",
    "Expr",
    "ExpressionTree",
    "GlobalRef",
    "Literal",
    "ParamRef",
    "UnaryExpr",
    "UnaryOp",
]
