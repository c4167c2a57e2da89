"""
Expression evaluator for the num expression language.

Evaluates expression trees against an EvaluationContext: a stack of argument
frames, one per active function call. Pure evaluation, no I/O.

Recursion depth is bounded by ``max_call_depth``. Evaluation runs on a
worker thread with a large stack and a recursion limit sized for that
depth, so the configured limit is what trips. Exceeding it, or running out
of interpreter stack anyway, raises an ExpressionError of kind
STACK_EXHAUSTION instead of crashing.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

from num.core.errors import ErrorKind, ExpressionError
from num.core.ir.expressions import (
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
from num.core.number import Number, NumberError
from num.core.source import SourceText

DEFAULT_MAX_CALL_DEPTH = 10_000

# Interpreter frames allowed per user-level call, covering nested operators
# inside the body.
_FRAMES_PER_CALL = 50
_WORKER_STACK_SIZE = 256 * 1024 * 1024
_MAX_RECURSION_LIMIT = 2**31 - 1

# The recursion limit and thread stack size are process-wide.
_worker_lock = threading.Lock()

_BINARY: dict[BinaryOp, Callable[[Number, Number], Number]] = {
    BinaryOp.ADD: Number.add,
    BinaryOp.SUB: Number.sub,
    BinaryOp.MUL: Number.mul,
    BinaryOp.DIV: Number.div,
    BinaryOp.MOD: Number.mod,
    BinaryOp.POW: Number.power,
    BinaryOp.EQ: Number.eq,
    BinaryOp.NE: Number.ne,
    BinaryOp.LT: Number.lt,
    BinaryOp.GT: Number.gt,
    BinaryOp.LE: Number.le,
    BinaryOp.GE: Number.ge,
    BinaryOp.AND: Number.bit_and,
    BinaryOp.OR: Number.bit_or,
}


@dataclass(frozen=True)
class Frame:
    """Arguments of one active call, plus the text of the body being run."""

    args: tuple[Number, ...]
    source: SourceText | None


class EvaluationContext:
    """Stack of call frames for one top-level evaluation. Never shared."""

    def __init__(self, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> None:
        self.max_call_depth = max_call_depth
        self.frames: list[Frame] = []

    @property
    def current(self) -> Frame:
        return self.frames[-1]

    @property
    def depth(self) -> int:
        """Number of active calls, not counting the top-level frame."""
        return max(0, len(self.frames) - 1)

    @contextmanager
    def frame(
        self, args: Sequence[Number], source: SourceText | None, pos: int = 0
    ) -> Iterator[Frame]:
        """Push a frame for the duration of a call made at offset ``pos``."""
        if self.frames and self.depth >= self.max_call_depth:
            raise ExpressionError(
                ErrorKind.STACK_EXHAUSTION,
                f"Maximum call depth of {self.max_call_depth} exceeded",
                self.current.source,
                pos,
            )
        new = Frame(tuple(args), source)
        self.frames.append(new)
        try:
            yield new
        finally:
            self.frames.pop()


def evaluate(tree: ExpressionTree, context: EvaluationContext | None = None) -> Number:
    """Evaluate a parsed expression.

    Args:
        tree: Result of parse_expr().
        context: Frame stack to use; a fresh one is created if omitted.

    Returns:
        The computed Number.

    Raises:
        ExpressionError: On a domain error, division by zero, or when the
            call depth limit is exceeded.
    """
    ctx = context if context is not None else EvaluationContext()
    return _run_on_worker(lambda: _evaluate_root(tree, ctx), ctx.max_call_depth)


def _evaluate_root(tree: ExpressionTree, ctx: EvaluationContext) -> Number:
    try:
        with ctx.frame((), tree.source):
            return _interpret(tree.root, ctx)
    except RecursionError:
        raise ExpressionError(
            ErrorKind.STACK_EXHAUSTION,
            "Recursion too deep",
            tree.source,
        ) from None


def _run_on_worker(fn: Callable[[], Number], max_call_depth: int) -> Number:
    """Run ``fn`` on a thread with enough stack for ``max_call_depth`` calls."""
    result: list[Number] = []
    failure: list[BaseException] = []

    def target() -> None:
        try:
            result.append(fn())
        except BaseException as e:
            failure.append(e)

    with _worker_lock:
        old_limit = sys.getrecursionlimit()
        wanted = min(max_call_depth * _FRAMES_PER_CALL + 1000, _MAX_RECURSION_LIMIT)
        sys.setrecursionlimit(max(old_limit, wanted))
        try:
            old_stack_size = threading.stack_size(_WORKER_STACK_SIZE)
            try:
                thread = threading.Thread(target=target, name="num-evaluate", daemon=True)
                thread.start()
            finally:
                threading.stack_size(old_stack_size)
            thread.join()
        finally:
            sys.setrecursionlimit(old_limit)

    if failure:
        raise failure[0]
    return result[0]


def _interpret(expr: Expr, ctx: EvaluationContext) -> Number:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, ParamRef):
        return ctx.current.args[expr.index]

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, ctx)

    if isinstance(expr, Conditional):
        return _interpret_conditional(expr, ctx)

    if isinstance(expr, Call):
        return _interpret_call(expr, ctx)

    if isinstance(expr, GlobalRef):
        return _interpret_global(expr, ctx)

    if isinstance(expr, UnaryExpr):
        return _interpret_unary(expr, ctx)

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_binary(expr: BinaryExpr, ctx: EvaluationContext) -> Number:
    """Evaluate both operands, then apply the operator."""
    left = _interpret(expr.left, ctx)
    right = _interpret(expr.right, ctx)
    try:
        return _BINARY[expr.op](left, right)
    except NumberError as e:
        raise ExpressionError(e.kind, e.message, ctx.current.source, expr.pos) from e


def _interpret_unary(expr: UnaryExpr, ctx: EvaluationContext) -> Number:
    val = _interpret(expr.operand, ctx)
    if expr.op == UnaryOp.NEG:
        return val.negate()
    raise TypeError(f"Unknown unary op: {expr.op}")


def _interpret_conditional(expr: Conditional, ctx: EvaluationContext) -> Number:
    """Evaluate the condition and only the branch it selects."""
    if _interpret(expr.condition, ctx):
        return _interpret(expr.then_expr, ctx)
    return _interpret(expr.else_expr, ctx)


def _interpret_global(expr: GlobalRef, ctx: EvaluationContext) -> Number:
    """Evaluate a constant's body in an empty frame."""
    definition = expr.definition
    with ctx.frame((), definition.source, expr.pos):
        return _interpret(definition.body, ctx)


def _interpret_call(expr: Call, ctx: EvaluationContext) -> Number:
    """Evaluate arguments in the caller's frame, then the body in a new one."""
    args = [_interpret(arg, ctx) for arg in expr.args]
    definition = expr.definition
    with ctx.frame(args, definition.source, expr.pos):
        return _interpret(definition.body, ctx)
