"""
Recursive descent parser for the num expression language.

Grammar (precedence low to high):
    expr           → comparison ("?" expr ":" expr)?
    comparison     → bitor (comp_op bitor)?
    bitor          → bitand ("|" bitand)*
    bitand         → additive ("&" additive)*
    additive       → multiplicative (("+"|"-") multiplicative)*
    multiplicative → power (("*"|"/"|"%") power)*
    power          → unary ("**" power)?
    unary          → "-" unary | primary
    primary        → NUMBER | "(" expr ")" | NAME | NAME "(" (expr ("," expr)*)? ")"
    comp_op        → "=" | "!=" | "<" | ">" | "<=" | ">="

    definition     → NAME ("(" (NAME ("," NAME)*)? ")")? "=>" expr

Names are resolved while parsing: parameters of the enclosing definition
first, then the definition being built (so functions can recurse), then the
definition table.
"""

from __future__ import annotations

from collections.abc import Callable

from num.core.definitions import DefinitionTable
from num.core.errors import ErrorKind, ExpressionError
from num.core.expression_lang.tokenizer import Lexer, Token, TokenKind
from num.core.ir.definition import Definition
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
from num.core.source import SourceText

_COMPARISON_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.EQ: BinaryOp.EQ,
    TokenKind.NE: BinaryOp.NE,
    TokenKind.LT: BinaryOp.LT,
    TokenKind.GT: BinaryOp.GT,
    TokenKind.LE: BinaryOp.LE,
    TokenKind.GE: BinaryOp.GE,
}
_BITOR_OPS = {TokenKind.PIPE: BinaryOp.OR}
_BITAND_OPS = {TokenKind.AMP: BinaryOp.AND}
_ADDITIVE_OPS = {TokenKind.PLUS: BinaryOp.ADD, TokenKind.MINUS: BinaryOp.SUB}
_MULTIPLICATIVE_OPS = {
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
    TokenKind.PERCENT: BinaryOp.MOD,
}


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    if tok.kind == TokenKind.NUMBER:
        return f"number {tok.number.to_source()}"
    return repr(tok.value)


class Parser:
    """Recursive descent parser over a Lexer."""

    def __init__(
        self,
        lexer: Lexer,
        table: DefinitionTable,
        definition: Definition | None = None,
    ) -> None:
        self.lexer = lexer
        self.table = table
        self.definition = definition

    @property
    def current(self) -> Token:
        return self.lexer.current

    def advance(self) -> Token:
        return self.lexer.advance()

    def expect(self, kind: TokenKind, what: str) -> Token:
        tok = self.current
        if tok.kind != kind:
            self.lexer.fail(f"Expected {what}, got {_describe(tok)}")
        return self.advance()

    def match(self, *kinds: TokenKind) -> Token | None:
        if self.current.kind in kinds:
            return self.advance()
        return None

    # -- Grammar rules --

    def parse_full_expression(self) -> Expr:
        """Parse one expression and require that nothing follows it."""
        expr = self.parse_expr()
        if self.current.kind != TokenKind.EOF:
            self.lexer.fail(f"Unexpected token after expression: {_describe(self.current)}")
        return expr

    def parse_expr(self) -> Expr:
        """comparison ('?' expr ':' expr)?"""
        condition = self.parse_comparison()
        question = self.match(TokenKind.QUESTION)
        if question is None:
            return condition
        then_expr = self.parse_expr()
        self.expect(TokenKind.COLON, "':'")
        else_expr = self.parse_expr()
        return Conditional(
            condition=condition,
            then_expr=then_expr,
            else_expr=else_expr,
            pos=question.pos,
        )

    def parse_comparison(self) -> Expr:
        """bitor (comp_op bitor)?"""
        left = self.parse_bitor()
        if self.current.kind in _COMPARISON_OPS:
            tok = self.advance()
            right = self.parse_bitor()
            return BinaryExpr(op=_COMPARISON_OPS[tok.kind], left=left, right=right, pos=tok.pos)
        return left

    def parse_bitor(self) -> Expr:
        """bitand ('|' bitand)*"""
        return self._parse_left_assoc(_BITOR_OPS, self.parse_bitand)

    def parse_bitand(self) -> Expr:
        """additive ('&' additive)*"""
        return self._parse_left_assoc(_BITAND_OPS, self.parse_additive)

    def parse_additive(self) -> Expr:
        """multiplicative (('+' | '-') multiplicative)*"""
        return self._parse_left_assoc(_ADDITIVE_OPS, self.parse_multiplicative)

    def parse_multiplicative(self) -> Expr:
        """power (('*' | '/' | '%') power)*"""
        return self._parse_left_assoc(_MULTIPLICATIVE_OPS, self.parse_power)

    def parse_power(self) -> Expr:
        """unary ('**' power)?"""
        left = self.parse_unary()
        tok = self.match(TokenKind.POWER)
        if tok is None:
            return left
        right = self.parse_power()
        return BinaryExpr(op=BinaryOp.POW, left=left, right=right, pos=tok.pos)

    def parse_unary(self) -> Expr:
        """'-' unary | primary"""
        tok = self.match(TokenKind.MINUS)
        if tok is not None:
            operand = self.parse_unary()
            return UnaryExpr(op=UnaryOp.NEG, operand=operand, pos=tok.pos)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        """NUMBER | '(' expr ')' | name reference | call"""
        tok = self.current

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            self.expect(TokenKind.RPAREN, "')'")
            return expr

        if tok.kind == TokenKind.NUMBER:
            self.advance()
            return Literal(value=tok.number, pos=tok.pos)

        if tok.kind == TokenKind.NAME:
            return self._parse_name()

        if tok.kind == TokenKind.EOF:
            self.lexer.fail("Unexpected end of expression")
        self.lexer.fail(f"Unexpected token: {_describe(tok)}")

    def _parse_left_assoc(
        self, ops: dict[TokenKind, BinaryOp], operand: Callable[[], Expr]
    ) -> Expr:
        left = operand()
        while self.current.kind in ops:
            tok = self.advance()
            right = operand()
            left = BinaryExpr(op=ops[tok.kind], left=left, right=right, pos=tok.pos)
        return left

    def _parse_name(self) -> Expr:
        tok = self.advance()
        name = tok.name

        if self.definition is not None:
            index = self.definition.param_index(name)
            if index is not None:
                return ParamRef(index=index, name=name, pos=tok.pos)

        target = self._resolve(name)
        if target is None:
            self.lexer.fail(f"Unknown name '{name}'", ErrorKind.NAME, tok.pos)

        if not target.is_function:
            if self.current.kind == TokenKind.LPAREN:
                self.lexer.fail(f"'{name}' is not a function", ErrorKind.ARITY, tok.pos)
            return GlobalRef(definition=target, pos=tok.pos)

        if self.current.kind != TokenKind.LPAREN:
            self.lexer.fail(
                f"Function '{name}' must be called with {target.arity} argument(s)",
                ErrorKind.ARITY,
                tok.pos,
            )
        args = self._parse_args()
        if len(args) != target.arity:
            self.lexer.fail(
                f"Function '{name}' expects {target.arity} argument(s), got {len(args)}",
                ErrorKind.ARITY,
                tok.pos,
            )
        return Call(definition=target, args=args, pos=tok.pos)

    def _resolve(self, name: str) -> Definition | None:
        # Only functions may refer to themselves; a constant's body sees the
        # previous definition of its name, if any.
        own = self.definition
        if own is not None and own.is_function and own.name == name:
            return own
        return self.table.lookup(name)

    def _parse_args(self) -> tuple[Expr, ...]:
        """'(' (expr (',' expr)*)? ')'"""
        self.expect(TokenKind.LPAREN, "'('")
        args: list[Expr] = []
        if self.current.kind != TokenKind.RPAREN:
            args.append(self.parse_expr())
            while self.match(TokenKind.COMMA):
                args.append(self.parse_expr())
        self.expect(TokenKind.RPAREN, "',' or ')'")
        return tuple(args)


def _parse_param_list(lexer: Lexer) -> list[str]:
    """'(' (NAME (',' NAME)*)? ')'"""
    lexer.advance()
    names: list[str] = []

    if lexer.current.kind == TokenKind.RPAREN:
        lexer.advance()
        return names

    if lexer.current.kind != TokenKind.NAME:
        lexer.fail("Expected name or ')' after '('")

    while True:
        tok = lexer.advance()
        if tok.name in names:
            lexer.fail(f"Duplicate parameter name '{tok.name}'", ErrorKind.NAME, tok.pos)
        names.append(tok.name)

        if lexer.current.kind == TokenKind.RPAREN:
            lexer.advance()
            return names

        if lexer.current.kind != TokenKind.COMMA:
            lexer.fail("Expected ',' or ')' after name")
        lexer.advance()

        if lexer.current.kind != TokenKind.NAME:
            lexer.fail("Expected name after ','")


def _as_lexer(source: Lexer | SourceText | str) -> Lexer:
    return source if isinstance(source, Lexer) else Lexer(source)


def _recursion_error(lexer: Lexer) -> ExpressionError:
    return ExpressionError(
        ErrorKind.STACK_EXHAUSTION,
        "Expression is nested too deeply",
        lexer.source,
        lexer.current.pos,
    )


def parse_expr(source: Lexer | SourceText | str, table: DefinitionTable | None = None) -> ExpressionTree:
    """Parse an expression string into a tree.

    Args:
        source: Expression text (e.g., "2 + 3 * 4"), or a Lexer already
            positioned at the first token of the expression.
        table: Definitions that names may refer to. Defaults to an empty table.

    Returns:
        Parsed expression tree carrying its source text.

    Raises:
        ExpressionError: If the text cannot be tokenized or parsed.
    """
    lexer = _as_lexer(source)
    parser = Parser(lexer, table if table is not None else DefinitionTable())
    try:
        root = parser.parse_full_expression()
    except RecursionError:
        raise _recursion_error(lexer) from None
    return ExpressionTree(root=root, source=lexer.source)


def parse_definition(
    source: Lexer | SourceText | str, table: DefinitionTable | None = None
) -> Definition:
    """Parse ``name [(params)] => body`` into a Definition.

    The Definition is not inserted into ``table``; see ``define``.

    Raises:
        ExpressionError: If the definition is malformed or its body invalid.
    """
    lexer = _as_lexer(source)
    if lexer.current.kind != TokenKind.NAME:
        lexer.fail("Name expected for definition")
    name = lexer.advance().name

    params: list[str] = []
    is_function = False
    if lexer.current.kind == TokenKind.LPAREN:
        is_function = True
        params = _parse_param_list(lexer)

    if lexer.current.kind != TokenKind.LAMBDA:
        lexer.fail("'=>' expected")
    lexer.advance()

    definition = Definition(name, params, is_function)
    parser = Parser(lexer, table if table is not None else DefinitionTable(), definition)
    try:
        body = parser.parse_full_expression()
    except RecursionError:
        raise _recursion_error(lexer) from None
    definition.bind(body, lexer.source)
    return definition


def define(source: Lexer | SourceText | str, table: DefinitionTable) -> Definition:
    """Parse a definition and insert it into ``table``."""
    definition = parse_definition(source, table)
    table.insert(definition)
    return definition
