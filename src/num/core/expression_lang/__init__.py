"""
num expression language.

Tokenizer, parser and evaluator for integer/real arithmetic with
user-defined constants and (recursive) functions.

Usage:
    from num.core.definitions import DefinitionTable
    from num.core.expression_lang import define, evaluate, parse_expr

    table = DefinitionTable()
    define("sq(x) => x * x", table)
    result = evaluate(parse_expr("sq(3) + 1", table))
    # result == Number(10)
"""

from num.core.expression_lang.evaluator import EvaluationContext, evaluate
from num.core.expression_lang.parser import Parser, define, parse_definition, parse_expr
from num.core.expression_lang.tokenizer import Lexer, Token, TokenKind, tokenize

__all__ = [
    "EvaluationContext",
    "Lexer",
    "Parser",
    "Token",
    "TokenKind",
    "define",
    "evaluate",
    "parse_definition",
    "parse_expr",
    "tokenize",
]
