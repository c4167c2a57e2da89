"""
Interactive num session.

Commands:
- q: quit
- help: show usage
- defs: list all definitions
- def <name>: show one definition
- def <name>[(params)] => <expression>: define a constant or function
- <expression>: evaluate and print
"""

from __future__ import annotations

from rich.console import Console

from num.core.config import NumConfig
from num.core.definitions import DefinitionTable
from num.core.errors import ExpressionError
from num.core.expression_lang.evaluator import EvaluationContext, evaluate
from num.core.expression_lang.parser import define, parse_expr
from num.core.expression_lang.tokenizer import Lexer, TokenKind

from .utils import format_definition, format_number, print_error

HELP_TEXT = """\
Command Line:

    num                                    Process commands interactively.
    num <expression>                       Evaluate expression and exit.
    num --help                             Show command line options.

Interactive commands:

    q                                      Quit.
    help                                   Show this help message.
    <expression>                           Evaluate expression.
    def <name> => <expression>             Define variable.
    def <name>(<params>) => <expression>   Define function.
    defs                                   List all definitions.
    def <name>                             List specific definition.

Definitions may also be specified in a num.ini file, which may be in the current
directory or anywhere in the path. Definitions specified in num.ini do not begin
with the "def" keyword. Following are some example definitions:

    def sqrt(n) => n ** 0.5
    def is_prime_helper(n, f) => f * f > n ? 1 : n % f = 0 ? 0 : is_prime_helper(n, f + 2)
    def is_prime(n) => n < 3 ? n = 2 : (n & 1) = 0 ? 0 : is_prime_helper(n, 3)
"""

_COMMANDS = ("q", "help", "defs")


class Session:
    """Executes interactive commands against one DefinitionTable."""

    def __init__(
        self,
        table: DefinitionTable | None = None,
        console: Console | None = None,
        config: NumConfig | None = None,
    ) -> None:
        self.table = table if table is not None else DefinitionTable()
        self.console = console if console is not None else Console(soft_wrap=True)
        self.config = config if config is not None else NumConfig()

    def run(self) -> None:
        """Read and execute lines until 'q' or end of input."""
        self.console.print("Num expression evaluator. Type 'help' for usage.")
        while True:
            try:
                line = self.console.input("\n> ")
            except (EOFError, KeyboardInterrupt):
                break
            if not self.execute(line):
                break

    def execute(self, line: str) -> bool:
        """
        Execute one line.

        Returns:
            False if the session should end, True otherwise
        """
        try:
            lexer = Lexer(line)
            tok = lexer.current
            if tok.kind == TokenKind.EOF:
                return True

            # A command word on its own; otherwise the line is an expression.
            if tok.kind == TokenKind.NAME and tok.name in _COMMANDS and lexer.peek().kind == TokenKind.EOF:
                return self._run_command(tok.name)

            if tok.kind == TokenKind.NAME and tok.name == "def":
                lexer.advance()
                self._define(lexer)
                return True

            self.evaluate_line(lexer)
        except ExpressionError as e:
            print_error(self.console, e)
        return True

    def evaluate_line(self, source: Lexer | str) -> None:
        """Evaluate one expression and print `<source> = <value>`."""
        tree = parse_expr(source, self.table)
        value = evaluate(tree, EvaluationContext(self.config.max_call_depth))
        self._print(f"{tree.source} = {format_number(value)}")

    def list_definitions(self) -> None:
        for definition in self.table:
            text = format_definition(definition)
            if not self.table.is_current(definition):
                text += "  (superseded)"
            self._print(text)

    def _run_command(self, name: str) -> bool:
        if name == "q":
            return False
        if name == "help":
            self._print(HELP_TEXT.rstrip("\n"))
        elif name == "defs":
            self.list_definitions()
        return True

    def _define(self, lexer: Lexer) -> None:
        tok = lexer.current
        if tok.kind == TokenKind.NAME and lexer.peek().kind == TokenKind.EOF:
            existing = self.table.lookup(tok.name)
            if existing is not None:
                self._print(format_definition(existing))
            else:
                self._print(f"No definition for {tok.name}.")
            return

        define(lexer, self.table)

    def _print(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)
