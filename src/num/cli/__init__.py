"""
num CLI Package.

- session.py: interactive command loop
- utils.py: number/definition formatting and error printing

With no arguments ``num`` starts an interactive session; otherwise the
arguments are joined into one expression, evaluated, and printed.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from num.core.config import NumConfig, load_config
from num.core.definitions import DefinitionTable
from num.core.errors import ConfigError, ExpressionError
from num.core.loader import find_definitions_file, load_definitions

from .session import HELP_TEXT, Session
from .utils import print_error, version_callback

app = typer.Typer(
    help="Expression evaluator with user-defined constants and recursive functions.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def _load_table(config: NumConfig, defs: Path | None, no_defs: bool) -> DefinitionTable:
    table = DefinitionTable()
    if no_defs or (defs is None and not config.load_definitions):
        return table

    path = defs if defs is not None else find_definitions_file(config.definitions_file, config.search_path)
    if path is None:
        return table
    if not path.is_file():
        err_console.print(f"[red]Definitions file not found: {escape(str(path))}[/red]")
        raise typer.Exit(1)

    for line_number, error in load_definitions(path, table):
        err_console.print(f"Error: {path}, line {line_number}:", markup=False, highlight=False)
        print_error(err_console, error)
    return table


# Unknown options such as "-5" are passed through as part of the expression.
@app.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
        "allow_extra_args": True,
    }
)
def main_command(
    expression: list[str] | None = typer.Argument(
        None, help="Expression to evaluate (omit to start an interactive session)"
    ),
    defs: Path | None = typer.Option(
        None, "--defs", "-d", help="Definitions file to load instead of searching for num.ini"
    ),
    no_defs: bool = typer.Option(False, "--no-defs", help="Do not load any definitions file"),
    show_help: bool = typer.Option(False, "--usage", help="Show interactive usage and exit"),
    version: bool | None = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Evaluate an expression, or start an interactive session."""
    if show_help:
        console.print(HELP_TEXT, markup=False, highlight=False)
        return

    try:
        config = load_config()
    except ConfigError as e:
        err_console.print(f"[red]{escape(e.message)}[/red]", highlight=False)
        raise typer.Exit(1)

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    table = _load_table(config, defs, no_defs)
    session = Session(table, console, config)

    if not expression:
        session.run()
        return

    try:
        session.evaluate_line(" ".join(expression))
    except ExpressionError as e:
        print_error(console, e)
        raise typer.Exit(1)


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


__all__ = ["app", "main", "version_callback"]
