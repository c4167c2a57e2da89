"""
num CLI Utilities.

Shared formatting and printing helpers used by the command line and the
interactive session.
"""

from __future__ import annotations

import platform

import typer
from rich.console import Console
from rich.markup import escape

from num.core.errors import ExpressionError
from num.core.ir.definition import Definition
from num.core.number import Number

_UINT64_MASK = 2**64 - 1

# Aligns the source line and caret under the text after "Error: ".
_ERROR_INDENT = " " * 7


def get_version() -> str:
    """Get num version from package metadata."""
    from num import __version__

    return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"num {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def format_number(value: Number) -> str:
    """Integers as ``42 (0x2a)``, reals in fixed notation."""
    if value.is_real:
        return f"{value.value:f}"
    return f"{value.value} (0x{value.value & _UINT64_MASK:x})"


def format_definition(definition: Definition) -> str:
    return f"def {definition}"


def print_error(console: Console, error: ExpressionError) -> None:
    """Print an expression error with a caret under the offending character."""
    console.print(f"[red]Error:[/red] {escape(error.message)}")
    caret = error.format_caret()
    if caret:
        for line in caret.split("\n"):
            console.print(_ERROR_INDENT + line, markup=False, highlight=False)
