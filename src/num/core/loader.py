"""
Definitions-file loading.

A definitions file holds one definition per line, written like an
interactive ``def`` command without the leading keyword:

    sqrt(n) => n ** 0.5
    is_prime_helper(n, f) => f * f > n ? 1 : n % f = 0 ? 0 : is_prime_helper(n, f + 2)

Blank lines are skipped. A bad line is reported and skipped; the rest of the
file still loads.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from num.core.definitions import DefinitionTable
from num.core.errors import ExpressionError
from num.core.expression_lang.parser import define
from num.core.expression_lang.tokenizer import Lexer, TokenKind

logger = logging.getLogger(__name__)


def find_definitions_file(
    name: str,
    search_path: Iterable[Path] = (),
    environ: dict[str, str] | None = None,
) -> Path | None:
    """
    Locate a definitions file.

    Searches the current directory, then each directory of ``search_path``,
    then each directory on PATH.

    Returns:
        Path of the first match, or None
    """
    env = environ if environ is not None else dict(os.environ)
    candidates: list[Path] = [Path.cwd(), *search_path]
    candidates.extend(Path(p) for p in env.get("PATH", "").split(os.pathsep) if p)

    for directory in candidates:
        path = directory / name
        if path.is_file():
            return path
    return None


def load_definitions(path: Path, table: DefinitionTable) -> list[tuple[int, ExpressionError]]:
    """
    Insert every valid definition in ``path`` into ``table``.

    Args:
        path: Definitions file
        table: Table that receives the definitions, in file order

    Returns:
        (line number, error) for each rejected line, 1-indexed
    """
    logger.info("Loading definitions from %s", path)
    errors: list[tuple[int, ExpressionError]] = []

    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            try:
                lexer = Lexer(line.rstrip("\r\n"))
                if lexer.current.kind == TokenKind.EOF:
                    continue
                define(lexer, table)
            except ExpressionError as e:
                logger.debug("Rejected %s:%d: %s", path, line_number, e.message)
                errors.append((line_number, e))

    return errors
