"""
num - an expression evaluator with user-defined constants and recursive functions.

Tokenizes a line of text, parses it under an operator-precedence grammar,
and evaluates it with mixed 64-bit integer / double arithmetic.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core.definitions import DefinitionTable
from .core.errors import ConfigError, ErrorKind, ExpressionError, NumError
from .core.expression_lang import define, evaluate, parse_definition, parse_expr
from .core.number import Number


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("num-calc")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ConfigError",
    "DefinitionTable",
    "ErrorKind",
    "ExpressionError",
    "Number",
    "NumError",
    "define",
    "evaluate",
    "parse_definition",
    "parse_expr",
]
