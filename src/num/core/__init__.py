"""Core num functionality: IR, numeric tower, definitions, configuration, definitions-file loading."""

from . import ir
from .config import NumConfig, load_config
from .definitions import DefinitionTable
from .errors import ConfigError, ErrorKind, ExpressionError, NumError
from .loader import find_definitions_file, load_definitions
from .number import Number
from .source import SourceText

__all__ = [
    "ir",
    "ConfigError",
    "DefinitionTable",
    "ErrorKind",
    "ExpressionError",
    "Number",
    "NumConfig",
    "NumError",
    "SourceText",
    "find_definitions_file",
    "load_config",
    "load_definitions",
]
