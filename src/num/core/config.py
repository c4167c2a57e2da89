"""
Configuration for num.

Configuration is loaded from the [num] section of num.toml in the current
directory, then overridden by environment variables:

    NUM_DEFINITIONS_FILE   name of the definitions file to search for
    NUM_MAX_CALL_DEPTH     maximum depth of nested function calls
    NUM_LOG_LEVEL          logging level (DEBUG, INFO, WARNING, ERROR)

Usage:
    from num.core.config import load_config

    config = load_config()
    context = EvaluationContext(config.max_call_depth)
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from num.core.errors import ConfigError
from num.core.expression_lang.evaluator import DEFAULT_MAX_CALL_DEPTH

DEFAULT_CONFIG_FILE = "num.toml"
DEFAULT_DEFINITIONS_FILE = "num.ini"

_ENV_OVERRIDES = {
    "NUM_DEFINITIONS_FILE": "definitions_file",
    "NUM_MAX_CALL_DEPTH": "max_call_depth",
    "NUM_LOG_LEVEL": "log_level",
}


class NumConfig(BaseModel):
    """Settings for the command line and the interactive session."""

    definitions_file: str = Field(
        default=DEFAULT_DEFINITIONS_FILE,
        description="File name searched for in the current directory, search_path and PATH",
    )
    search_path: list[Path] = Field(
        default_factory=list,
        description="Directories searched before PATH",
    )
    load_definitions: bool = True
    max_call_depth: int = Field(default=DEFAULT_MAX_CALL_DEPTH, ge=1, le=1_000_000)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper().strip()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{value}'")
        return level


def load_config(
    toml_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> NumConfig:
    """
    Load configuration from num.toml and the environment.

    Args:
        toml_path: Path to the TOML file (default: ./num.toml). A missing
            file is not an error.
        environ: Environment mapping (default: os.environ)

    Returns:
        NumConfig with file values, environment overrides, then defaults

    Raises:
        ConfigError: If the file is malformed or a value is invalid
    """
    path = toml_path if toml_path is not None else Path.cwd() / DEFAULT_CONFIG_FILE
    env = environ if environ is not None else dict(os.environ)

    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "rb") as f:
                data = dict(tomllib.load(f).get("num", {}))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid {path}: {e}") from e

    for var, field in _ENV_OVERRIDES.items():
        value = env.get(var, "").strip()
        if value:
            data[field] = value

    try:
        return NumConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
