"""Shared fixtures for num unit tests."""

from __future__ import annotations

import pytest

from num.core.definitions import DefinitionTable
from num.core.expression_lang.parser import define

PRIME_DEFINITIONS = [
    "is_prime_helper(n, f) => f * f > n ? 1 : (n % f = 0 ? 0 : is_prime_helper(n, f + 2))",
    "is_prime(n) => n < 3 ? (n = 2) : ((n & 1) = 0 ? 0 : is_prime_helper(n, 3))",
]


@pytest.fixture
def table() -> DefinitionTable:
    """An empty definition table."""
    return DefinitionTable()


@pytest.fixture
def prime_table() -> DefinitionTable:
    """A table holding is_prime and its helper."""
    t = DefinitionTable()
    for text in PRIME_DEFINITIONS:
        define(text, t)
    return t


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no NUM_* variables set."""
    monkeypatch.chdir(tmp_path)
    for var in ("NUM_DEFINITIONS_FILE", "NUM_MAX_CALL_DEPTH", "NUM_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
