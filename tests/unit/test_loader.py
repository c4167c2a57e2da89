"""Tests for definitions-file discovery and loading."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from num.core.definitions import DefinitionTable
from num.core.errors import ErrorKind
from num.core.expression_lang.evaluator import evaluate
from num.core.expression_lang.parser import parse_expr
from num.core.loader import find_definitions_file, load_definitions
from num.core.number import Number

DEFINITIONS = """\
sqrt(n) => n ** 0.5

is_prime_helper(n, f) => f * f > n ? 1 : n % f = 0 ? 0 : is_prime_helper(n, f + 2)
is_prime(n) => n < 3 ? n = 2 : (n & 1) = 0 ? 0 : is_prime_helper(n, 3)
broken(n) => n +
limit => 10
"""


class TestFindDefinitionsFile:
    def test_current_directory_first(self, isolated_env: Path) -> None:
        other = isolated_env / "other"
        other.mkdir()
        (other / "num.ini").write_text("")
        (isolated_env / "num.ini").write_text("")
        found = find_definitions_file("num.ini", [other], environ={})
        assert found == isolated_env / "num.ini"

    def test_search_path_before_path(self, isolated_env: Path) -> None:
        lib = isolated_env / "lib"
        bin_dir = isolated_env / "bin"
        lib.mkdir()
        bin_dir.mkdir()
        (lib / "num.ini").write_text("")
        (bin_dir / "num.ini").write_text("")
        found = find_definitions_file("num.ini", [lib], environ={"PATH": str(bin_dir)})
        assert found == lib / "num.ini"

    def test_path_directories(self, isolated_env: Path) -> None:
        first = isolated_env / "a"
        second = isolated_env / "b"
        first.mkdir()
        second.mkdir()
        (second / "num.ini").write_text("")
        env = {"PATH": os.pathsep.join([str(first), "", str(second)])}
        assert find_definitions_file("num.ini", environ=env) == second / "num.ini"

    def test_directories_are_not_files(self, isolated_env: Path) -> None:
        (isolated_env / "num.ini").mkdir()
        assert find_definitions_file("num.ini", environ={}) is None

    def test_not_found(self, isolated_env: Path) -> None:
        assert find_definitions_file("num.ini", environ={"PATH": str(isolated_env)}) is None


class TestLoadDefinitions:
    @pytest.fixture
    def defs_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "num.ini"
        path.write_text(DEFINITIONS)
        return path

    def test_loads_valid_lines(self, defs_file: Path) -> None:
        table = DefinitionTable()
        load_definitions(defs_file, table)
        assert table.names() == ["sqrt", "is_prime_helper", "is_prime", "limit"]
        assert evaluate(parse_expr("is_prime(97)", table)) == Number(1)
        assert evaluate(parse_expr("sqrt(limit * 10)", table)) == Number(10.0)

    def test_reports_bad_lines(self, defs_file: Path) -> None:
        errors = load_definitions(defs_file, DefinitionTable())
        assert len(errors) == 1
        line_number, error = errors[0]
        assert line_number == 5
        assert error.kind == ErrorKind.SYNTAX
        assert error.source is not None
        assert error.source.text == "broken(n) => n +"

    def test_later_lines_see_earlier_definitions(self, tmp_path: Path) -> None:
        path = tmp_path / "num.ini"
        path.write_text("uses_later => later\nlater => 1\nuses_earlier => later + 1\n")
        table = DefinitionTable()
        errors = load_definitions(path, table)
        assert [n for n, _ in errors] == [1]
        assert errors[0][1].kind == ErrorKind.NAME
        assert table.names() == ["later", "uses_earlier"]

    def test_crlf_line_endings(self, tmp_path: Path) -> None:
        path = tmp_path / "num.ini"
        path.write_bytes(b"k => 2\r\nj => k * 3\r\n")
        table = DefinitionTable()
        assert load_definitions(path, table) == []
        assert evaluate(parse_expr("j", table)) == Number(6)

    def test_logging(self, defs_file: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="num.core.loader"):
            load_definitions(defs_file, DefinitionTable())
        assert "Loading definitions from" in caplog.text
        assert "Rejected" in caplog.text
