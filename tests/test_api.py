"""Tests for the jsmini package-level API."""

import io

import pytest

import jsmini


def test_all_names_are_exported():
    for name in jsmini.__all__:
        assert hasattr(jsmini, name), name


def test_run_returns_last_value():
    assert jsmini.run("2 + 3 * 4;").to_string() == "14"


def test_run_grouped_mixed_arithmetic():
    assert jsmini.run("(2 + 3) * 4 - 5 / 2;").to_string() == "17.5"


def test_check_source_reports_errors():
    result = jsmini.check_source("x = 1;")
    assert not result.success
    assert result.errors


def test_stages_compose():
    program = jsmini.parse_tokens(jsmini.tokenize("print 1 + 1;"))
    assert jsmini.check(program).success
    out = io.StringIO()
    jsmini.interpret(program, out=out)
    assert out.getvalue() == "2\n"
    assert jsmini.to_javascript(program) == "print 1 + 1;\n"


def test_errors_share_a_base():
    with pytest.raises(jsmini.JsMiniError):
        jsmini.parse("let = 1;")
