"""Tests for the jsmini interpreter and its value helpers."""

import io
import math

import pytest

from jsmini.parse import parse
from jsmini.runtime import (
    FALSE,
    NULL,
    TRUE,
    UNDEFINED,
    Interpreter,
    InterpreterError,
    VBool,
    VFunction,
    VNumber,
    VString,
    VUndefined,
    format_number,
    interpret,
    to_boolean,
    to_number,
    values_equal,
)


def _run(source: str):
    return interpret(parse(source), out=io.StringIO())


def _value(source: str) -> str:
    return _run(source).to_string()


# ── Value helpers ────────────────────────────────────────────


@pytest.mark.parametrize(
    "n,text",
    [
        (14.0, "14"),
        (18.5, "18.5"),
        (-3.0, "-3"),
        (0.1 + 0.2, "0.30000000000000004"),
        (math.inf, "Infinity"),
        (-math.inf, "-Infinity"),
        (math.nan, "NaN"),
        (1e21, "1e+21"),
        (1e-7, "1e-7"),
        (-0.0, "0"),
        (0.000001, "0.000001"),
        (0.00123, "0.00123"),
        (1.5e-7, "1.5e-7"),
        (123456789012345680000.0, "123456789012345680000"),
        (2.0**53, "9007199254740992"),
        (1.25e21, "1.25e+21"),
        (-1e300, "-1e+300"),
    ],
)
def test_format_number(n: float, text: str):
    assert format_number(n) == text


def test_to_number_coercions():
    assert to_number(TRUE) == 1
    assert to_number(FALSE) == 0
    assert to_number(NULL) == 0
    assert math.isnan(to_number(UNDEFINED))
    assert to_number(VString("42")) == 42
    assert to_number(VString(" 2.5 ")) == 2.5
    assert to_number(VString("")) == 0
    assert to_number(VString("abc")) == 0
    assert to_number(VString("Infinity")) == math.inf
    assert to_number(VString("-Infinity")) == -math.inf
    assert to_number(VString("0x10")) == 16
    assert to_number(VString("0o17")) == 15
    assert to_number(VString("0b101")) == 5
    assert to_number(VString("1e3")) == 1000
    # Only ASCII digits count
    assert to_number(VString("\u0661")) == 0
    assert to_number(VString("-0x10")) == 0


def test_truthiness():
    assert to_boolean(VNumber(1))
    assert not to_boolean(VNumber(0))
    assert not to_boolean(VNumber(math.nan))
    assert to_boolean(VString("a"))
    assert not to_boolean(VString(""))
    assert not to_boolean(NULL)
    assert not to_boolean(UNDEFINED)
    assert to_boolean(TRUE)


def test_values_equal():
    assert values_equal(VNumber(1), VNumber(1))
    assert values_equal(NULL, UNDEFINED)
    assert values_equal(VNumber(1), VString("1"))
    assert values_equal(VBool(False), VNumber(0))
    assert not values_equal(VString("a"), TRUE)
    assert not values_equal(VNumber(math.nan), VNumber(math.nan))
    # Number against anything else compares numerically
    assert values_equal(NULL, VNumber(0))
    assert not values_equal(UNDEFINED, VNumber(0))


def test_values_are_immutable():
    v = VNumber(1)
    with pytest.raises(AttributeError):
        v.value = 2  # type: ignore[misc]


# ── Evaluation ───────────────────────────────────────────────


def test_empty_program_is_undefined():
    assert isinstance(_run(""), VUndefined)


def test_last_expression_value():
    assert _value("let x = 2; x * 7; let y = 1;") == "14"


def test_declaration_without_initializer_is_undefined():
    assert _value("let x; x;") == "undefined"


def test_arithmetic_coercion_of_booleans_and_strings():
    assert _value("true + 1;") == "2"
    assert _value('"3" * 2;') == "6"
    assert _value("null + 1;") == "1"
    assert _value("let u; u + 1;") == "NaN"


def test_numeric_strings_follow_number_conversion():
    assert _value('"Infinity" * 1;') == "Infinity"
    assert _value('"0x10" * 1;') == "16"


def test_number_text_matches_javascript():
    assert _value("0.000001;") == "0.000001"
    assert _value("123456789012345680000;") == "123456789012345680000"


def test_comparison_coerces_mixed_operands():
    assert _value('"10" > 9;') == "true"


def test_modulo_by_zero_is_nan():
    assert math.isnan(_run("7 % 0;").value)


def test_division_by_zero_is_positive_infinity():
    assert _run("0 / 0;").value == math.inf
    assert _run("-4 / 0;").value == math.inf


def test_logical_operators_return_operands():
    assert _value('"" || "fallback";') == "fallback"
    assert _value("0 && missing;") == "0"


def test_short_circuit_skips_right_side():
    # `missing` would raise if evaluated
    assert _value("true || missing;") == "true"
    assert _value("false && missing;") == "false"


def test_block_scope_restored_after_error():
    interp = Interpreter(out=io.StringIO())
    with pytest.raises(InterpreterError):
        interp.execute(parse("{ let inner = 1; nope; }"))
    assert interp.scope is interp.globals


def test_for_scope_restored_after_break():
    interp = Interpreter(out=io.StringIO())
    interp.execute(parse("for (let i = 0; ; i = i + 1) { if (i == 2) break; }"))
    assert interp.scope is interp.globals
    assert interp.globals.lookup("i") is None


def test_continue_runs_update():
    source = """
    let updates = 0;
    for (let i = 0; i < 3; i = i + 1) {
        updates = updates + 1;
        continue;
    }
    updates;
    """
    assert _value(source) == "3"


def test_break_skips_update():
    source = """
    let last = 0;
    for (let i = 0; i < 10; i = i + 1) {
        last = i;
        break;
    }
    last;
    """
    assert _value(source) == "0"


def test_function_value_and_closure():
    interp = Interpreter(out=io.StringIO())
    interp.execute(parse("function f() { return 1; }"))
    fn = interp.globals.lookup("f")
    assert isinstance(fn, VFunction)
    assert fn.closure is interp.globals
    assert fn.to_string() == "<function f>"


def test_function_sees_later_global_updates():
    source = """
    let base = 1;
    function get() { return base; }
    base = 5;
    get();
    """
    assert _value(source) == "5"


def test_recursion():
    source = """
    function fact(n) { if (n <= 1) return 1; return n * fact(n - 1); }
    fact(10);
    """
    assert _value(source) == "3628800"


def test_function_locals_do_not_leak():
    with pytest.raises(InterpreterError) as exc_info:
        _run("function f() { let local = 1; } f(); local;")
    assert str(exc_info.value) == "Runtime Error: Variable 'local' is not defined"


def test_arity_mismatch():
    with pytest.raises(InterpreterError) as exc_info:
        _run("function f(a, b) { return a; } f(1);")
    assert str(exc_info.value) == (
        "Runtime Error: Function 'f' expects 2 arguments but got 1"
    )


def test_call_non_function():
    with pytest.raises(InterpreterError) as exc_info:
        _run("let a = 1; a();")
    assert str(exc_info.value) == "Runtime Error: Cannot call non-function 'a'"


def test_call_result_non_function_expression():
    with pytest.raises(InterpreterError) as exc_info:
        _run("function f() { return 1; } f()();")
    assert "Cannot call non-function expression" in str(exc_info.value)


def test_assign_undefined_variable():
    with pytest.raises(InterpreterError) as exc_info:
        _run("x = 1;")
    assert str(exc_info.value) == (
        "Runtime Error: Cannot assign to undefined variable 'x'"
    )


def test_return_at_top_level():
    with pytest.raises(InterpreterError) as exc_info:
        _run("return 1;")
    assert "Illegal return outside of function" in str(exc_info.value)


def test_break_escaping_function():
    with pytest.raises(InterpreterError) as exc_info:
        _run("while (true) { function f() { break; } f(); }")
    assert "Illegal break" in str(exc_info.value)


def test_print_writes_to_stream():
    out = io.StringIO()
    result = interpret(parse('print 2 + 2; print "x" + 1;'), out=out)
    assert out.getvalue() == "4\nx1\n"
    assert result is UNDEFINED


def test_print_defaults_to_stdout(capsys):
    interpret(parse("print 1.5;"))
    assert capsys.readouterr().out == "1.5\n"


def test_execute_resets_last_value():
    interp = Interpreter(out=io.StringIO())
    interp.execute(parse("1;"))
    assert isinstance(interp.execute(parse("let z = 1;")), VUndefined)
