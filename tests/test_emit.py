"""Tests for the JavaScript emitter."""

import pytest

from jsmini.ast import (
    BinaryExpression,
    ExpressionStatement,
    Identifier,
    Literal,
    Program,
    UnaryExpression,
)
from jsmini.emit import HEADER_COMMENT, EmitOptions, to_javascript
from jsmini.parse import parse


def _gen(source: str, options: EmitOptions | None = None) -> str:
    return to_javascript(parse(source), options)


@pytest.mark.parametrize(
    "source",
    [
        "42;",
        '"hello world";',
        "true;",
        "null;",
        "3.14;",
        "2 + 3 * 4;",
        "(2 + 3) * 4;",
        "10 % 3;",
        "5 <= 10;",
        "5 != 3;",
        "true && false || x;",
        "-5;",
        "!true;",
        "let x = 5;",
        "const PI = 3.14;",
        "let x;",
        "x = x + 10;",
        "f(1, 2);",
        "return 42;",
        "return;",
        'print "hi";',
        "'say \"hi\"';",
    ],
)
def test_single_line_round_trip(source: str):
    assert _gen(source).strip() == source


def test_empty_program():
    assert _gen("") == ""


def test_empty_block():
    assert _gen("{}").strip() == "{\n}"


def test_output_ends_with_newline():
    assert _gen("let a = 1; let b = 2;") == "let a = 1;\nlet b = 2;\n"


def test_if_else_chain():
    source = """
    if (x > 10) { x = 0; } else if (x > 5) { x = 5; } else { x = 10; }
    """
    assert _gen(source) == (
        "if (x > 10) {\n"
        "  x = 0;\n"
        "} else if (x > 5) {\n"
        "  x = 5;\n"
        "} else {\n"
        "  x = 10;\n"
        "}\n"
    )


def test_unbraced_bodies():
    assert _gen("if (a) b; else c;") == "if (a)\n  b;\nelse\n  c;\n"


def test_while_loop():
    assert _gen("while (x > 0 && y < 10) { x = x - 1; }") == (
        "while (x > 0 && y < 10) {\n  x = x - 1;\n}\n"
    )


@pytest.mark.parametrize(
    "source,header",
    [
        ("for (let i = 0; i < 10; i = i + 1) {}", "for (let i = 0; i < 10; i = i + 1)"),
        ("for (; i < 10; i = i + 1) {}", "for (; i < 10; i = i + 1)"),
        ("for (let i = 0;; i = i + 1) {}", "for (let i = 0; ; i = i + 1)"),
        ("for (let i = 0; i < 10;) {}", "for (let i = 0; i < 10; )"),
        ("for (;;) {}", "for (; ; )"),
    ],
)
def test_for_headers(source: str, header: str):
    assert _gen(source).split("\n")[0] == header + " {"


def test_function_declaration():
    assert _gen("function add(a, b) { return a + b; }") == (
        "function add(a, b) {\n  return a + b;\n}\n"
    )


def test_break_and_continue():
    code = _gen("while (true) { if (x) break; continue; }")
    assert "    break;" in code
    assert "  continue;" in code


def test_nested_indentation():
    code = _gen("if (true) { let x = 5; if (x > 3) { x = x + 1; } }")
    lines = code.split("\n")
    assert "if (true) {" in lines
    assert "  let x = 5;" in lines
    assert "  if (x > 3) {" in lines
    assert "    x = x + 1;" in lines


def test_indent_size_option():
    code = _gen("{ let x = 5; }", EmitOptions(indent_size=4))
    assert "    let x = 5;" in code.split("\n")


def test_semicolons_option():
    assert _gen("let x = 5;", EmitOptions(semicolons=False)).strip() == "let x = 5"


def test_semicolons_option_keeps_for_separators():
    code = _gen("for (let i = 0; i < 2; i = i + 1) x;", EmitOptions(semicolons=False))
    assert code == "for (let i = 0; i < 2; i = i + 1)\n  x\n"


def test_comments_option():
    code = _gen("let x = 5;", EmitOptions(comments=True))
    assert code.split("\n")[0] == HEADER_COMMENT
    assert code.startswith("// Generated by")


def test_hand_built_tree_gets_parentheses():
    # (1 + 2) * 3 without a grouping node
    program = Program(
        [
            ExpressionStatement(
                BinaryExpression(
                    BinaryExpression(Literal(1.0, "1"), "+", Literal(2.0, "2")),
                    "*",
                    Literal(3.0, "3"),
                )
            )
        ]
    )
    assert to_javascript(program) == "(1 + 2) * 3;\n"


def test_right_operand_of_same_precedence_is_parenthesized():
    program = Program(
        [
            ExpressionStatement(
                BinaryExpression(
                    Identifier("a"),
                    "-",
                    BinaryExpression(Identifier("b"), "-", Identifier("c")),
                )
            )
        ]
    )
    assert to_javascript(program) == "a - (b - c);\n"


def test_double_negation_keeps_space():
    program = Program(
        [ExpressionStatement(UnaryExpression("-", UnaryExpression("-", Identifier("x"))))]
    )
    assert to_javascript(program) == "- -x;\n"


def test_literal_without_raw_text():
    program = Program([ExpressionStatement(Literal(2.5, ""))])
    assert to_javascript(program) == "2.5;\n"


PROGRAMS = [
    """
    let a = 0;
    let b = 1;
    let i = 0;
    while (i < 10) {
        let temp = a + b;
        a = b;
        b = temp;
        i = i + 1;
    }
    """,
    """
    function fact(n) {
        if (n <= 1) return 1;
        return n * fact(n - 1);
    }
    print fact(5);
    """,
    """
    let quote = 'say "hi"';
    let plain = 'it' + "'s";
    """,
    """
    let x = 10;
    if (x > 5) {
        while (x > 0) {
            if (x == 7) { break; } else if (x == 8) continue; else { x = x - 1; }
            x = x - (1 + 0) * 1;
        }
    } else {}
    for (;;) { break; }
    for (x = 0; x < 2; x = x + 1) print !(x == 1) || -x > 0;
    """,
]


@pytest.mark.parametrize("source", PROGRAMS)
def test_round_trip_preserves_shape(source: str):
    program = parse(source)
    assert parse(to_javascript(program)) == program


@pytest.mark.parametrize("source", PROGRAMS)
def test_emit_is_idempotent(source: str):
    program = parse(source)
    once = to_javascript(program, EmitOptions(indent_size=4))
    assert to_javascript(parse(once), EmitOptions(indent_size=4)) == once
