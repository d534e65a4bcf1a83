"""jsmini emitter: renders a Program as JavaScript source text.

The output is valid jsmini as well, so parse(to_javascript(p)) has the same
shape as p.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .ast import (
    AssignmentExpression,
    BinaryExpression,
    BlockStatement,
    BreakStatement,
    CallExpression,
    ContinueStatement,
    Expression,
    ExpressionStatement,
    ForStatement,
    FunctionDeclaration,
    GroupingExpression,
    Identifier,
    IfStatement,
    Literal,
    LogicalExpression,
    PrintStatement,
    Program,
    ReturnStatement,
    Statement,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from .parse import quote_string
from .runtime import format_number

logger = logging.getLogger(__name__)

HEADER_COMMENT = "// Generated by jsmini"


@dataclass
class EmitOptions:
    """Formatting knobs for the generated JavaScript."""

    indent_size: int = 2
    semicolons: bool = True
    comments: bool = False


def to_javascript(program: Program, options: EmitOptions | None = None) -> str:
    """Render a `Program` as JavaScript source text."""
    return _Emitter(options or EmitOptions()).emit_program(program)


class _Emitter:
    # Expression precedence (higher binds tighter)
    _PREC_ASSIGN: int = 1
    _PREC_OR: int = 2
    _PREC_AND: int = 3
    _PREC_EQUALITY: int = 4
    _PREC_COMPARE: int = 5
    _PREC_SUM: int = 6
    _PREC_PRODUCT: int = 7
    _PREC_UNARY: int = 8
    _PREC_CALL: int = 9
    _PREC_PRIMARY: int = 10

    _BIN_PREC: dict[str, int] = {
        "||": _PREC_OR,
        "&&": _PREC_AND,
        "==": _PREC_EQUALITY,
        "!=": _PREC_EQUALITY,
        "<": _PREC_COMPARE,
        "<=": _PREC_COMPARE,
        ">": _PREC_COMPARE,
        ">=": _PREC_COMPARE,
        "+": _PREC_SUM,
        "-": _PREC_SUM,
        "*": _PREC_PRODUCT,
        "/": _PREC_PRODUCT,
        "%": _PREC_PRODUCT,
    }

    def __init__(self, options: EmitOptions) -> None:
        self._options = options
        self._indent = " " * options.indent_size
        self._semi = ";" if options.semicolons else ""
        self._lines: list[str] = []
        self._indent_level: int = 0

    # ── Public ──────────────────────────────────────────────

    def emit_program(self, program: Program) -> str:
        self._lines = []
        self._indent_level = 0
        if self._options.comments:
            self._lines.append(HEADER_COMMENT)
        for stmt in program.body:
            self._emit_stmt(stmt)
        logger.debug("emitted %d line(s)", len(self._lines))
        text = "\n".join(self._lines)
        if text == "":
            return ""
        return text + "\n"

    # ── Lines / Blocks ──────────────────────────────────────

    def _emit_line(self, line: str) -> None:
        self._lines.append(self._indent * self._indent_level + line)

    def _emit_stmt_block(self, stmts: list[Statement]) -> None:
        self._indent_level += 1
        for stmt in stmts:
            self._emit_stmt(stmt)
        self._indent_level -= 1

    def _emit_clause(self, header: str, body: Statement) -> None:
        """Emit a header line followed by its body statement."""
        if isinstance(body, BlockStatement):
            self._emit_line(header + " {")
            self._emit_stmt_block(body.body)
            self._emit_line("}")
            return
        self._emit_line(header)
        self._emit_stmt_block([body])

    # ── Stmts ───────────────────────────────────────────────

    def _emit_stmt(self, stmt: Statement) -> None:
        if isinstance(stmt, VariableDeclaration):
            self._emit_line(self._render_var_decl(stmt) + self._semi)
            return
        if isinstance(stmt, ExpressionStatement):
            self._emit_line(self._render_expr(stmt.expression, self._PREC_ASSIGN) + self._semi)
            return
        if isinstance(stmt, PrintStatement):
            self._emit_line(
                "print " + self._render_expr(stmt.expression, self._PREC_ASSIGN) + self._semi
            )
            return
        if isinstance(stmt, ReturnStatement):
            if stmt.argument is None:
                self._emit_line("return" + self._semi)
            else:
                self._emit_line(
                    "return " + self._render_expr(stmt.argument, self._PREC_ASSIGN) + self._semi
                )
            return
        if isinstance(stmt, BreakStatement):
            self._emit_line("break" + self._semi)
            return
        if isinstance(stmt, ContinueStatement):
            self._emit_line("continue" + self._semi)
            return
        if isinstance(stmt, BlockStatement):
            self._emit_line("{")
            self._emit_stmt_block(stmt.body)
            self._emit_line("}")
            return
        if isinstance(stmt, IfStatement):
            self._emit_if(stmt, "")
            return
        if isinstance(stmt, WhileStatement):
            cond = self._render_expr(stmt.condition, self._PREC_ASSIGN)
            self._emit_clause("while (" + cond + ")", stmt.body)
            return
        if isinstance(stmt, ForStatement):
            self._emit_for_stmt(stmt)
            return
        if isinstance(stmt, FunctionDeclaration):
            params = ", ".join(p.name for p in stmt.parameters)
            self._emit_clause(
                "function " + stmt.name.name + "(" + params + ")", stmt.body
            )
            return
        raise TypeError("unhandled stmt type: " + type(stmt).__name__)

    def _render_var_decl(self, stmt: VariableDeclaration) -> str:
        line = stmt.kind + " " + stmt.identifier.name
        if stmt.initializer is not None:
            line += " = " + self._render_expr(stmt.initializer, self._PREC_ASSIGN)
        return line

    def _emit_if(self, stmt: IfStatement, prefix: str) -> None:
        cond = self._render_expr(stmt.condition, self._PREC_ASSIGN)
        self._emit_clause(prefix + "if (" + cond + ")", stmt.consequent)
        alt = stmt.alternate
        if alt is None:
            return
        if isinstance(stmt.consequent, BlockStatement):
            # Join the closing brace with the else keyword
            self._lines.pop()
            else_prefix = "} else"
        else:
            else_prefix = "else"
        if isinstance(alt, IfStatement):
            self._emit_if(alt, else_prefix + " ")
            return
        self._emit_clause(else_prefix, alt)

    def _emit_for_stmt(self, stmt: ForStatement) -> None:
        init = ""
        if isinstance(stmt.init, VariableDeclaration):
            init = self._render_var_decl(stmt.init)
        elif isinstance(stmt.init, ExpressionStatement):
            init = self._render_expr(stmt.init.expression, self._PREC_ASSIGN)
        cond = ""
        if stmt.condition is not None:
            cond = self._render_expr(stmt.condition, self._PREC_ASSIGN)
        update = ""
        if stmt.update is not None:
            update = self._render_expr(stmt.update, self._PREC_ASSIGN)
        self._emit_clause("for (" + init + "; " + cond + "; " + update + ")", stmt.body)

    # ── Exprs ───────────────────────────────────────────────

    def _render_expr(self, expr: Expression, min_prec: int) -> str:
        text, prec = self._render_expr_prec(expr)
        if prec < min_prec:
            return "(" + text + ")"
        return text

    def _render_expr_prec(self, expr: Expression) -> tuple[str, int]:
        if isinstance(expr, Literal):
            return self._render_literal(expr), self._PREC_PRIMARY
        if isinstance(expr, Identifier):
            return expr.name, self._PREC_PRIMARY
        if isinstance(expr, GroupingExpression):
            inner = self._render_expr(expr.expression, self._PREC_ASSIGN)
            return "(" + inner + ")", self._PREC_PRIMARY
        if isinstance(expr, CallExpression):
            callee = self._render_expr(expr.callee, self._PREC_CALL)
            args = ", ".join(
                self._render_expr(a, self._PREC_ASSIGN) for a in expr.arguments
            )
            return callee + "(" + args + ")", self._PREC_CALL
        if isinstance(expr, UnaryExpression):
            operand = self._render_expr(expr.argument, self._PREC_UNARY)
            if operand.startswith(expr.operator) and expr.operator == "-":
                # Keep `- -x` from reading as a decrement in JavaScript
                return expr.operator + " " + operand, self._PREC_UNARY
            return expr.operator + operand, self._PREC_UNARY
        if isinstance(expr, (BinaryExpression, LogicalExpression)):
            prec = self._BIN_PREC[expr.operator]
            left = self._render_expr(expr.left, prec)
            right = self._render_expr(expr.right, prec + 1)
            return left + " " + expr.operator + " " + right, prec
        if isinstance(expr, AssignmentExpression):
            value = self._render_expr(expr.value, self._PREC_ASSIGN)
            return expr.target.name + " " + expr.operator + " " + value, self._PREC_ASSIGN
        raise TypeError("unhandled expr type: " + type(expr).__name__)

    def _render_literal(self, expr: Literal) -> str:
        if expr.raw:
            return expr.raw
        v = expr.value
        if v is None:
            return "null"
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, str):
            return quote_string(v)
        return format_number(v)
