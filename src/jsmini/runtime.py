"""jsmini runtime: tree-walking evaluation of a parsed Program."""

from __future__ import annotations

import logging
import math
import re
import sys
from dataclasses import dataclass
from typing import TextIO

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
from .errors import JsMiniError
from .scope import Scope

logger = logging.getLogger(__name__)


# ============================================================
# Diagnostics
# ============================================================


class InterpreterError(JsMiniError):
    """Fatal runtime error; evaluation stops at the first one."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


# ============================================================
# Values
# ============================================================


class Value:
    """A runtime value. Values are immutable; operations build new ones."""

    type: str = ""

    def to_string(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class VNumber(Value):
    value: float
    type = "number"

    def to_string(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class VString(Value):
    value: str
    type = "string"

    def to_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class VBool(Value):
    value: bool
    type = "boolean"

    def to_string(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class VNull(Value):
    type = "null"

    @property
    def value(self) -> None:
        return None

    def to_string(self) -> str:
        return "null"


@dataclass(frozen=True)
class VUndefined(Value):
    type = "undefined"

    @property
    def value(self) -> None:
        return None

    def to_string(self) -> str:
        return "undefined"


@dataclass(frozen=True, eq=False)
class VFunction(Value):
    """A declared function together with the scope it was declared in."""

    decl: FunctionDeclaration
    closure: Scope[Value]
    type = "function"

    @property
    def name(self) -> str:
        return self.decl.name.name

    def to_string(self) -> str:
        return "<function " + self.name + ">"


NULL = VNull()
UNDEFINED = VUndefined()
TRUE = VBool(True)
FALSE = VBool(False)


def format_number(n: float) -> str:
    """Render a number the way JavaScript's String() does."""
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "Infinity" if n > 0 else "-Infinity"
    if n == 0:
        return "0"
    sign = "-" if n < 0 else ""
    # Shortest round-trip digits, with the decimal point after `point` digits
    text = repr(abs(n))
    exp = 0
    if "e" in text:
        text, exp_text = text.split("e")
        exp = int(exp_text)
    int_part, _, frac_part = text.partition(".")
    digits = int_part + frac_part
    point = len(int_part) + exp
    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    k = len(digits)
    if k <= point <= 21:
        return sign + digits + "0" * (point - k)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits
    e = point - 1
    e_text = ("+" if e >= 0 else "-") + str(abs(e))
    if k == 1:
        return sign + digits + "e" + e_text
    return sign + digits[0] + "." + digits[1:] + "e" + e_text


_DECIMAL_RE = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_INFINITY_RE = re.compile(r"^[+-]?Infinity$")
_RADIX_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
_RADIX_BASES: dict[str, int] = {"x": 16, "o": 8, "b": 2}


def to_boolean(v: Value) -> bool:
    if isinstance(v, VBool):
        return v.value
    if isinstance(v, VNumber):
        return v.value != 0 and not math.isnan(v.value)
    if isinstance(v, VString):
        return len(v.value) > 0
    if isinstance(v, (VNull, VUndefined)):
        return False
    return True


def to_number(v: Value) -> float:
    if isinstance(v, VNumber):
        return v.value
    if isinstance(v, VBool):
        return 1.0 if v.value else 0.0
    if isinstance(v, VString):
        text = v.value.strip()
        if text == "":
            return 0.0
        if _DECIMAL_RE.match(text):
            return float(text)
        if _INFINITY_RE.match(text):
            return -math.inf if text.startswith("-") else math.inf
        if _RADIX_RE.match(text):
            value = int(text[2:], _RADIX_BASES[text[1].lower()])
            try:
                return float(value)
            except OverflowError:
                return math.inf
        # Non-numeric strings coerce to 0
        return 0.0
    if isinstance(v, VNull):
        return 0.0
    return math.nan


def values_equal(left: Value, right: Value) -> bool:
    if left.type == right.type:
        if isinstance(left, VFunction):
            return left is right
        return left.value == right.value  # type: ignore[attr-defined]
    if isinstance(left, (VNull, VUndefined)) and isinstance(right, (VNull, VUndefined)):
        return True
    if isinstance(left, VNumber) or isinstance(right, VNumber):
        return to_number(left) == to_number(right)
    return False


def _compare(op: str, a: object, b: object) -> bool:
    if op == "<":
        return a < b  # type: ignore[operator]
    if op == "<=":
        return a <= b  # type: ignore[operator]
    if op == ">":
        return a > b  # type: ignore[operator]
    return a >= b  # type: ignore[operator]


def _remainder(a: float, b: float) -> float:
    # Sign follows the dividend
    if b == 0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return math.nan
    return math.fmod(a, b)


# ============================================================
# Control flow signals (internal)
# ============================================================


class _Signal(Exception):
    pass


class _Break(_Signal):
    pass


class _Continue(_Signal):
    pass


class _Return(_Signal):
    def __init__(self, value: Value):
        super().__init__("return")
        self.value = value


# ============================================================
# Interpreter
# ============================================================


class Interpreter:
    def __init__(self, out: TextIO | None = None):
        self.globals: Scope[Value] = Scope()
        self.scope: Scope[Value] = self.globals
        self.last_value: Value = UNDEFINED
        self.out: TextIO = out if out is not None else sys.stdout

    def execute(self, program: Program) -> Value:
        self.last_value = UNDEFINED
        try:
            for stmt in program.body:
                self.exec_stmt(stmt)
        except _Return:
            raise InterpreterError("Runtime Error: Illegal return outside of function")
        except _Break:
            raise InterpreterError("Runtime Error: Illegal break outside of loop")
        except _Continue:
            raise InterpreterError("Runtime Error: Illegal continue outside of loop")
        return self.last_value

    # ---- Statements --------------------------------------------------------

    def exec_block(self, stmts: list[Statement], scope: Scope[Value]) -> None:
        previous = self.scope
        self.scope = scope
        logger.debug("enter scope")
        try:
            for stmt in stmts:
                self.exec_stmt(stmt)
        finally:
            self.scope = previous
            logger.debug("leave scope")

    def exec_stmt(self, st: Statement) -> None:
        if isinstance(st, VariableDeclaration):
            value: Value = UNDEFINED
            if st.initializer is not None:
                value = self.eval_expr(st.initializer)
            self.scope.define(st.identifier.name, value)
            return

        if isinstance(st, ExpressionStatement):
            self.last_value = self.eval_expr(st.expression)
            return

        if isinstance(st, FunctionDeclaration):
            self.scope.define(st.name.name, VFunction(st, self.scope))
            return

        if isinstance(st, BlockStatement):
            self.exec_block(st.body, self.scope.child())
            return

        if isinstance(st, IfStatement):
            if to_boolean(self.eval_expr(st.condition)):
                self.exec_stmt(st.consequent)
            elif st.alternate is not None:
                self.exec_stmt(st.alternate)
            return

        if isinstance(st, WhileStatement):
            while to_boolean(self.eval_expr(st.condition)):
                try:
                    self.exec_stmt(st.body)
                except _Break:
                    break
                except _Continue:
                    continue
            return

        if isinstance(st, ForStatement):
            self.exec_for(st)
            return

        if isinstance(st, ReturnStatement):
            value = UNDEFINED
            if st.argument is not None:
                value = self.eval_expr(st.argument)
            raise _Return(value)

        if isinstance(st, BreakStatement):
            raise _Break()
        if isinstance(st, ContinueStatement):
            raise _Continue()

        if isinstance(st, PrintStatement):
            self.out.write(self.eval_expr(st.expression).to_string() + "\n")
            return

        raise InterpreterError("Unknown statement type: " + type(st).__name__)

    def exec_for(self, st: ForStatement) -> None:
        previous = self.scope
        self.scope = previous.child()
        try:
            if st.init is not None:
                self.exec_stmt(st.init)
            while True:
                if st.condition is not None:
                    if not to_boolean(self.eval_expr(st.condition)):
                        break
                try:
                    self.exec_stmt(st.body)
                except _Break:
                    break
                except _Continue:
                    # Falls through to the update clause
                    pass
                if st.update is not None:
                    self.eval_expr(st.update)
        finally:
            self.scope = previous

    # ---- Expressions -------------------------------------------------------

    def eval_expr(self, expr: Expression) -> Value:
        if isinstance(expr, Literal):
            return self.eval_literal(expr)

        if isinstance(expr, Identifier):
            value = self.scope.lookup(expr.name)
            if value is None:
                raise InterpreterError(
                    "Runtime Error: Variable '" + expr.name + "' is not defined"
                )
            return value

        if isinstance(expr, BinaryExpression):
            left = self.eval_expr(expr.left)
            right = self.eval_expr(expr.right)
            return self.eval_binary(expr.operator, left, right)

        if isinstance(expr, UnaryExpression):
            operand = self.eval_expr(expr.argument)
            if expr.operator == "-":
                return VNumber(-to_number(operand))
            if expr.operator == "!":
                return FALSE if to_boolean(operand) else TRUE
            raise InterpreterError("Unknown unary operator: " + expr.operator)

        if isinstance(expr, LogicalExpression):
            left = self.eval_expr(expr.left)
            if expr.operator == "&&":
                if not to_boolean(left):
                    return left
                return self.eval_expr(expr.right)
            if expr.operator == "||":
                if to_boolean(left):
                    return left
                return self.eval_expr(expr.right)
            raise InterpreterError("Unknown logical operator: " + expr.operator)

        if isinstance(expr, AssignmentExpression):
            value = self.eval_expr(expr.value)
            if not self.scope.assign(expr.target.name, value):
                raise InterpreterError(
                    "Runtime Error: Cannot assign to undefined variable '"
                    + expr.target.name
                    + "'"
                )
            return value

        if isinstance(expr, GroupingExpression):
            return self.eval_expr(expr.expression)

        if isinstance(expr, CallExpression):
            return self.eval_call(expr)

        raise InterpreterError("Unknown expression type: " + type(expr).__name__)

    def eval_literal(self, expr: Literal) -> Value:
        v = expr.value
        if isinstance(v, bool):
            return TRUE if v else FALSE
        if isinstance(v, (int, float)):
            return VNumber(float(v))
        if isinstance(v, str):
            return VString(v)
        return NULL

    def eval_binary(self, op: str, left: Value, right: Value) -> Value:
        if op == "+":
            if isinstance(left, VString) or isinstance(right, VString):
                return VString(left.to_string() + right.to_string())
            return VNumber(to_number(left) + to_number(right))
        if op == "-":
            return VNumber(to_number(left) - to_number(right))
        if op == "*":
            return VNumber(to_number(left) * to_number(right))
        if op == "/":
            divisor = to_number(right)
            if divisor == 0:
                return VNumber(math.inf)
            return VNumber(to_number(left) / divisor)
        if op == "%":
            return VNumber(_remainder(to_number(left), to_number(right)))
        if op in ("<", "<=", ">", ">="):
            if isinstance(left, VString) and isinstance(right, VString):
                return VBool(_compare(op, left.value, right.value))
            return VBool(_compare(op, to_number(left), to_number(right)))
        if op == "==":
            return VBool(values_equal(left, right))
        if op == "!=":
            return VBool(not values_equal(left, right))
        raise InterpreterError("Unknown binary operator: " + op)

    def eval_call(self, expr: CallExpression) -> Value:
        callee = self.eval_expr(expr.callee)
        args = [self.eval_expr(a) for a in expr.arguments]
        if not isinstance(callee, VFunction):
            if isinstance(expr.callee, Identifier):
                what = "'" + expr.callee.name + "'"
            else:
                what = "expression"
            raise InterpreterError("Runtime Error: Cannot call non-function " + what)
        params = callee.decl.parameters
        if len(args) != len(params):
            raise InterpreterError(
                "Runtime Error: Function '"
                + callee.name
                + "' expects "
                + str(len(params))
                + " arguments but got "
                + str(len(args))
            )
        logger.debug("call %s with %d argument(s)", callee.name, len(args))
        frame = callee.closure.child()
        for param, arg in zip(params, args):
            frame.define(param.name, arg)
        try:
            self.exec_block(callee.decl.body.body, frame)
        except _Return as r:
            return r.value
        except _Break:
            raise InterpreterError("Runtime Error: Illegal break outside of loop")
        except _Continue:
            raise InterpreterError("Runtime Error: Illegal continue outside of loop")
        return UNDEFINED


# ============================================================
# Public API
# ============================================================


def interpret(program: Program, out: TextIO | None = None) -> Value:
    """Execute a Program in a fresh global scope; returns the last expression value."""
    return Interpreter(out).execute(program)
