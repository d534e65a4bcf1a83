"""jsmini checker: static scoping, constness and operand-type rules over a Program."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

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
    Node,
    PrintStatement,
    Program,
    ReturnStatement,
    Statement,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from .scope import Scope

logger = logging.getLogger(__name__)


# ============================================================
# TYPES
# ============================================================

TY_NUMBER: str = "number"
TY_STRING: str = "string"
TY_BOOLEAN: str = "boolean"
TY_NULL: str = "null"
TY_UNDEFINED: str = "undefined"
TY_ANY: str = "any"
TY_FUNCTION: str = "function"

ARITH_OPS: set[str] = {"+", "-", "*", "/", "%"}
ORDER_OPS: set[str] = {"<", "<=", ">", ">="}
EQUALITY_OPS: set[str] = {"==", "!="}


def literal_type(expr: Literal) -> str:
    # bool before number: bool is an int subclass
    if isinstance(expr.value, bool):
        return TY_BOOLEAN
    if isinstance(expr.value, float):
        return TY_NUMBER
    if isinstance(expr.value, str):
        return TY_STRING
    if expr.value is None:
        return TY_NULL
    return TY_ANY


def is_compatible(target: str, source: str) -> bool:
    """Whether a value of type source may be stored in a target-typed binding."""
    if target == source:
        return True
    if target == TY_ANY or source == TY_ANY:
        return True
    # Declared without initializer: accepts anything
    return target == TY_UNDEFINED


# ============================================================
# SYMBOLS / RESULT
# ============================================================


@dataclass
class SymbolInfo:
    """What the checker knows about one declared name."""

    kind: str
    type: str
    initialized: bool
    line: int = 0
    col: int = 0


@dataclass
class AnalysisResult:
    success: bool
    errors: list[str] = field(default_factory=list)


class _CheckAbort(Exception):
    """Unrecoverable internal error; ends the walk."""


# ============================================================
# CHECKER
# ============================================================


class Checker:
    def __init__(self) -> None:
        self.errors: list[str] = []
        self.scope: Scope[SymbolInfo] = Scope()
        self.loop_depth: int = 0

    def error(self, msg: str) -> None:
        self.errors.append(msg)

    def analyze(self, program: Program) -> AnalysisResult:
        self.errors = []
        try:
            for stmt in program.body:
                self.check_stmt(stmt)
        except _CheckAbort as e:
            self.error(str(e))
            return AnalysisResult(False, self.errors)
        logger.debug("analysis finished with %d error(s)", len(self.errors))
        return AnalysisResult(len(self.errors) == 0, self.errors)

    # ── Scope management ──────────────────────────────────────

    def declare(self, name: str, info: SymbolInfo) -> None:
        existing = self.scope.values.get(name)
        if existing is not None:
            self.error(
                "Variable '"
                + name
                + "' already declared in this scope at line "
                + str(existing.line)
                + ":"
                + str(existing.col)
            )
            return
        self.scope.define(name, info)

    def _symbol(self, node: Node, kind: str, typ: str, initialized: bool) -> SymbolInfo:
        if node.pos is None:
            return SymbolInfo(kind, typ, initialized)
        return SymbolInfo(kind, typ, initialized, node.pos.line, node.pos.col)

    def check_in_scope(self, stmts: list[Statement]) -> None:
        previous = self.scope
        self.scope = previous.child()
        logger.debug("enter block scope")
        try:
            for stmt in stmts:
                self.check_stmt(stmt)
        finally:
            self.scope = previous
            logger.debug("leave block scope")

    def check_loop_body(self, body: Statement) -> None:
        self.loop_depth += 1
        try:
            self.check_stmt(body)
        finally:
            self.loop_depth -= 1

    # ── Statement checking ────────────────────────────────────

    def check_stmt(self, stmt: Statement) -> None:
        if isinstance(stmt, VariableDeclaration):
            self.check_var_decl(stmt)
        elif isinstance(stmt, FunctionDeclaration):
            self.check_function_decl(stmt)
        elif isinstance(stmt, ExpressionStatement):
            self.check_expr(stmt.expression)
        elif isinstance(stmt, BlockStatement):
            self.check_in_scope(stmt.body)
        elif isinstance(stmt, IfStatement):
            self.check_expr(stmt.condition)
            self.check_stmt(stmt.consequent)
            if stmt.alternate is not None:
                self.check_stmt(stmt.alternate)
        elif isinstance(stmt, WhileStatement):
            self.check_expr(stmt.condition)
            self.check_loop_body(stmt.body)
        elif isinstance(stmt, ForStatement):
            self.check_for_stmt(stmt)
        elif isinstance(stmt, ReturnStatement):
            if stmt.argument is not None:
                self.check_expr(stmt.argument)
        elif isinstance(stmt, BreakStatement):
            if self.loop_depth == 0:
                self.error("'break' statement can only be used inside a loop")
        elif isinstance(stmt, ContinueStatement):
            if self.loop_depth == 0:
                self.error("'continue' statement can only be used inside a loop")
        elif isinstance(stmt, PrintStatement):
            self.check_expr(stmt.expression)
        else:
            raise _CheckAbort("Unknown statement type: " + type(stmt).__name__)

    def check_var_decl(self, stmt: VariableDeclaration) -> None:
        typ = TY_UNDEFINED
        if stmt.initializer is not None:
            typ = self.check_expr(stmt.initializer)
        info = self._symbol(
            stmt.identifier, stmt.kind, typ, stmt.initializer is not None
        )
        self.declare(stmt.identifier.name, info)

    def check_function_decl(self, stmt: FunctionDeclaration) -> None:
        self.declare(
            stmt.name.name, self._symbol(stmt.name, "let", TY_FUNCTION, True)
        )
        previous = self.scope
        saved_depth = self.loop_depth
        self.scope = previous.child()
        self.loop_depth = 0
        logger.debug("enter function scope %s", stmt.name.name)
        try:
            for param in stmt.parameters:
                self.declare(param.name, self._symbol(param, "let", TY_ANY, True))
            # Body statements share the parameter scope
            for body_stmt in stmt.body.body:
                self.check_stmt(body_stmt)
        finally:
            self.scope = previous
            self.loop_depth = saved_depth
            logger.debug("leave function scope %s", stmt.name.name)

    def check_for_stmt(self, stmt: ForStatement) -> None:
        previous = self.scope
        self.scope = previous.child()
        logger.debug("enter for scope")
        try:
            if stmt.init is not None:
                self.check_stmt(stmt.init)
            if stmt.condition is not None:
                self.check_expr(stmt.condition)
            if stmt.update is not None:
                self.check_expr(stmt.update)
            self.check_loop_body(stmt.body)
        finally:
            self.scope = previous
            logger.debug("leave for scope")

    # ── Expression checking ───────────────────────────────────

    def check_expr(self, expr: Expression) -> str:
        """Check an expression and return its type name."""
        if isinstance(expr, Literal):
            return literal_type(expr)
        if isinstance(expr, Identifier):
            return self.check_identifier(expr)
        if isinstance(expr, BinaryExpression):
            left = self.check_expr(expr.left)
            right = self.check_expr(expr.right)
            return self.check_binary_types(left, expr.operator, right)
        if isinstance(expr, UnaryExpression):
            operand = self.check_expr(expr.argument)
            return self.check_unary_types(expr.operator, operand)
        if isinstance(expr, LogicalExpression):
            self.check_expr(expr.left)
            self.check_expr(expr.right)
            return TY_ANY
        if isinstance(expr, AssignmentExpression):
            return self.check_assignment(expr)
        if isinstance(expr, GroupingExpression):
            return self.check_expr(expr.expression)
        if isinstance(expr, CallExpression):
            return self.check_call(expr)
        raise _CheckAbort("Unknown expression type: " + type(expr).__name__)

    def check_identifier(self, expr: Identifier) -> str:
        info = self.scope.lookup(expr.name)
        if info is None:
            self.error("Variable '" + expr.name + "' is not defined")
            return TY_ANY
        return info.type

    def check_binary_types(self, left: str, op: str, right: str) -> str:
        if op in ARITH_OPS:
            if op == "+" and (left == TY_STRING or right == TY_STRING):
                return TY_STRING
            if left == TY_NUMBER and right == TY_NUMBER:
                return TY_NUMBER
            if left == TY_ANY or right == TY_ANY:
                return TY_ANY
            self.error(
                "Type error: Cannot perform "
                + op
                + " operation on "
                + left
                + " and "
                + right
            )
            return TY_ANY
        if op in ORDER_OPS:
            if left == right and left in (TY_NUMBER, TY_STRING):
                return TY_BOOLEAN
            if left == TY_ANY or right == TY_ANY:
                return TY_BOOLEAN
            self.error(
                "Type error: Cannot compare " + left + " and " + right + " with " + op
            )
            return TY_ANY
        if op in EQUALITY_OPS:
            return TY_BOOLEAN
        raise _CheckAbort("Unknown binary operator: " + op)

    def check_unary_types(self, op: str, operand: str) -> str:
        if op == "!":
            return TY_BOOLEAN
        if op == "-":
            if operand == TY_NUMBER or operand == TY_ANY:
                return operand
            self.error("Type error: Cannot negate " + operand)
            return TY_ANY
        raise _CheckAbort("Unknown unary operator: " + op)

    def check_assignment(self, expr: AssignmentExpression) -> str:
        name = expr.target.name
        value_type = self.check_expr(expr.value)
        info = self.scope.lookup(name)
        if info is None:
            self.error("Cannot assign to undefined variable '" + name + "'")
            return value_type
        if info.kind == "const":
            self.error(
                "Cannot assign to const variable '"
                + name
                + "' (declared at line "
                + str(info.line)
                + ":"
                + str(info.col)
                + ")"
            )
            return value_type
        if not is_compatible(info.type, value_type):
            self.error(
                "Type error: Cannot assign "
                + value_type
                + " to variable '"
                + name
                + "' of type "
                + info.type
            )
        return value_type

    def check_call(self, expr: CallExpression) -> str:
        callee_type = self.check_expr(expr.callee)
        if callee_type != TY_FUNCTION and callee_type != TY_ANY:
            if isinstance(expr.callee, Identifier):
                self.error(
                    "Cannot call '"
                    + expr.callee.name
                    + "' - it is not a function (type: "
                    + callee_type
                    + ")"
                )
            else:
                self.error(
                    "Cannot call expression - it is not a function (type: "
                    + callee_type
                    + ")"
                )
        for arg in expr.arguments:
            self.check_expr(arg)
        return TY_ANY


# ============================================================
# PUBLIC API
# ============================================================


def check(program: Program) -> AnalysisResult:
    """Check a parsed Program. Never raises for semantic violations."""
    return Checker().analyze(program)
