"""jsmini AST: parse-time node definitions.

Every node keeps its source position in ``pos``. Positions never take part in
equality, so a tree built by hand compares equal to the same tree produced by
the parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field


# ============================================================
# POSITION
# ============================================================


@dataclass
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


@dataclass(kw_only=True)
class Node:
    """Base for all nodes."""

    pos: Pos | None = field(default=None, compare=False, repr=False)


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Expression(Node):
    """Base for all expressions."""


@dataclass
class Literal(Expression):
    """Number, string, boolean or null literal; raw is the source text."""

    value: float | str | bool | None
    raw: str


@dataclass
class Identifier(Expression):
    """Variable reference."""

    name: str


@dataclass
class BinaryExpression(Expression):
    """left operator right, for arithmetic, comparison and equality."""

    left: Expression
    operator: str
    right: Expression


@dataclass
class UnaryExpression(Expression):
    """operator argument, for - and !."""

    operator: str
    argument: Expression


@dataclass
class LogicalExpression(Expression):
    """left && right, left || right."""

    left: Expression
    operator: str
    right: Expression


@dataclass
class AssignmentExpression(Expression):
    """target = value."""

    target: Identifier
    operator: str
    value: Expression


@dataclass
class CallExpression(Expression):
    """callee(arguments)."""

    callee: Expression
    arguments: list[Expression]


@dataclass
class GroupingExpression(Expression):
    """( expression )."""

    expression: Expression


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class Statement(Node):
    """Base for all statements."""


@dataclass
class ExpressionStatement(Statement):
    """Bare expression as statement."""

    expression: Expression


@dataclass
class VariableDeclaration(Statement):
    """let name = init; / const name = init;"""

    kind: str
    identifier: Identifier
    initializer: Expression | None


@dataclass
class BlockStatement(Statement):
    """{ body }."""

    body: list[Statement]


@dataclass
class IfStatement(Statement):
    """if (condition) consequent else alternate."""

    condition: Expression
    consequent: Statement
    alternate: Statement | None = None


@dataclass
class WhileStatement(Statement):
    """while (condition) body."""

    condition: Expression
    body: Statement


@dataclass
class ForStatement(Statement):
    """for (init; condition; update) body."""

    init: VariableDeclaration | ExpressionStatement | None
    condition: Expression | None
    update: Expression | None
    body: Statement


@dataclass
class FunctionDeclaration(Statement):
    """function name(parameters) { body }."""

    name: Identifier
    parameters: list[Identifier]
    body: BlockStatement


@dataclass
class ReturnStatement(Statement):
    """return argument?;"""

    argument: Expression | None = None


@dataclass
class BreakStatement(Statement):
    """break;"""


@dataclass
class ContinueStatement(Statement):
    """continue;"""


@dataclass
class PrintStatement(Statement):
    """print expression;"""

    expression: Expression


@dataclass
class Program(Node):
    """Root node: the top-level statement list."""

    body: list[Statement]
