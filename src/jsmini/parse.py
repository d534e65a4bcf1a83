"""jsmini parser: recursive descent, one method per grammar production."""

from __future__ import annotations

import logging

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
    Pos,
    PrintStatement,
    Program,
    ReturnStatement,
    Statement,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from .errors import JsMiniError
from .tokens import (
    TK_AND,
    TK_BANG,
    TK_BANG_EQUAL,
    TK_BREAK,
    TK_COMMA,
    TK_CONST,
    TK_CONTINUE,
    TK_ELSE,
    TK_EOF,
    TK_EQUAL,
    TK_EQUAL_EQUAL,
    TK_FALSE,
    TK_FOR,
    TK_FUNCTION,
    TK_GREATER,
    TK_GREATER_EQUAL,
    TK_IDENT,
    TK_IF,
    TK_LBRACE,
    TK_LESS,
    TK_LESS_EQUAL,
    TK_LET,
    TK_LPAREN,
    TK_MINUS,
    TK_NULL,
    TK_NUMBER,
    TK_OR,
    TK_PERCENT,
    TK_PLUS,
    TK_PRINT,
    TK_RBRACE,
    TK_RETURN,
    TK_RPAREN,
    TK_SEMICOLON,
    TK_SLASH,
    TK_STAR,
    TK_STRING,
    TK_TRUE,
    TK_WHILE,
    Token,
    tokenize,
)

logger = logging.getLogger(__name__)


def quote_string(value: str) -> str:
    """Quote a scanned string value; it never contains both quote kinds."""
    if '"' in value:
        return "'" + value + "'"
    return '"' + value + '"'


class ParseError(JsMiniError):
    """Syntax error located at the offending token."""

    def __init__(self, msg: str, token: Token):
        self.msg: str = msg
        self.token: Token = token
        self.line: int = token.line
        self.col: int = token.col
        if token.type == TK_EOF:
            where = "end of file"
        else:
            where = "'" + token.value + "'"
        super().__init__(
            "Line "
            + str(token.line)
            + ":"
            + str(token.col)
            + " - Error at "
            + where
            + ": "
            + msg
        )


class Parser:
    """Recursive descent parser for jsmini."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.current().type == TK_EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, type_: str) -> bool:
        if self.is_at_end():
            return False
        return self.current().type == type_

    def match(self, *types: str) -> bool:
        for t in types:
            if self.check(t):
                self.advance()
                return True
        return False

    def expect(self, type_: str, msg: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise self.error(self.current(), msg)

    def error(self, tok: Token, msg: str) -> ParseError:
        return ParseError(msg, tok)

    def _tok_pos(self, tok: Token) -> Pos:
        return Pos(tok.line, tok.col)

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> Program:
        body: list[Statement] = []
        while not self.is_at_end():
            body.append(self.parse_stmt())
        logger.debug("parsed %d top-level statements", len(body))
        return Program(body, pos=Pos(1, 1))

    # ── Statements ───────────────────────────────────────────

    def parse_stmt(self) -> Statement:
        if self.match(TK_LET, TK_CONST):
            return self.parse_var_decl()
        if self.match(TK_FUNCTION):
            return self.parse_function_decl()
        if self.match(TK_IF):
            return self.parse_if_stmt()
        if self.match(TK_WHILE):
            return self.parse_while_stmt()
        if self.match(TK_FOR):
            return self.parse_for_stmt()
        if self.match(TK_RETURN):
            return self.parse_return_stmt()
        if self.match(TK_BREAK):
            pos = self._tok_pos(self.previous())
            self.expect(TK_SEMICOLON, "Expected ';' after 'break'")
            return BreakStatement(pos=pos)
        if self.match(TK_CONTINUE):
            pos = self._tok_pos(self.previous())
            self.expect(TK_SEMICOLON, "Expected ';' after 'continue'")
            return ContinueStatement(pos=pos)
        if self.match(TK_PRINT):
            return self.parse_print_stmt()
        if self.check(TK_LBRACE):
            return self.parse_block()
        return self.parse_expr_stmt()

    def parse_var_decl(self) -> VariableDeclaration:
        """VarDecl = ( 'let' | 'const' ) IDENT ( '=' Expr )? ';'"""
        keyword = self.previous()
        kind = "let" if keyword.type == TK_LET else "const"
        name_tok = self.expect(TK_IDENT, "Expected variable name")
        initializer: Expression | None = None
        if self.match(TK_EQUAL):
            initializer = self.parse_expr()
        if kind == "const" and initializer is None:
            raise self.error(
                self.previous(), "const declaration must have an initializer"
            )
        self.expect(TK_SEMICOLON, "Expected ';' after variable declaration")
        ident = Identifier(name_tok.value, pos=self._tok_pos(name_tok))
        return VariableDeclaration(
            kind, ident, initializer, pos=self._tok_pos(keyword)
        )

    def parse_function_decl(self) -> FunctionDeclaration:
        """FnDecl = 'function' IDENT '(' ( IDENT ( ',' IDENT )* )? ')' Block"""
        pos = self._tok_pos(self.previous())
        name_tok = self.expect(TK_IDENT, "Expected function name")
        self.expect(TK_LPAREN, "Expected '(' after function name")
        params: list[Identifier] = []
        if not self.check(TK_RPAREN):
            while True:
                p = self.expect(TK_IDENT, "Expected parameter name")
                params.append(Identifier(p.value, pos=self._tok_pos(p)))
                if not self.match(TK_COMMA):
                    break
        self.expect(TK_RPAREN, "Expected ')' after parameters")
        if not self.check(TK_LBRACE):
            raise self.error(self.current(), "Expected '{' before function body")
        body = self.parse_block()
        name = Identifier(name_tok.value, pos=self._tok_pos(name_tok))
        return FunctionDeclaration(name, params, body, pos=pos)

    def parse_block(self) -> BlockStatement:
        pos = self._tok_pos(self.current())
        self.expect(TK_LBRACE, "Expected '{'")
        body: list[Statement] = []
        while not self.check(TK_RBRACE) and not self.is_at_end():
            body.append(self.parse_stmt())
        self.expect(TK_RBRACE, "Expected '}' after block")
        return BlockStatement(body, pos=pos)

    def parse_if_stmt(self) -> IfStatement:
        pos = self._tok_pos(self.previous())
        self.expect(TK_LPAREN, "Expected '(' after 'if'")
        condition = self.parse_expr()
        self.expect(TK_RPAREN, "Expected ')' after condition")
        consequent = self.parse_stmt()
        alternate: Statement | None = None
        if self.match(TK_ELSE):
            alternate = self.parse_stmt()
        return IfStatement(condition, consequent, alternate, pos=pos)

    def parse_while_stmt(self) -> WhileStatement:
        pos = self._tok_pos(self.previous())
        self.expect(TK_LPAREN, "Expected '(' after 'while'")
        condition = self.parse_expr()
        self.expect(TK_RPAREN, "Expected ')' after condition")
        body = self.parse_stmt()
        return WhileStatement(condition, body, pos=pos)

    def parse_for_stmt(self) -> ForStatement:
        """For = 'for' '(' ( ';' | VarDecl | ExprStmt ) Expr? ';' Expr? ')' Stmt"""
        pos = self._tok_pos(self.previous())
        self.expect(TK_LPAREN, "Expected '(' after 'for'")
        init: VariableDeclaration | ExpressionStatement | None
        if self.match(TK_SEMICOLON):
            init = None
        elif self.match(TK_LET, TK_CONST):
            init = self.parse_var_decl()
        else:
            init = self.parse_expr_stmt()
        condition: Expression | None = None
        if not self.check(TK_SEMICOLON):
            condition = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expected ';' after loop condition")
        update: Expression | None = None
        if not self.check(TK_RPAREN):
            update = self.parse_expr()
        self.expect(TK_RPAREN, "Expected ')' after for clauses")
        body = self.parse_stmt()
        return ForStatement(init, condition, update, body, pos=pos)

    def parse_return_stmt(self) -> ReturnStatement:
        pos = self._tok_pos(self.previous())
        argument: Expression | None = None
        if not self.check(TK_SEMICOLON):
            argument = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expected ';' after return value")
        return ReturnStatement(argument, pos=pos)

    def parse_print_stmt(self) -> PrintStatement:
        pos = self._tok_pos(self.previous())
        expression = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expected ';' after value")
        return PrintStatement(expression, pos=pos)

    def parse_expr_stmt(self) -> ExpressionStatement:
        pos = self._tok_pos(self.current())
        expression = self.parse_expr()
        self.expect(TK_SEMICOLON, "Expected ';' after expression")
        return ExpressionStatement(expression, pos=pos)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expression:
        return self.parse_assignment()

    def parse_assignment(self) -> Expression:
        """Assignment = LogicalOr ( '=' Assignment )?"""
        expr = self.parse_logical_or()
        if self.match(TK_EQUAL):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Identifier):
                return AssignmentExpression(expr, equals.value, value, pos=expr.pos)
            raise self.error(equals, "Invalid assignment target")
        return expr

    def parse_logical_or(self) -> Expression:
        """LogicalOr = LogicalAnd ( '||' LogicalAnd )*"""
        left = self.parse_logical_and()
        while self.match(TK_OR):
            op = self.previous().value
            right = self.parse_logical_and()
            left = LogicalExpression(left, op, right, pos=left.pos)
        return left

    def parse_logical_and(self) -> Expression:
        """LogicalAnd = Equality ( '&&' Equality )*"""
        left = self.parse_equality()
        while self.match(TK_AND):
            op = self.previous().value
            right = self.parse_equality()
            left = LogicalExpression(left, op, right, pos=left.pos)
        return left

    def parse_equality(self) -> Expression:
        """Equality = Comparison ( ( '==' | '!=' ) Comparison )*"""
        left = self.parse_comparison()
        while self.match(TK_EQUAL_EQUAL, TK_BANG_EQUAL):
            op = self.previous().value
            right = self.parse_comparison()
            left = BinaryExpression(left, op, right, pos=left.pos)
        return left

    def parse_comparison(self) -> Expression:
        """Comparison = Term ( ( '<' | '<=' | '>' | '>=' ) Term )*"""
        left = self.parse_term()
        while self.match(TK_LESS, TK_LESS_EQUAL, TK_GREATER, TK_GREATER_EQUAL):
            op = self.previous().value
            right = self.parse_term()
            left = BinaryExpression(left, op, right, pos=left.pos)
        return left

    def parse_term(self) -> Expression:
        """Term = Factor ( ( '+' | '-' ) Factor )*"""
        left = self.parse_factor()
        while self.match(TK_PLUS, TK_MINUS):
            op = self.previous().value
            right = self.parse_factor()
            left = BinaryExpression(left, op, right, pos=left.pos)
        return left

    def parse_factor(self) -> Expression:
        """Factor = Unary ( ( '*' | '/' | '%' ) Unary )*"""
        left = self.parse_unary()
        while self.match(TK_STAR, TK_SLASH, TK_PERCENT):
            op = self.previous().value
            right = self.parse_unary()
            left = BinaryExpression(left, op, right, pos=left.pos)
        return left

    def parse_unary(self) -> Expression:
        """Unary = ( '!' | '-' ) Unary | Call"""
        if self.match(TK_BANG, TK_MINUS):
            tok = self.previous()
            argument = self.parse_unary()
            return UnaryExpression(tok.value, argument, pos=self._tok_pos(tok))
        return self.parse_call()

    def parse_call(self) -> Expression:
        """Call = Primary ( '(' ArgList ')' )*"""
        expr = self.parse_primary()
        while self.match(TK_LPAREN):
            args: list[Expression] = []
            if not self.check(TK_RPAREN):
                args.append(self.parse_expr())
                while self.match(TK_COMMA):
                    args.append(self.parse_expr())
            self.expect(TK_RPAREN, "Expected ')' after arguments")
            expr = CallExpression(expr, args, pos=expr.pos)
        return expr

    def parse_primary(self) -> Expression:
        """Parse a primary expression."""
        tok = self.current()
        pos = self._tok_pos(tok)
        if self.match(TK_NUMBER):
            return Literal(float(tok.value), tok.value, pos=pos)
        if self.match(TK_STRING):
            return Literal(tok.value, quote_string(tok.value), pos=pos)
        if self.match(TK_TRUE):
            return Literal(True, "true", pos=pos)
        if self.match(TK_FALSE):
            return Literal(False, "false", pos=pos)
        if self.match(TK_NULL):
            return Literal(None, "null", pos=pos)
        if self.match(TK_IDENT):
            return Identifier(tok.value, pos=pos)
        if self.match(TK_LPAREN):
            inner = self.parse_expr()
            self.expect(TK_RPAREN, "Expected ')' after expression")
            return GroupingExpression(inner, pos=pos)
        raise self.error(tok, "Expected expression")


def parse_tokens(tokens: list[Token]) -> Program:
    """Parse a token list into a Program."""
    return Parser(tokens).parse_program()


def parse(source: str) -> Program:
    """Scan and parse jsmini source into a Program."""
    return parse_tokens(tokenize(source))
