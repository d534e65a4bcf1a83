"""jsmini scanner: lexes source into a flat token list."""

from __future__ import annotations

import logging

from .errors import JsMiniError

logger = logging.getLogger(__name__)


class ScanError(JsMiniError):
    """Error during scanning."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


# Literals
TK_NUMBER = "NUMBER"
TK_STRING = "STRING"
TK_IDENT = "IDENTIFIER"
TK_TRUE = "TRUE"
TK_FALSE = "FALSE"
TK_NULL = "NULL"

# Arithmetic
TK_PLUS = "PLUS"
TK_MINUS = "MINUS"
TK_STAR = "STAR"
TK_SLASH = "SLASH"
TK_PERCENT = "PERCENT"

# Comparison
TK_EQUAL_EQUAL = "EQUAL_EQUAL"
TK_BANG_EQUAL = "BANG_EQUAL"
TK_LESS = "LESS"
TK_LESS_EQUAL = "LESS_EQUAL"
TK_GREATER = "GREATER"
TK_GREATER_EQUAL = "GREATER_EQUAL"

# Logical
TK_BANG = "BANG"
TK_AND = "AND"
TK_OR = "OR"

# Assignment
TK_EQUAL = "EQUAL"

# Punctuation
TK_LPAREN = "LPAREN"
TK_RPAREN = "RPAREN"
TK_LBRACE = "LBRACE"
TK_RBRACE = "RBRACE"
TK_LBRACKET = "LBRACKET"
TK_RBRACKET = "RBRACKET"
TK_SEMICOLON = "SEMICOLON"
TK_COMMA = "COMMA"
TK_DOT = "DOT"
TK_COLON = "COLON"

# Keywords
TK_LET = "LET"
TK_CONST = "CONST"
TK_FUNCTION = "FUNCTION"
TK_RETURN = "RETURN"
TK_IF = "IF"
TK_ELSE = "ELSE"
TK_WHILE = "WHILE"
TK_FOR = "FOR"
TK_BREAK = "BREAK"
TK_CONTINUE = "CONTINUE"
TK_PRINT = "PRINT"

# Special
TK_EOF = "EOF"
TK_ILLEGAL = "ILLEGAL"

KEYWORDS: dict[str, str] = {
    "let": TK_LET,
    "const": TK_CONST,
    "function": TK_FUNCTION,
    "return": TK_RETURN,
    "if": TK_IF,
    "else": TK_ELSE,
    "while": TK_WHILE,
    "for": TK_FOR,
    "break": TK_BREAK,
    "continue": TK_CONTINUE,
    "true": TK_TRUE,
    "false": TK_FALSE,
    "null": TK_NULL,
    "print": TK_PRINT,
}

# Two-character operators, tried before the single-character table
MULTI_OPS: dict[str, str] = {
    "==": TK_EQUAL_EQUAL,
    "!=": TK_BANG_EQUAL,
    "<=": TK_LESS_EQUAL,
    ">=": TK_GREATER_EQUAL,
    "&&": TK_AND,
    "||": TK_OR,
}

SINGLE_OPS: dict[str, str] = {
    "+": TK_PLUS,
    "-": TK_MINUS,
    "*": TK_STAR,
    "/": TK_SLASH,
    "%": TK_PERCENT,
    "=": TK_EQUAL,
    "!": TK_BANG,
    "<": TK_LESS,
    ">": TK_GREATER,
    "(": TK_LPAREN,
    ")": TK_RPAREN,
    "{": TK_LBRACE,
    "}": TK_RBRACE,
    "[": TK_LBRACKET,
    "]": TK_RBRACKET,
    ";": TK_SEMICOLON,
    ",": TK_COMMA,
    ".": TK_DOT,
    ":": TK_COLON,
}


def lookup_identifier(word: str) -> str:
    """Return the keyword kind for word, or TK_IDENT."""
    return KEYWORDS.get(word, TK_IDENT)


class Token:
    """A token with type, value, and position."""

    __slots__ = ("type", "value", "line", "col")

    def __init__(self, type_: str, value: str, line: int, col: int):
        self.type: str = type_
        self.value: str = value
        self.line: int = line
        self.col: int = col

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.value)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Scanner:
    """Character-level cursor over a source string."""

    def __init__(self, source: str):
        self.source: str = source
        self.pos: int = 0
        self.line: int = 1
        self.col: int = 1

    # ── Cursor ───────────────────────────────────────────────

    def is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self) -> str:
        if self.is_at_end():
            return "\0"
        return self.source[self.pos]

    def peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return "\0"
        return self.source[self.pos + 1]

    def advance(self) -> str:
        c = self.source[self.pos]
        self.pos += 1
        if c == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.pos] != expected:
            return False
        self.advance()
        return True

    def skip_whitespace(self) -> None:
        while not self.is_at_end():
            c = self.peek()
            if c == " " or c == "\t" or c == "\r" or c == "\n":
                self.advance()
            else:
                break

    # ── Lexemes ──────────────────────────────────────────────

    def scan_number(self) -> str:
        start = self.pos
        while _is_digit(self.peek()):
            self.advance()
        # A trailing dot stays unconsumed unless a digit follows it
        if self.peek() == "." and _is_digit(self.peek_next()):
            self.advance()
            while _is_digit(self.peek()):
                self.advance()
        return self.source[start : self.pos]

    def scan_identifier(self) -> str:
        start = self.pos
        if _is_alpha(self.peek()):
            self.advance()
        while _is_alnum(self.peek()):
            self.advance()
        return self.source[start : self.pos]

    def scan_string(self) -> str:
        line = self.line
        col = self.col
        quote = self.advance()
        start = self.pos
        while not self.is_at_end() and self.peek() != quote:
            self.advance()
        if self.is_at_end():
            raise ScanError("unterminated string", line, col)
        value = self.source[start : self.pos]
        self.advance()  # closing quote
        return value

    def scan_operator(self) -> Token:
        line = self.line
        col = self.col
        two = self.source[self.pos : self.pos + 2]
        if two in MULTI_OPS:
            self.advance()
            self.advance()
            return Token(MULTI_OPS[two], two, line, col)
        c = self.peek()
        if c in SINGLE_OPS:
            self.advance()
            return Token(SINGLE_OPS[c], c, line, col)
        raise ScanError("unexpected character: " + repr(c), line, col)

    # ── Driver ───────────────────────────────────────────────

    def scan_tokens(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            self.skip_whitespace()
            if self.is_at_end():
                break
            c = self.peek()
            line = self.line
            col = self.col
            if _is_digit(c):
                tokens.append(Token(TK_NUMBER, self.scan_number(), line, col))
            elif _is_alpha(c):
                word = self.scan_identifier()
                tokens.append(Token(lookup_identifier(word), word, line, col))
            elif c == '"' or c == "'":
                tokens.append(Token(TK_STRING, self.scan_string(), line, col))
            else:
                tokens.append(self.scan_operator())
        tokens.append(Token(TK_EOF, "", self.line, self.col))
        logger.debug("scanned %d tokens", len(tokens))
        return tokens


def tokenize(source: str) -> list[Token]:
    """Tokenize jsmini source into a flat list ending with TK_EOF."""
    return Scanner(source).scan_tokens()
