"""jsmini scanner, parser, checker and interpreter: public API."""

from __future__ import annotations

from .ast import Program as Program
from .check import AnalysisResult as AnalysisResult, check as check
from .emit import EmitOptions as EmitOptions, to_javascript as to_javascript
from .errors import JsMiniError as JsMiniError
from .parse import (
    ParseError as ParseError,
    Parser as Parser,
    parse as parse,
    parse_tokens as parse_tokens,
)
from .runtime import InterpreterError as InterpreterError, Value as Value, interpret as interpret
from .tokens import ScanError as ScanError, Token as Token, tokenize as tokenize

__all__ = [
    "AnalysisResult",
    "EmitOptions",
    "InterpreterError",
    "JsMiniError",
    "ParseError",
    "Parser",
    "Program",
    "ScanError",
    "Token",
    "Value",
    "check",
    "check_source",
    "interpret",
    "parse",
    "parse_tokens",
    "run",
    "to_javascript",
    "tokenize",
]


def check_source(source: str) -> AnalysisResult:
    """Parse and check jsmini source. Syntax errors still raise."""
    return check(parse(source))


def run(source: str) -> Value:
    """Parse and execute jsmini source, returning the last expression value."""
    return interpret(parse(source))
