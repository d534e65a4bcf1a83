"""jsmini CLI: check, run or translate .js source files."""

from __future__ import annotations

import logging
import sys
from dataclasses import fields, is_dataclass

from .ast import Node, Program
from .check import check
from .emit import EmitOptions, to_javascript
from .errors import JsMiniError
from .parse import ParseError, parse_tokens
from .runtime import InterpreterError, VUndefined, interpret
from .tokens import ScanError, tokenize

logger = logging.getLogger(__name__)


USAGE: str = """\
jsmini [OPTIONS] FILE

Check and run a jsmini program.

Options:
  --tokens           Print the token stream and exit
  --ast              Print the syntax tree and exit
  --emit             Print the program as JavaScript and exit
  --indent N         Indent width for --emit (default 2)
  --no-semicolons    Omit statement semicolons in --emit output
  --comments         Add a header comment to --emit output
  --check            Run semantic analysis only
  --no-check         Skip semantic analysis before running
  -v, --verbose      Log pipeline details to stderr
  -h, --help         Show this help message
"""


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(format="{message}", style="{")
    root_logger = logging.getLogger()
    if verbose:
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(logging.WARNING)


def dump_ast(node: object, indent: int = 0) -> str:
    """Render a node tree one field per line."""
    pad = "  " * indent
    if isinstance(node, list):
        if not node:
            return "[]"
        parts = [pad + "  " + dump_ast(item, indent + 1) for item in node]
        return "[\n" + "\n".join(parts) + "\n" + pad + "]"
    if isinstance(node, Node) and is_dataclass(node):
        lines = [type(node).__name__]
        for f in fields(node):
            if f.name == "pos":
                continue
            value = getattr(node, f.name)
            lines.append(pad + "  " + f.name + ": " + dump_ast(value, indent + 1))
        return "\n".join(lines)
    return repr(node)


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    mode = "run"
    options = EmitOptions()
    run_check = True
    verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--tokens":
            mode = "tokens"
            i += 1
        elif arg == "--ast":
            mode = "ast"
            i += 1
        elif arg == "--emit":
            mode = "emit"
            i += 1
        elif arg == "--check":
            mode = "check"
            i += 1
        elif arg == "--no-check":
            run_check = False
            i += 1
        elif arg == "--no-semicolons":
            options.semicolons = False
            i += 1
        elif arg == "--comments":
            options.comments = True
            i += 1
        elif arg == "--indent":
            if i + 1 >= len(args) or not args[i + 1].isdigit():
                print("jsmini: --indent expects a number", file=sys.stderr)
                return 2
            options.indent_size = int(args[i + 1])
            i += 2
        elif arg == "--verbose" or arg == "-v":
            verbose = True
            i += 1
        elif arg.startswith("-"):
            print("jsmini: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("jsmini: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if filepath == "":
        print("jsmini: missing file argument", file=sys.stderr)
        return 2

    setup_logging(verbose)

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("jsmini: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("jsmini: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("jsmini: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    try:
        tokens = tokenize(source)
        if mode == "tokens":
            for tok in tokens:
                print(repr(tok))
            return 0
        program = parse_tokens(tokens)
    except (ScanError, ParseError) as e:
        print("jsmini: syntax error: " + str(e), file=sys.stderr)
        return 1

    if mode == "ast":
        print(dump_ast(program))
        return 0
    if mode == "emit":
        sys.stdout.write(to_javascript(program, options))
        return 0

    if mode == "check" or run_check:
        if not _report_check(program):
            return 1
        if mode == "check":
            return 0

    try:
        result = interpret(program)
    except InterpreterError as e:
        print("jsmini: runtime error: " + str(e), file=sys.stderr)
        return 1
    except RecursionError:
        print("jsmini: runtime error: maximum recursion depth exceeded", file=sys.stderr)
        return 1
    except JsMiniError as e:
        print("jsmini: error: " + str(e), file=sys.stderr)
        return 1

    if not isinstance(result, VUndefined):
        print(result.to_string())
    return 0


def _report_check(program: Program) -> bool:
    result = check(program)
    for err in result.errors:
        print("jsmini: error: " + err, file=sys.stderr)
    logger.debug("check %s", "passed" if result.success else "failed")
    return result.success


if __name__ == "__main__":
    sys.exit(main())
