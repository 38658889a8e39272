"""CLI entry point for the ScriptyScript interpreter.

Usage:
    python -m scripty [-v|-vv|-vvv]                  (interactive REPL)
    python -m scripty [-v...] <program_file>
    python -m scripty [-v...] --emit-ast <program_file>
    python -m scripty [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .ss file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --debug-file  Where debug output goes (default: debug.txt)

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Without a program file the interpreter starts
a REPL in which every line is a complete program sharing one global scope.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from .ast import ExprStmt
from .ast_json import ast_to_obj, ast_from_obj
from .errors import ParseError, ScriptyError
from .interpreter import Interpreter
from .parser import parse_program
from .types import NilVal, to_string

logger = logging.getLogger(__name__)

PROMPT = '> '


def configure_logging(verbosity: int, debug_file: str) -> Optional[logging.Handler]:
    """Send the package's debug records to `debug_file` when -v was given."""
    if verbosity <= 0:
        return None
    handler = logging.FileHandler(debug_file, mode='w', encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s %(name)s %(levelname)s %(message)s'))
    package_logger = logging.getLogger('scripty')
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)
    return handler


def read_source(path: Path) -> Optional[str]:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        return None
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def repl(interpreter: Interpreter, stdin: Optional[TextIO] = None) -> int:
    """Read-eval-print loop; errors are reported and the loop goes on."""
    if stdin is None:
        stdin = sys.stdin
    while True:
        print(PROMPT, end='', flush=True)
        line = stdin.readline()
        if not line:
            print()
            return 0
        if not line.strip():
            continue
        try:
            program = parse_program(line)
            value = interpreter.run(program)
        except ParseError as e:
            print(f"Parse error: {e}", file=sys.stderr)
            continue
        except ScriptyError as e:
            print(f"Runtime error: {e}", file=sys.stderr)
            continue
        if program.body and isinstance(program.body[-1], ExprStmt) and not isinstance(value, NilVal):
            print(to_string(value))


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(prog='scripty', description="ScriptyScript interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file receiving debug output when -v is given')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='SS_FILE', help='emit AST JSON for the given .ss file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='ScriptyScript program file (.ss) to execute')
    args = parser.parse_args(argv)

    configure_logging(args.v, args.debug_file)
    # the evaluator recurses once per nested call in the script
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        if source is None:
            sys.exit(1)
        try:
            ast_program = parse_program(source)
        except ParseError as e:
            print(f"Parse error: {e}", file=sys.stderr)
            sys.exit(1)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        ast_program = ast_from_obj(data)
        interpreter = Interpreter(debug_level=args.v)
        try:
            interpreter.run(ast_program)
        except ScriptyError as e:
            print(f"Runtime error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    # No program: interactive session in one persistent global scope
    if not args.program:
        interpreter = Interpreter(debug_level=args.v)
        try:
            sys.exit(repl(interpreter))
        except KeyboardInterrupt:
            print()
            sys.exit(0)

    # Default: execute source file
    program_file = Path(args.program)
    source = read_source(program_file)
    if source is None:
        sys.exit(1)
    try:
        ast_program = parse_program(source)
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
    interpreter = Interpreter(debug_level=args.v)
    try:
        interpreter.run(ast_program)
    except ScriptyError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    logger.debug("%s finished", program_file)


if __name__ == '__main__':
    main()
