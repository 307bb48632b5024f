"""CLI entry point for the IndoScript interpreter.

Usage:
    python -m indoscript [-v|-vv|-vvv] <program_file>
    python -m indoscript [-v...] --emit-ast <program_file>
    python -m indoscript [-v...] --ast <ast_json_file>
    python -m indoscript                  (interactive prompt)

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .indos file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Exit status is 1 when the input file is
missing, 65 when the program does not parse and 70 on a runtime error.
"""

import argparse
import io
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import program_to_obj, program_from_obj
from .interpreter import (
    EXIT_PARSE_ERROR, EXIT_RUNTIME_ERROR, Interpreter, parse_program,
)
from .lexer import Scanner
from .tokens import TokenType


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(statements, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        had_error = interpreter.interpret(statements)
    finally:
        interpreter.close()
    if had_error:
        sys.exit(EXIT_RUNTIME_ERROR)


def open_braces(source: str) -> int:
    """Number of '{' in ``source`` still waiting for their '}'."""
    tokens = Scanner(source, io.StringIO()).scan_tokens()
    depth = 0
    for token in tokens:
        if token.type is TokenType.LEFT_BRACE:
            depth += 1
        elif token.type is TokenType.RIGHT_BRACE:
            depth -= 1
    return depth


def repl(debug_level: int) -> None:
    """Read-eval-print loop; all lines share one global scope.

    Input is read until its braces balance, so a block or ``fungsi`` body
    may span several lines.
    """
    interpreter = Interpreter(debug_level=debug_level)
    try:
        while True:
            sys.stdout.write('> ')
            sys.stdout.flush()
            line = sys.stdin.readline()
            if not line:
                sys.stdout.write('\n')
                break
            while open_braces(line) > 0:
                sys.stdout.write('... ')
                sys.stdout.flush()
                more = sys.stdin.readline()
                if not more:
                    break
                line += more
            statements, had_error = parse_program(line)
            if had_error:
                continue
            interpreter.interpret(statements)
    finally:
        interpreter.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='indoscript', description="IndoScript interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='INDOS_FILE', help='emit AST JSON for the given .indos file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='IndoScript program file (.indos) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements, had_error = parse_program(read_source(program_file))
        if had_error:
            sys.exit(EXIT_PARSE_ERROR)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        try:
            statements = program_from_obj(json.loads(read_source(ast_path)))
        except (ValueError, TypeError, KeyError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        execute(statements, args.v)
        return

    if not args.program:
        repl(args.v)
        return

    statements, had_error = parse_program(read_source(Path(args.program)))
    if had_error:
        sys.exit(EXIT_PARSE_ERROR)
    execute(statements, args.v)


if __name__ == '__main__':
    main()
