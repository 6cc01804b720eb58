"""CLI entry point for the PLC interpreter.

Usage:
    python -m plc [-v|-vv|-vvv] <program_file>
    python -m plc [-v...] --emit-ast <program_file>
    python -m plc [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .plc file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. On success the value returned by `main()`
is printed to stdout.
"""

import argparse
import json
import sys
from decimal import InvalidOperation
from pathlib import Path
from .interpreter import parse_program, Interpreter
from .ast_json import ast_to_obj, ast_from_obj
from .errors import LexError, ParseError, PlcError
from .types import to_string


def report(error: PlcError) -> None:
    if isinstance(error, LexError):
        kind = 'Lex'
    elif isinstance(error, ParseError):
        kind = 'Parse'
    else:
        kind = 'Runtime'
    print(f"{kind} error: {error}", file=sys.stderr)
    sys.exit(1)


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(ast_program, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        result = interpreter.run(ast_program)
    except PlcError as e:
        report(e)
    print(to_string(result))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="PLC language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PLC_FILE', help='emit AST JSON for the given .plc file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='PLC program file (.plc) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            ast_program = parse_program(source)
        except PlcError as e:
            report(e)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        source = read_source(ast_path)
        try:
            ast_program = ast_from_obj(json.loads(source))
        except (ValueError, KeyError, TypeError, InvalidOperation) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        execute(ast_program, args.v)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    source = read_source(Path(args.program))
    try:
        ast_program = parse_program(source)
    except PlcError as e:
        report(e)
    execute(ast_program, args.v)


if __name__ == '__main__':
    main()
