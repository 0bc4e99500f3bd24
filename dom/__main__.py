"""CLI entry point for the Dom interpreter.

Usage:
    python -m dom [-v|-vv|-vvv]                  start an interactive session
    python -m dom [-v...] <program_file>
    python -m dom [-v...] --emit-ast <program_file>
    python -m dom --dump-ast <program_file>
    python -m dom [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .dom file and emit an AST JSON file
  --dump-ast    Parse the given .dom file and print its AST dump
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Diagnostics are printed to stderr and any
diagnostic in file mode makes the exit status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, Optional

from .ast_json import ast_to_obj, ast_from_obj, dump_ast
from .errors import Diagnostic, DomError
from .interpreter import Interpreter, Session, interpret, stdin_provider
from .limits import raised_limits
from .parser import parse_program

PROMPT = '>: '


def report(diagnostics: Iterable[Diagnostic]):
    for diagnostic in diagnostics:
        print(diagnostic.format(), file=sys.stderr)


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str):
    try:
        return parse_program(source)
    except DomError as e:
        report([e.diagnostic])
        sys.exit(1)


def repl(debug_level: int = 0) -> None:
    session = Session(input_provider=stdin_provider, output_stream=sys.stdout, debug_level=debug_level)
    try:
        while True:
            try:
                line = input(PROMPT)
            except EOFError:
                print()
                break
            if not line.strip():
                continue
            result = session.evaluate(line)
            # printed lines were already streamed to stdout
            if result.value is not None:
                print(result.value)
            report(result.diagnostics)
    finally:
        session.close()


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Dom language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='DOM_FILE', help='emit AST JSON for the given .dom file')
    group.add_argument('--dump-ast', metavar='DOM_FILE', help='print the AST dump for the given .dom file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Dom program file (.dom) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = parse_or_exit(read_source(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with raised_limits(), open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Dump AST mode
    if args.dump_ast:
        ast_program = parse_or_exit(read_source(Path(args.dump_ast)))
        print(dump_ast(ast_program))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with raised_limits(), open(ast_path, 'r', encoding='utf-8') as f:
            ast_program = ast_from_obj(json.load(f))
        interpreter = Interpreter(debug_level=args.v, input_provider=stdin_provider, output_stream=sys.stdout)
        try:
            interpreter.run(ast_program)
        except DomError as e:
            report([e.diagnostic])
            sys.exit(1)
        finally:
            interpreter.close()
        return

    # No program: interactive session
    if not args.program:
        repl(debug_level=args.v)
        return

    source = read_source(Path(args.program))
    result = interpret(source, input_provider=stdin_provider, output_stream=sys.stdout, debug_level=args.v)
    report(result.diagnostics)
    if result.diagnostics:
        sys.exit(1)


if __name__ == '__main__':
    main()
