# Dom language package
# This package provides the lexer, parser and tree-walking interpreter for the Dom language.
from .errors import Diagnostic, DomError, ErrorKind, EvalError, LexError, ParseError, Span
from .parser import parse_program
from .ast_json import dump_ast
from .interpreter import (
    Interpreter,
    InterpretResult,
    LineResult,
    Session,
    evaluate_line,
    interpret,
    run_file,
    run_program,
)

__all__ = [
    'parse_program',
    'dump_ast',
    'interpret',
    'Session',
    'evaluate_line',
    'run_program',
    'run_file',
    'Interpreter',
    'InterpretResult',
    'LineResult',
    'Diagnostic',
    'DomError',
    'ErrorKind',
    'EvalError',
    'LexError',
    'ParseError',
    'Span',
]
