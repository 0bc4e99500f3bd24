"""Interpreter for the Dom language.

This module implements the tree-walking evaluator together with the
entry points a host uses to run Dom code: `interpret` for one-shot
evaluation, `Session`/`evaluate_line` for interactive use, and the
`run_program`/`run_file` conveniences that stream output to stdout.

Statements complete with a signal (see `dom.signals`) rather than by
raising: `return`, `break` and `continue` travel upward as values until
the function call or loop that owns them consumes them. Only failures
are raised, as `EvalError`, and they always end the current evaluation.
"""

from __future__ import annotations

import builtins
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO

from .ast import (
    Program, LetBinding, Assignment, FunctionDef, If, Loop, Break, Continue,
    Return, Use, ExpressionStatement, BoolLit, IntLit, StrLit, ListLit,
    Identifier, Unary, Binary, Call, Block, Node,
)
from .ast_json import dump_ast
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import Diagnostic, DomError, ErrorKind, EvalError, Span
from .limits import FRAMES_PER_CALL, NESTING_FRAMES, raised_limits
from .parser import parse_program
from .signals import Signal, Normal, ReturnSignal, BreakSignal, ContinueSignal
from .std.io import BasicIO, populate_io_environment
from .std.list import populate_list_environment
from .std.str import populate_str_environment
from .values import UNIT, FunctionValue, ListValue, is_int, kind_of, to_display, values_equal


# Namespaces whose members are also reachable by their plain names
GLOBAL_MODULES = ('io', 'list')


class Interpreter:
    """Core interpreter that executes Dom AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 input_provider: Optional[Callable[[], str]] = None,
                 output_stream: Optional[TextIO] = None,
                 max_call_depth: int = 1000):
        self.global_env = Environment()
        self.io = BasicIO(input_provider, output_stream)
        self.modules: Dict[str, Environment] = {}
        self.builtins: Dict[str, BuiltinFunction] = {}
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None
        self.max_call_depth = max_call_depth
        self.call_depth = 0
        self.load_standard_modules()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp is None:
                self.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp is not None:
            self.debug_fp.close()
            self.debug_fp = None

    def load_standard_modules(self):
        self.modules['io'] = populate_io_environment(self.io)
        self.modules['list'] = populate_list_environment()
        self.modules['str'] = populate_str_environment()
        for name in GLOBAL_MODULES:
            self.builtins.update(self.modules[name].values)

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Execute a program and return the value of its last statement.

        Runs directly in `env` (the global environment by default) so that
        bindings persist between runs of an interactive session.
        """
        if env is None:
            env = self.global_env
        frames = NESTING_FRAMES + self.max_call_depth * FRAMES_PER_CALL
        with raised_limits(frames):
            try:
                signal = self.execute_block(program.statements, env)
            except RecursionError:
                raise EvalError(ErrorKind.STACK_OVERFLOW, 'maximum recursion depth exceeded') from None
        if isinstance(signal, Normal):
            return signal.value
        raise self.escaped(signal)

    def escaped(self, signal: Signal, function: Optional[str] = None) -> EvalError:
        where = f" in function {function}" if function else ""
        if isinstance(signal, ReturnSignal):
            return EvalError(ErrorKind.RETURN_OUTSIDE_FUNCTION, "`return` outside of a function", signal.span)
        word = "break" if isinstance(signal, BreakSignal) else "continue"
        return EvalError(ErrorKind.LOOP_CONTROL_OUTSIDE_LOOP,
                         f"`{word}` outside of a loop{where}", signal.span)

    def execute_block(self, statements: Sequence[Node], env: Environment) -> Signal:
        value: Any = UNIT
        for stmt in statements:
            signal = self.execute(stmt, env)
            # propagate return, break and continue
            if not isinstance(signal, Normal):
                return signal
            value = signal.value
        return Normal(value)

    def execute(self, node: Node, env: Environment) -> Signal:
        if isinstance(node, ExpressionStatement):
            if isinstance(node.expr, Block):
                return self.execute_block(node.expr.statements, env.child())
            return Normal(self.evaluate(node.expr, env))
        if isinstance(node, LetBinding):
            value = self.evaluate(node.init, env)
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"let {node.name} = {to_display(value)}")
            return Normal(UNIT)
        if isinstance(node, Assignment):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value, node.span)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {to_display(value)}")
            return Normal(UNIT)
        if isinstance(node, FunctionDef):
            env.define(node.name, FunctionValue(node.name, node.params, node.body, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}")
            return Normal(UNIT)
        if isinstance(node, If):
            for condition, block in node.branches:
                cond = self.evaluate(condition, env)
                if not isinstance(cond, bool):
                    raise EvalError(ErrorKind.TYPE_MISMATCH,
                                    f'if condition must be Bool, got {kind_of(cond)}', condition.span)
                if self.debug_level >= 3:
                    self.debug(f"if condition -> {to_display(cond)}")
                if cond:
                    return self.execute_block(block.statements, env.child())
            if node.else_block is not None:
                return self.execute_block(node.else_block.statements, env.child())
            return Normal(UNIT)
        if isinstance(node, Loop):
            return self.execute_loop(node, env)
        if isinstance(node, Break):
            return BreakSignal(node.span)
        if isinstance(node, Continue):
            return ContinueSignal(node.span)
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else UNIT
            return ReturnSignal(value, node.span)
        if isinstance(node, Use):
            self.check_use(node)
            return Normal(UNIT)
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def execute_loop(self, node: Loop, env: Environment) -> Signal:
        iteration = 0
        while True:
            iteration += 1
            if self.debug_level >= 3:
                self.debug(f"loop iteration {iteration}")
            # each iteration runs in a fresh scope
            signal = self.execute_block(node.body.statements, env.child())
            if isinstance(signal, BreakSignal):
                if self.debug_level >= 1:
                    self.debug(f"break after {iteration} iterations")
                return Normal(UNIT)
            if isinstance(signal, ReturnSignal):
                if self.debug_level >= 1:
                    self.debug(f"return through loop after {iteration} iterations")
                return signal

    def check_use(self, node: Use):
        parts = node.path.split('.')
        if parts[0] == 'std':
            parts = parts[1:]
        if not parts:
            return
        if len(parts) != 1 or parts[0] not in self.modules:
            raise EvalError(ErrorKind.UNDEFINED_NAME, f'unknown module {node.path}', node.span)

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, IntLit):
            return node.value
        if isinstance(node, StrLit):
            return node.value
        if isinstance(node, BoolLit):
            return node.value
        if isinstance(node, Identifier):
            return env.get(node.name, node.span)
        if isinstance(node, ListLit):
            return ListValue(self.evaluate(el, env) for el in node.elements)
        if isinstance(node, Unary):
            return self.evaluate_unary(node, env)
        if isinstance(node, Binary):
            return self.evaluate_binary(node, env)
        if isinstance(node, Call):
            return self.evaluate_call(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def evaluate_unary(self, node: Unary, env: Environment) -> Any:
        operand = self.evaluate(node.operand, env)
        if node.op == '-':
            if not is_int(operand):
                raise EvalError(ErrorKind.TYPE_MISMATCH,
                                f'unary - expects Int, got {kind_of(operand)}', node.span)
            return -operand
        if node.op == '!':
            if not isinstance(operand, bool):
                raise EvalError(ErrorKind.TYPE_MISMATCH,
                                f'unary ! expects Bool, got {kind_of(operand)}', node.span)
            return not operand
        raise EvalError(ErrorKind.TYPE_MISMATCH, f'unsupported unary operator {node.op}', node.span)

    def evaluate_binary(self, node: Binary, env: Environment) -> Any:
        left = self.evaluate(node.left, env)
        # && and || short-circuit
        if node.op in ('&&', '||'):
            self.expect_bool(node.op, left, node.left.span)
            if node.op == '&&' and not left:
                return False
            if node.op == '||' and left:
                return True
            right = self.evaluate(node.right, env)
            self.expect_bool(node.op, right, node.right.span)
            return right
        right = self.evaluate(node.right, env)
        return self.apply_binary_op(node.op, left, right, node.span)

    def expect_bool(self, op: str, value: Any, span: Optional[Span]):
        if not isinstance(value, bool):
            raise EvalError(ErrorKind.TYPE_MISMATCH, f'operator {op} expects Bool, got {kind_of(value)}', span)

    def apply_binary_op(self, op: str, a: Any, b: Any, span: Optional[Span] = None) -> Any:
        if op in ('==', '!='):
            eq = values_equal(a, b)
            return eq if op == '==' else not eq
        if not (is_int(a) and is_int(b)):
            raise EvalError(ErrorKind.TYPE_MISMATCH,
                            f'operator {op} expects Int operands, got {kind_of(a)} and {kind_of(b)}', span)
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise EvalError(ErrorKind.DIVISION_BY_ZERO, 'division by zero', span)
            # integer division truncating toward zero
            quotient = abs(a) // abs(b)
            return quotient if (a < 0) == (b < 0) else -quotient
        if op == '<':
            return a < b
        if op == '<=':
            return a <= b
        if op == '>':
            return a > b
        if op == '>=':
            return a >= b
        raise EvalError(ErrorKind.TYPE_MISMATCH, f'unknown operator {op}', span)

    def lookup_builtin(self, path: str) -> Optional[BuiltinFunction]:
        if '.' not in path:
            return self.builtins.get(path)
        module, name = path.split('.', 1)
        module_env = self.modules.get(module)
        if module_env is None:
            return None
        return module_env.values.get(name)

    def evaluate_call(self, node: Call, env: Environment) -> Any:
        func = self.lookup_builtin(node.path)
        if func is None:
            if '.' in node.path:
                raise EvalError(ErrorKind.UNDEFINED_NAME, f'unknown builtin {node.path}', node.span)
            func = env.get(node.path, node.span)
        args = [self.evaluate(arg, env) for arg in node.args]
        return self.call_function(func, args, node.span)

    def call_function(self, func: Any, args: List[Any], span: Optional[Span] = None) -> Any:
        if isinstance(func, BuiltinFunction):
            # None means variadic
            if func.arity is not None and len(args) != func.arity:
                raise self.arity_error(func.name, func.arity, len(args), span)
            try:
                return func.fn(args)
            except EvalError as ex:
                raise ex.located(span)
        if isinstance(func, FunctionValue):
            if len(args) != len(func.params):
                raise self.arity_error(func.name, len(func.params), len(args), span)
            if self.call_depth >= self.max_call_depth:
                raise EvalError(ErrorKind.STACK_OVERFLOW,
                                f'call depth exceeded {self.max_call_depth} calling {func.name}', span)
            if self.debug_level >= 1:
                self.debug(f"call {func.name}({', '.join(to_display(a) for a in args)})")
            # fresh scope per call, parented to the captured definition scope
            call_env = func.env.child()
            for param, arg in zip(func.params, args):
                call_env.define(param, arg)
            self.call_depth += 1
            try:
                signal = self.execute_block(func.body.statements, call_env)
            finally:
                self.call_depth -= 1
            if isinstance(signal, (Normal, ReturnSignal)):
                return signal.value
            raise self.escaped(signal, func.name)
        raise EvalError(ErrorKind.NOT_CALLABLE, f'{kind_of(func)} value is not callable', span)

    def arity_error(self, name: str, expected: int, got: int, span: Optional[Span]) -> EvalError:
        err = EvalError(ErrorKind.ARITY_MISMATCH,
                        f'{name} expects {expected} arguments, got {got}', span)
        err.expected = expected
        err.got = got
        return err


@dataclass
class InterpretResult:
    output_lines: List[str]
    ast_dump: str
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass
class LineResult:
    output_lines: List[str]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    value: Optional[str] = None  # canonical text of a non-Unit result


def interpret(source: str, input_provider: Optional[Callable[[], str]] = None,
              output_stream: Optional[TextIO] = None, debug_level: int = 0) -> InterpretResult:
    """Evaluate a whole program in a fresh root environment.

    Lexical and parse errors stop before anything runs. A runtime error
    stops evaluation, but output printed before it is kept. At most one
    diagnostic is reported.
    """
    try:
        program = parse_program(source)
    except DomError as e:
        return InterpretResult([], '', [e.diagnostic])
    interpreter = Interpreter(debug_level=debug_level, input_provider=input_provider,
                              output_stream=output_stream)
    diagnostics: List[Diagnostic] = []
    try:
        interpreter.run(program)
    except DomError as e:
        diagnostics.append(e.diagnostic)
    finally:
        interpreter.close()
    return InterpretResult(interpreter.io.take_output(), dump_ast(program), diagnostics)


class Session:
    """An interactive session whose root environment persists between lines."""
    def __init__(self, input_provider: Optional[Callable[[], str]] = None,
                 output_stream: Optional[TextIO] = None, debug_level: int = 0):
        self.interpreter = Interpreter(debug_level=debug_level, input_provider=input_provider,
                                       output_stream=output_stream)

    @property
    def env(self) -> Environment:
        return self.interpreter.global_env

    def evaluate(self, line: str) -> LineResult:
        try:
            program = parse_program(line)
        except DomError as e:
            return LineResult([], [e.diagnostic])
        try:
            value = self.interpreter.run(program)
        except DomError as e:
            # bindings made before the failure stay in the session
            return LineResult(self.interpreter.io.take_output(), [e.diagnostic])
        text = None
        if value is not UNIT:
            with raised_limits():
                text = to_display(value)
        return LineResult(self.interpreter.io.take_output(), [], text)

    def close(self):
        self.interpreter.close()


def evaluate_line(session: Session, line: str) -> LineResult:
    return session.evaluate(line)


def stdin_provider() -> str:
    return builtins.input()


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Dom program from a source string.

    Output goes to stdout, `input()` reads stdin, and failures are raised
    as `DomError`.
    """
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level, input_provider=stdin_provider,
                              output_stream=sys.stdout)
    try:
        return interpreter.run(ast_program)
    finally:
        interpreter.close()


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute a Dom file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level, input_provider=stdin_provider,
                              output_stream=sys.stdout)
    try:
        interpreter.run(ast_program)
    finally:
        interpreter.close()
    return interpreter
