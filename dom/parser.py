"""Parser for the Dom language.

Statements are parsed by recursive descent and expressions by precedence
climbing over the table in `BINARY_PRECEDENCE`. Parsing is fail-fast:
the first problem raises a `ParseError` and no recovery is attempted.

The pipe operator is resolved here. `x |> f(a)` is rewritten to
`f(x, a)`, and since pipes associate to the left, `a |> f() |> g(y)`
becomes `g(f(a), y)`.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    Program, LetBinding, Assignment, FunctionDef, If, Loop, Break, Continue,
    Return, Use, ExpressionStatement, BoolLit, IntLit, StrLit, ListLit,
    Identifier, Unary, Binary, Call, Block, Node, nesting_depth,
)
from .errors import ErrorKind, ParseError, Span
from .lexer import Token, scan
from .limits import MAX_NESTING, raised_limits


# Lowest to highest. Unary operators and calls bind tighter than all of these.
BINARY_PRECEDENCE = {
    '|>': 1,
    '||': 2,
    '&&': 3,
    '==': 4, '!=': 4,
    '<': 5, '<=': 5, '>': 5, '>=': 5,
    '+': 6, '-': 6,
    '*': 7, '/': 7,
}

UNARY_OPS = ('-', '!')

# Tokens that can begin an expression; used to decide whether `return` has a value.
EXPRESSION_STARTS = ('(', '[', '-', '!')


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def check(self, type_: str, value: Optional[str] = None, offset: int = 0) -> bool:
        token = self.peek(offset)
        if token.type != type_:
            return False
        return value is None or token.value == value

    def check_op(self, value: str) -> bool:
        return self.check('OP', value)

    def check_keyword(self, value: str) -> bool:
        return self.check('KEYWORD', value)

    def advance(self) -> Token:
        token = self.peek()
        if token.type != 'EOF':
            self.pos += 1
        return token

    def error(self, expected: str, token: Optional[Token] = None) -> ParseError:
        token = token or self.peek()
        if token.type == 'EOF':
            return ParseError(ErrorKind.UNEXPECTED_EOF, f"unexpected end of input, expected {expected}",
                              token.span, expected=expected, found=token.describe())
        return ParseError(ErrorKind.UNEXPECTED_TOKEN, f"expected {expected}, found {token.describe()}",
                          token.span, expected=expected, found=token.describe())

    def consume(self, type_: str, value: Optional[str] = None, expected: Optional[str] = None) -> Token:
        if not self.check(type_, value):
            raise self.error(expected or (f"'{value}'" if value else type_.lower()))
        return self.advance()

    def expect_op(self, value: str) -> Token:
        return self.consume('OP', value)

    def expect_ident(self, what: str = 'identifier') -> Token:
        return self.consume('IDENT', expected=what)

    # Statements

    def parse_program(self) -> Program:
        statements: List[Node] = []
        start = self.peek().span
        self.skip_separators()
        while not self.check('EOF'):
            statements.append(self.parse_statement())
            self.skip_separators()
        return Program(tuple(statements), span=start.to(self.peek().span))

    def skip_separators(self):
        while self.check_op(';'):
            self.advance()

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == 'KEYWORD':
            if token.value == 'let':
                return self.parse_let()
            if token.value == 'fn':
                return self.parse_function()
            if token.value == 'if':
                return self.parse_if()
            if token.value == 'loop':
                return self.parse_loop()
            if token.value == 'break':
                self.advance()
                return Break(span=token.span)
            if token.value == 'continue':
                self.advance()
                return Continue(span=token.span)
            if token.value == 'return':
                return self.parse_return()
            if token.value == 'use':
                return self.parse_use()
        if self.check_op('{'):
            block = self.parse_block()
            return ExpressionStatement(block, span=block.span)
        if token.type == 'IDENT' and self.check('OP', '=', offset=1):
            return self.parse_assignment()
        expr = self.parse_expression()
        return ExpressionStatement(expr, span=expr.span)

    def parse_let(self) -> LetBinding:
        keyword = self.advance()
        name = self.expect_ident('variable name after `let`')
        self.expect_op('=')
        init = self.parse_expression()
        return LetBinding(name.value, init, span=keyword.span.to(init.span))

    def parse_assignment(self) -> Assignment:
        name = self.advance()
        self.expect_op('=')
        value = self.parse_expression()
        return Assignment(name.value, value, span=name.span.to(value.span))

    def parse_function(self) -> FunctionDef:
        keyword = self.advance()
        name = self.expect_ident('function name after `fn`')
        self.expect_op('(')
        params: List[str] = []
        if not self.check_op(')'):
            params.append(self.expect_ident('parameter name').value)
            while self.check_op(','):
                self.advance()
                params.append(self.expect_ident('parameter name').value)
        self.expect_op(')')
        body = self.parse_block()
        return FunctionDef(name.value, tuple(params), body, span=keyword.span.to(body.span))

    def parse_if(self) -> If:
        keyword = self.advance()
        branches: List[Tuple[Node, Block]] = []
        condition = self.parse_expression()
        block = self.parse_block()
        branches.append((condition, block))
        else_block: Optional[Block] = None
        end = block.span
        while self.check_keyword('else'):
            self.advance()
            if self.check_keyword('if'):
                self.advance()
                condition = self.parse_expression()
                block = self.parse_block()
                branches.append((condition, block))
                end = block.span
                continue
            else_block = self.parse_block()
            end = else_block.span
            break
        return If(tuple(branches), else_block, span=keyword.span.to(end))

    def parse_loop(self) -> Loop:
        keyword = self.advance()
        body = self.parse_block()
        return Loop(body, span=keyword.span.to(body.span))

    def parse_return(self) -> Return:
        keyword = self.advance()
        if not self.starts_expression():
            return Return(None, span=keyword.span)
        value = self.parse_expression()
        return Return(value, span=keyword.span.to(value.span))

    def starts_expression(self) -> bool:
        token = self.peek()
        if token.type in ('INT', 'STRING', 'IDENT'):
            return True
        if token.type == 'KEYWORD':
            return token.value in ('true', 'false')
        return token.type == 'OP' and token.value in EXPRESSION_STARTS

    def parse_use(self) -> Use:
        keyword = self.advance()
        parts = [self.expect_ident('module name after `use`')]
        while self.check_op('.') or self.check_op('/'):
            self.advance()
            parts.append(self.expect_ident('module name'))
        path = '.'.join(part.value for part in parts)
        return Use(path, span=keyword.span.to(parts[-1].span))

    def parse_block(self) -> Block:
        open_brace = self.expect_op('{')
        statements: List[Node] = []
        self.skip_separators()
        while not self.check_op('}'):
            if self.check('EOF'):
                raise self.error("'}'")
            statements.append(self.parse_statement())
            self.skip_separators()
        close_brace = self.advance()
        return Block(tuple(statements), span=open_brace.span.to(close_brace.span))

    # Expressions

    def parse_expression(self, min_precedence: int = 1) -> Node:
        left = self.parse_unary()
        while True:
            token = self.peek()
            precedence = BINARY_PRECEDENCE.get(token.value) if token.type == 'OP' else None
            if precedence is None or precedence < min_precedence:
                return left
            self.advance()
            right_start = self.peek()
            right = self.parse_expression(precedence + 1)
            if token.value == '|>':
                left = self.desugar_pipe(left, right, right_start)
            else:
                left = Binary(token.value, left, right, span=left.span.to(right.span))

    def desugar_pipe(self, left: Node, right: Node, right_start: Token) -> Call:
        if not isinstance(right, Call):
            raise self.error('function call after `|>`', right_start)
        return Call(right.path, (left,) + right.args, span=left.span.to(right.span))

    def parse_unary(self) -> Node:
        token = self.peek()
        if token.type == 'OP' and token.value in UNARY_OPS:
            self.advance()
            operand = self.parse_unary()
            return Unary(token.value, operand, span=token.span.to(operand.span))
        return self.parse_primary()

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == 'INT':
            self.advance()
            return IntLit(int(token.value), span=token.span)
        if token.type == 'STRING':
            self.advance()
            return StrLit(token.value, span=token.span)
        if token.type == 'KEYWORD' and token.value in ('true', 'false'):
            self.advance()
            return BoolLit(token.value == 'true', span=token.span)
        if token.type == 'IDENT':
            return self.parse_name()
        if self.check_op('['):
            self.advance()
            elements = self.parse_arguments(']')
            close = self.expect_op(']')
            return ListLit(tuple(elements), span=token.span.to(close.span))
        if self.check_op('('):
            self.advance()
            expr = self.parse_expression()
            self.expect_op(')')
            return expr
        raise self.error('expression')

    def parse_name(self) -> Node:
        name = self.advance()
        path = name.value
        if self.check_op('.'):
            # Dotted names only ever denote builtin calls
            self.advance()
            member = self.expect_ident('builtin name after `.`')
            path = f"{path}.{member.value}"
            if not self.check_op('('):
                raise self.error("'(' after dotted builtin name")
        if not self.check_op('('):
            return Identifier(path, span=name.span)
        self.advance()
        args = self.parse_arguments(')')
        close = self.expect_op(')')
        return Call(path, tuple(args), span=name.span.to(close.span))

    def parse_arguments(self, closing: str) -> List[Node]:
        args: List[Node] = []
        if self.check_op(closing):
            return args
        args.append(self.parse_expression())
        while self.check_op(','):
            self.advance()
            args.append(self.parse_expression())
        return args


def parse_program(source: str) -> Program:
    """Parse the given source code into a Program AST.

    Raises `LexError` or `ParseError` for the first problem found. Trees
    nested deeper than `MAX_NESTING` are rejected with `NestingTooDeep`,
    which keeps every later pass over the tree within its recursion budget.
    """
    tokens = scan(source)
    parser = Parser(tokens)
    with raised_limits():
        try:
            program = parser.parse_program()
        except RecursionError:
            raise ParseError(ErrorKind.NESTING_TOO_DEEP, 'program is nested too deeply',
                             parser.peek().span) from None
    if nesting_depth(program) > MAX_NESTING:
        raise ParseError(ErrorKind.NESTING_TOO_DEEP,
                         f'program is nested more than {MAX_NESTING} levels deep', program.span)
    return program
