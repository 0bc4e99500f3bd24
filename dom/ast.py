"""Abstract Syntax Tree (AST) definitions for the Dom language.

The AST classes defined in this module represent the syntactic structure
of parsed Dom programs. Nodes are immutable and own their children; the
pipe operator never appears here because the parser rewrites it into an
ordinary `Call`. Every node records the `Span` it was parsed from, but
spans take no part in equality, so two programs that differ only in
layout compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Optional, Tuple

from .errors import Span


def _span():
    return field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass(frozen=True)
class BoolLit(Node):
    value: bool
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class IntLit(Node):
    value: int
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class StrLit(Node):
    value: str
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ListLit(Node):
    elements: Tuple[Node, ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Identifier(Node):
    name: str
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Unary(Node):
    op: str
    operand: Node
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Binary(Node):
    op: str
    left: Node
    right: Node
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Call(Node):
    path: str  # plain name, or dotted builtin path such as 'list.push'
    args: Tuple[Node, ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple[Node, ...]
    span: Optional[Span] = _span()


# Statements

@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Node, ...]
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class LetBinding(Node):
    name: str
    init: Node
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Assignment(Node):
    name: str
    value: Node
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class FunctionDef(Node):
    name: str
    params: Tuple[str, ...]
    body: Block
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class If(Node):
    branches: Tuple[Tuple[Node, Block], ...]  # (condition, block), first true wins
    else_block: Optional[Block] = None
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Loop(Node):
    body: Block
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Break(Node):
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Continue(Node):
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Return(Node):
    value: Optional[Node] = None
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class Use(Node):
    path: str  # namespace path joined with '.', e.g. 'std.io'
    span: Optional[Span] = _span()


@dataclass(frozen=True)
class ExpressionStatement(Node):
    expr: Node
    span: Optional[Span] = _span()


def _child_nodes(value):
    if isinstance(value, Node):
        yield value
    elif isinstance(value, tuple):
        for item in value:
            yield from _child_nodes(item)


def nesting_depth(node: Node) -> int:
    """Return the number of nodes on the longest path down from `node`.

    Walks the tree with an explicit stack so that it works on trees too
    deep for the recursive passes.
    """
    deepest = 0
    stack = [(node, 1)]
    while stack:
        current, depth = stack.pop()
        deepest = max(deepest, depth)
        for f in fields(current):
            if f.name == 'span':
                continue
            stack.extend((child, depth + 1) for child in _child_nodes(getattr(current, f.name)))
    return deepest
