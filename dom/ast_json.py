"""JSON serialization/deserialization for Dom AST.

This module converts between Dom AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Spans are included by
default so a stored AST still produces located diagnostics when it is
executed; `dump_ast` leaves them out and is the stable textual form of
a parse result.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .ast import (
    Program,
    LetBinding,
    Assignment,
    FunctionDef,
    If,
    Loop,
    Break,
    Continue,
    Return,
    Use,
    ExpressionStatement,
    BoolLit,
    IntLit,
    StrLit,
    ListLit,
    Identifier,
    Unary,
    Binary,
    Call,
    Block,
)
from .errors import Span
from .limits import raised_limits


def span_to_obj(span: Optional[Span]) -> Optional[Dict[str, int]]:
    if span is None:
        return None
    return {"offset": span.offset, "length": span.length, "line": span.line, "column": span.column}


def span_from_obj(o: Optional[Dict[str, int]]) -> Optional[Span]:
    if o is None:
        return None
    return Span(o["offset"], o["length"], o.get("line", 1), o.get("column", 1))


def ast_to_obj(node: Any, spans: bool = True) -> Any:
    if node is None:
        return None

    def conv(child: Any) -> Any:
        return ast_to_obj(child, spans)

    if isinstance(node, Program):
        obj = {"type": "Program", "statements": [conv(s) for s in node.statements]}
    elif isinstance(node, LetBinding):
        obj = {"type": "LetBinding", "name": node.name, "init": conv(node.init)}
    elif isinstance(node, Assignment):
        obj = {"type": "Assignment", "name": node.name, "value": conv(node.value)}
    elif isinstance(node, FunctionDef):
        obj = {
            "type": "FunctionDef",
            "name": node.name,
            "params": list(node.params),
            "body": conv(node.body),
        }
    elif isinstance(node, If):
        obj = {
            "type": "If",
            "branches": [{"condition": conv(c), "block": conv(b)} for (c, b) in node.branches],
            "else_block": conv(node.else_block),
        }
    elif isinstance(node, Loop):
        obj = {"type": "Loop", "body": conv(node.body)}
    elif isinstance(node, Break):
        obj = {"type": "Break"}
    elif isinstance(node, Continue):
        obj = {"type": "Continue"}
    elif isinstance(node, Return):
        obj = {"type": "Return", "value": conv(node.value)}
    elif isinstance(node, Use):
        obj = {"type": "Use", "path": node.path}
    elif isinstance(node, ExpressionStatement):
        obj = {"type": "ExpressionStatement", "expr": conv(node.expr)}
    elif isinstance(node, Block):
        obj = {"type": "Block", "statements": [conv(s) for s in node.statements]}
    elif isinstance(node, BoolLit):
        obj = {"type": "BoolLit", "value": node.value}
    elif isinstance(node, IntLit):
        obj = {"type": "IntLit", "value": node.value}
    elif isinstance(node, StrLit):
        obj = {"type": "StrLit", "value": node.value}
    elif isinstance(node, ListLit):
        obj = {"type": "ListLit", "elements": [conv(e) for e in node.elements]}
    elif isinstance(node, Identifier):
        obj = {"type": "Identifier", "name": node.name}
    elif isinstance(node, Unary):
        obj = {"type": "Unary", "op": node.op, "operand": conv(node.operand)}
    elif isinstance(node, Binary):
        obj = {"type": "Binary", "op": node.op, "left": conv(node.left), "right": conv(node.right)}
    elif isinstance(node, Call):
        obj = {"type": "Call", "path": node.path, "args": [conv(a) for a in node.args]}
    else:
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")

    if spans:
        obj["span"] = span_to_obj(node.span)
    return obj


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    span = span_from_obj(obj.get("span"))
    if t == "Program":
        return Program(tuple(ast_from_obj(s) for s in obj["statements"]), span=span)
    if t == "LetBinding":
        return LetBinding(obj["name"], ast_from_obj(obj["init"]), span=span)
    if t == "Assignment":
        return Assignment(obj["name"], ast_from_obj(obj["value"]), span=span)
    if t == "FunctionDef":
        return FunctionDef(obj["name"], tuple(obj["params"]), ast_from_obj(obj["body"]), span=span)
    if t == "If":
        branches = tuple((ast_from_obj(b["condition"]), ast_from_obj(b["block"])) for b in obj["branches"])
        return If(branches, ast_from_obj(obj.get("else_block")), span=span)
    if t == "Loop":
        return Loop(ast_from_obj(obj["body"]), span=span)
    if t == "Break":
        return Break(span=span)
    if t == "Continue":
        return Continue(span=span)
    if t == "Return":
        return Return(ast_from_obj(obj.get("value")), span=span)
    if t == "Use":
        return Use(obj["path"], span=span)
    if t == "ExpressionStatement":
        return ExpressionStatement(ast_from_obj(obj["expr"]), span=span)
    if t == "Block":
        return Block(tuple(ast_from_obj(s) for s in obj["statements"]), span=span)
    if t == "BoolLit":
        return BoolLit(bool(obj["value"]), span=span)
    if t == "IntLit":
        return IntLit(int(obj["value"]), span=span)
    if t == "StrLit":
        return StrLit(obj["value"], span=span)
    if t == "ListLit":
        return ListLit(tuple(ast_from_obj(e) for e in obj["elements"]), span=span)
    if t == "Identifier":
        return Identifier(obj["name"], span=span)
    if t == "Unary":
        return Unary(obj["op"], ast_from_obj(obj["operand"]), span=span)
    if t == "Binary":
        return Binary(obj["op"], ast_from_obj(obj["left"]), ast_from_obj(obj["right"]), span=span)
    if t == "Call":
        return Call(obj["path"], tuple(ast_from_obj(a) for a in obj["args"]), span=span)

    raise ValueError(f"Unknown AST node type: {t}")


def dump_ast(program: Program) -> str:
    """Render a program as indented JSON without spans.

    The output depends only on the tree's structure, so it is stable
    across runs and across changes to whitespace in the source.
    """
    with raised_limits():
        return json.dumps(ast_to_obj(program, spans=False), indent=2)
