"""Tokenizer for the Dom language.

`scan` turns source text into a list of tokens that always ends with an
`EOF` token. Whitespace (newlines included) and `//` line comments are
skipped. Malformed input is never dropped: it raises a `LexError`
carrying the span of the offending text.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import List

from .errors import ErrorKind, LexError, Span


KEYWORDS = frozenset({
    'let', 'fn', 'if', 'else', 'loop', 'break', 'continue', 'return', 'use', 'true', 'false',
})

TWO_CHAR_OPS = frozenset({'==', '!=', '<=', '>=', '&&', '||', '|>'})
SINGLE_OPS = frozenset({'+', '-', '*', '/', '<', '>', '=', '!', '(', ')', '{', '}', '[', ']', ',', '.', ';'})

IDENT_START = frozenset(string.ascii_letters + '_')
IDENT_CHARS = IDENT_START | frozenset(string.digits)


@dataclass(frozen=True)
class Token:
    type: str   # IDENT, KEYWORD, INT, STRING, OP or EOF
    value: str
    span: Span

    def describe(self) -> str:
        if self.type == 'EOF':
            return 'end of input'
        if self.type == 'STRING':
            return f'"{self.value}"'
        return f"'{self.value}'"


def scan(source: str) -> List[Token]:
    """Convert source code into a list of tokens terminated by an EOF token.

    Integer literals are maximal runs of digits; a leading minus sign is
    tokenized separately and handled by the parser as unary negation.
    String literals are delimited by double quotes and are taken
    verbatim, without escape processing.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        if c.isspace():
            advance()
            continue
        # Comments run to the end of the line
        if c == '/' and i + 1 < length and source[i + 1] == '/':
            while i < length and source[i] != '\n':
                advance()
            continue
        start_i, start_line, start_col = i, line, col
        if c in IDENT_START:
            while i < length and source[i] in IDENT_CHARS:
                advance()
            value = source[start_i:i]
            kind = 'KEYWORD' if value in KEYWORDS else 'IDENT'
            tokens.append(Token(kind, value, Span(start_i, i - start_i, start_line, start_col)))
            continue
        if c in string.digits:
            while i < length and source[i] in string.digits:
                advance()
            tokens.append(Token('INT', source[start_i:i], Span(start_i, i - start_i, start_line, start_col)))
            continue
        if c == '"':
            advance()
            while i < length and source[i] != '"':
                advance()
            if i >= length:
                raise LexError(ErrorKind.UNTERMINATED_STRING, 'string literal is never terminated',
                               Span(start_i, length - start_i, start_line, start_col))
            value = source[start_i + 1:i]
            advance()  # closing quote
            tokens.append(Token('STRING', value, Span(start_i, i - start_i, start_line, start_col)))
            continue
        pair = source[i:i + 2]
        if pair in TWO_CHAR_OPS:
            advance(2)
            tokens.append(Token('OP', pair, Span(start_i, 2, start_line, start_col)))
            continue
        if c in SINGLE_OPS:
            advance()
            tokens.append(Token('OP', c, Span(start_i, 1, start_line, start_col)))
            continue
        raise LexError(ErrorKind.UNEXPECTED_CHARACTER, f"unexpected character {c!r}",
                       Span(start_i, 1, start_line, start_col))
    tokens.append(Token('EOF', '', Span(length, 0, line, col)))
    return tokens
