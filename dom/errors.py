"""Error model for the Dom language.

Every failure the engine can report is described by an `ErrorKind` and
carried as a `Diagnostic`. Diagnostics travel inside `DomError`
exceptions until an entry point converts them into plain data for the
host. Rendering (colour, snippets) is left to the host.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    # LexError
    UNTERMINATED_STRING = 'UnterminatedString'
    UNEXPECTED_CHARACTER = 'UnexpectedCharacter'
    # ParseError
    UNEXPECTED_TOKEN = 'UnexpectedToken'
    UNEXPECTED_EOF = 'UnexpectedEOF'
    NESTING_TOO_DEEP = 'NestingTooDeep'
    # RuntimeError
    TYPE_MISMATCH = 'TypeMismatch'
    DIVISION_BY_ZERO = 'DivisionByZero'
    INDEX_OUT_OF_BOUNDS = 'IndexOutOfBounds'
    ARITY_MISMATCH = 'ArityMismatch'
    NOT_CALLABLE = 'NotCallable'
    UNDEFINED_NAME = 'UndefinedName'
    LOOP_CONTROL_OUTSIDE_LOOP = 'LoopControlOutsideLoop'
    RETURN_OUTSIDE_FUNCTION = 'ReturnOutsideFunction'
    CAPABILITY_UNAVAILABLE = 'CapabilityUnavailable'
    STACK_OVERFLOW = 'StackOverflow'

    @property
    def category(self) -> str:
        if self in (ErrorKind.UNTERMINATED_STRING, ErrorKind.UNEXPECTED_CHARACTER):
            return 'LexError'
        if self in (ErrorKind.UNEXPECTED_TOKEN, ErrorKind.UNEXPECTED_EOF, ErrorKind.NESTING_TOO_DEEP):
            return 'ParseError'
        return 'RuntimeError'


@dataclass(frozen=True)
class Span:
    """A region of source text.

    `offset` is the 0-based character index of the first character and
    `length` the number of characters covered. `line` and `column` are
    1-based and describe the first character.
    """
    offset: int
    length: int
    line: int = 1
    column: int = 1

    @property
    def end(self) -> int:
        return self.offset + self.length

    def to(self, other: Optional['Span']) -> 'Span':
        """Return a span running from the start of self to the end of other."""
        if other is None:
            return self
        return Span(self.offset, max(other.end, self.end) - self.offset, self.line, self.column)


@dataclass(frozen=True)
class Diagnostic:
    """Structured description of a lex, parse or runtime failure."""
    severity: str
    message: str
    span: Optional[Span]
    kind: ErrorKind

    @property
    def category(self) -> str:
        return self.kind.category

    def format(self) -> str:
        text = f"{self.severity}[{self.kind.value}]: {self.message}"
        if self.span is not None:
            text += f" (line {self.span.line}, column {self.span.column})"
        return text


class DomError(Exception):
    """Exception type used to propagate Dom failures to the entry points."""
    def __init__(self, kind: ErrorKind, message: str, span: Optional[Span] = None):
        super().__init__(f"{kind.category}: {kind.value}: {message}")
        self.diagnostic = Diagnostic('error', message, span, kind)

    @property
    def kind(self) -> ErrorKind:
        return self.diagnostic.kind

    @property
    def span(self) -> Optional[Span]:
        return self.diagnostic.span


class LexError(DomError):
    pass


class ParseError(DomError):
    def __init__(self, kind: ErrorKind, message: str, span: Optional[Span] = None,
                 expected: Optional[str] = None, found: Optional[str] = None):
        super().__init__(kind, message, span)
        self.expected = expected
        self.found = found


class EvalError(DomError):
    def located(self, span: Optional[Span]) -> 'EvalError':
        """Return this error with `span` attached, unless it already has one."""
        if self.span is not None or span is None:
            return self
        return EvalError(self.kind, self.diagnostic.message, span)
