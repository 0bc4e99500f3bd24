"""Control signals produced by statement execution.

Every statement the interpreter executes completes with exactly one
signal. `Normal` carries the statement's value; the other three request
a non-local exit and are passed upward, unchanged, until the construct
that owns them consumes them: loops consume `BreakSignal` and
`ContinueSignal`, function calls consume `ReturnSignal`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .errors import Span


class Signal:
    """Base class for statement completion signals."""
    pass


@dataclass
class Normal(Signal):
    value: Any


@dataclass
class ReturnSignal(Signal):
    value: Any
    span: Optional[Span] = None


@dataclass
class BreakSignal(Signal):
    span: Optional[Span] = None


@dataclass
class ContinueSignal(Signal):
    span: Optional[Span] = None
