from typing import Callable, List, Optional, TextIO
from dom.errors import ErrorKind, EvalError


class BasicIO:
    """The interpreter's console channel.

    Every printed line is recorded in `output_lines` and, when an
    `output_stream` is given, also written to it as it is produced.
    Input comes from `input_provider`; a host that cannot supply input
    leaves it unset and `read_line` then refuses instead of blocking.
    """
    def __init__(self, input_provider: Optional[Callable[[], str]] = None,
                 output_stream: Optional[TextIO] = None):
        self.input_provider = input_provider
        self.output_stream = output_stream
        self.output_lines: List[str] = []

    def write_line(self, text: str):
        self.output_lines.append(text)
        if self.output_stream is not None:
            self.output_stream.write(text + '\n')
            self.output_stream.flush()

    def read_line(self) -> str:
        if self.input_provider is None:
            raise EvalError(ErrorKind.CAPABILITY_UNAVAILABLE, 'input is not available in this session')
        try:
            line = self.input_provider()
        except EOFError:
            raise EvalError(ErrorKind.CAPABILITY_UNAVAILABLE, 'input is exhausted')
        if line is None:
            raise EvalError(ErrorKind.CAPABILITY_UNAVAILABLE, 'input is exhausted')
        return line.rstrip('\r\n')

    def take_output(self) -> List[str]:
        lines = self.output_lines
        self.output_lines = []
        return lines
