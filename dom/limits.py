"""Host limits that Dom programs must not run into.

CPython caps both recursion depth and the number of digits it will
convert between `int` and `str`. Dom integers are unbounded, and the
parser, evaluator and AST codec all recurse over the tree, so those
stages run inside `raised_limits`, which lifts the digit cap and adds
recursion headroom for the duration and restores both afterwards.
"""

import sys
from contextlib import contextmanager

# Deepest syntax tree the parser accepts
MAX_NESTING = 1000

# CPython frames spent per level of syntax nesting (parser, dump, evaluator)
FRAMES_PER_NESTING = 8

# CPython frames spent per nested Dom function call
FRAMES_PER_CALL = 16

NESTING_FRAMES = MAX_NESTING * FRAMES_PER_NESTING


@contextmanager
def raised_limits(frames: int = NESTING_FRAMES):
    previous_limit = sys.getrecursionlimit()
    previous_digits = sys.get_int_max_str_digits()
    sys.setrecursionlimit(previous_limit + frames)
    sys.set_int_max_str_digits(0)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous_limit)
        sys.set_int_max_str_digits(previous_digits)
