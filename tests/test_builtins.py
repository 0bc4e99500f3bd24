import pytest
from dom.errors import ErrorKind, EvalError
from dom.interpreter import interpret


def run(source, input_provider=None):
    result = interpret(source, input_provider=input_provider)
    return result.output_lines, result.diagnostics


def kind_of_failure(source, input_provider=None):
    _, diagnostics = run(source, input_provider)
    assert len(diagnostics) == 1
    return diagnostics[0].kind


def test_print_concatenates_without_separator():
    out, _ = run('print("a", 1, true, [1, 2])\nprint()')
    assert out == ['a1true[1, 2]', '']


def test_plain_and_dotted_names_are_the_same_builtin():
    out, _ = run('let xs = [1]\nprint(len(push(xs, 2)), list.len(list.push(xs, 2)))\nio.print("x")')
    assert out == ['22', 'x']


def test_list_builtins():
    out, _ = run('''
let xs = [10, 20, 30]
print(get(xs, 1))
print(set(xs, 1, 0))
print(pop(xs, 0))
print(push(xs, 40))
print(xs)
''')
    assert out == ['20', '[10, 0, 30]', '[20, 30]', '[10, 20, 30, 40]', '[10, 20, 30]']


def test_str_len():
    out, _ = run('print(str.len("hello"), str.len(""))')
    assert out == ['50']


@pytest.mark.parametrize('source, kind', [
    ('get([1, 2], 2)', ErrorKind.INDEX_OUT_OF_BOUNDS),
    ('get([1, 2], -1)', ErrorKind.INDEX_OUT_OF_BOUNDS),
    ('pop([], 0)', ErrorKind.INDEX_OUT_OF_BOUNDS),
    ('set([1], 1, 5)', ErrorKind.INDEX_OUT_OF_BOUNDS),
    ('get([1], "0")', ErrorKind.TYPE_MISMATCH),
    ('get([1], true)', ErrorKind.TYPE_MISMATCH),
    ('push(1, 2)', ErrorKind.TYPE_MISMATCH),
    ('len("abc")', ErrorKind.TYPE_MISMATCH),
    ('str.len([1])', ErrorKind.TYPE_MISMATCH),
    ('get([1])', ErrorKind.ARITY_MISMATCH),
    ('input(1)', ErrorKind.ARITY_MISMATCH),
    ('str.upper("a")', ErrorKind.UNDEFINED_NAME),
    ('math.abs(1)', ErrorKind.UNDEFINED_NAME),
])
def test_builtin_failures(source, kind):
    assert kind_of_failure(source) is kind


def test_builtin_errors_are_located_at_the_call():
    _, diagnostics = run('let xs = []\n  get(xs, 0)')
    assert diagnostics[0].span.line == 2
    assert diagnostics[0].span.column == 3


def test_input_reads_one_line_without_newline():
    lines = iter(['first\n', 'second'])
    out, diagnostics = run('print(input(), "|", io.input())', lambda: next(lines))
    assert diagnostics == []
    assert out == ['first|second']


def test_input_without_provider_is_unavailable():
    assert kind_of_failure('let x = input()') is ErrorKind.CAPABILITY_UNAVAILABLE


def test_input_at_end_of_stream_is_unavailable():
    def exhausted():
        raise EOFError
    assert kind_of_failure('input()', exhausted) is ErrorKind.CAPABILITY_UNAVAILABLE


def test_builtins_cannot_be_redefined():
    out, _ = run('fn print(x) { 0 }\nprint("still builtin")')
    assert out == ['still builtin']


def test_builtin_names_are_not_values():
    assert kind_of_failure('let p = print') is ErrorKind.UNDEFINED_NAME


def test_eval_error_keeps_existing_span():
    from dom.errors import Span
    err = EvalError(ErrorKind.TYPE_MISMATCH, 'x', Span(1, 1))
    assert err.located(Span(5, 1)) is err
    moved = EvalError(ErrorKind.TYPE_MISMATCH, 'x').located(Span(5, 1))
    assert moved.span == Span(5, 1)
