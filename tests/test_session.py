from dom.errors import ErrorKind
from dom.interpreter import Session, evaluate_line


def test_bindings_persist_between_lines():
    session = Session()
    assert evaluate_line(session, 'let x = 40').value is None
    assert evaluate_line(session, 'fn inc(n) { n + 1 }').diagnostics == []
    result = evaluate_line(session, 'inc(inc(x))')
    assert result.value == '42'
    assert result.output_lines == []


def test_line_output_is_returned_per_line():
    session = Session()
    first = session.evaluate('print("a") print("b")')
    second = session.evaluate('print("c")')
    assert first.output_lines == ['a', 'b']
    assert second.output_lines == ['c']
    assert second.value is None


def test_runtime_error_keeps_session_environment():
    session = Session()
    session.evaluate('let total = 1')
    failed = session.evaluate('total = total + 1; print(total); total / 0')
    assert failed.output_lines == ['2']
    assert [d.kind for d in failed.diagnostics] == [ErrorKind.DIVISION_BY_ZERO]
    assert failed.value is None
    assert session.evaluate('total').value == '2'


def test_parse_error_does_not_touch_environment():
    session = Session()
    session.evaluate('let y = 1')
    result = session.evaluate('y = (')
    assert result.diagnostics[0].kind is ErrorKind.UNEXPECTED_EOF
    assert session.evaluate('y').value == '1'
    assert 'y' in session.env


def test_values_are_echoed_in_canonical_form():
    session = Session()
    assert session.evaluate('[1, "a", true]').value == '[1, a, true]'
    assert session.evaluate('"text"').value == 'text'
    assert session.evaluate('fn f(a, b) { a }\nf').value == 'f(a, b)'


def test_session_input_provider():
    answers = iter(['yes'])
    session = Session(input_provider=lambda: next(answers))
    assert session.evaluate('input()').value == 'yes'


def test_session_without_input():
    result = Session().evaluate('input()')
    assert result.diagnostics[0].kind is ErrorKind.CAPABILITY_UNAVAILABLE
