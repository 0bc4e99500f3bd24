import pytest
from dom.errors import ErrorKind, LexError
from dom.lexer import scan


def kinds(source):
    return [(t.type, t.value) for t in scan(source)]


def test_scan_always_ends_with_eof():
    tokens = scan('')
    assert len(tokens) == 1
    assert tokens[0].type == 'EOF'


def test_keywords_identifiers_and_literals():
    assert kinds('let x = 42') == [
        ('KEYWORD', 'let'), ('IDENT', 'x'), ('OP', '='), ('INT', '42'), ('EOF', ''),
    ]
    assert kinds('loop_count true') == [('IDENT', 'loop_count'), ('KEYWORD', 'true'), ('EOF', '')]


def test_two_character_operators_are_single_tokens():
    values = [t.value for t in scan('a == b != c <= d >= e && f || g |> h')]
    assert values == ['a', '==', 'b', '!=', 'c', '<=', 'd', '>=', 'e', '&&', 'f', '||', 'g', '|>', 'h', '']


def test_negative_numbers_are_unary_minus():
    assert kinds('-5') == [('OP', '-'), ('INT', '5'), ('EOF', '')]


def test_strings_are_taken_verbatim():
    tokens = scan('"a\\n b"')
    assert tokens[0].type == 'STRING'
    assert tokens[0].value == 'a\\n b'
    assert tokens[0].span.length == 7


def test_comments_and_whitespace_are_skipped():
    source = 'print(1) // trailing comment\n// whole line\n  print(2)'
    values = [t.value for t in scan(source)]
    assert values == ['print', '(', '1', ')', 'print', '(', '2', ')', '']


def test_spans_track_lines_and_columns():
    tokens = scan('let a = 1\n  a = 2')
    second_a = tokens[4]
    assert second_a.value == 'a'
    assert (second_a.span.offset, second_a.span.line, second_a.span.column) == (12, 2, 3)


def test_unterminated_string():
    with pytest.raises(LexError) as excinfo:
        scan('print("oops)')
    assert excinfo.value.kind is ErrorKind.UNTERMINATED_STRING
    assert excinfo.value.span.offset == 6


@pytest.mark.parametrize('source, char', [
    ('let a = 1 # 2', '#'), ('a & b', '&'), ('a | b', '|'), ('let caf\u00e9 = 1', '\u00e9'), ('x\u00b2', '\u00b2'),
])
def test_unexpected_character(source, char):
    with pytest.raises(LexError) as excinfo:
        scan(source)
    assert excinfo.value.kind is ErrorKind.UNEXPECTED_CHARACTER
    assert source[excinfo.value.span.offset] == char
    assert excinfo.value.diagnostic.category == 'LexError'


def test_identifiers_and_integers_are_ascii():
    assert kinds('_a1 b_2 007') == [('IDENT', '_a1'), ('IDENT', 'b_2'), ('INT', '007'), ('EOF', '')]
    with pytest.raises(LexError) as excinfo:
        scan('\u0663')
    assert excinfo.value.kind is ErrorKind.UNEXPECTED_CHARACTER
