import builtins
import json

import pytest
from dom.__main__ import main


def feed(monkeypatch, lines):
    pending = list(lines)

    def fake_input(prompt=''):
        if not pending:
            raise EOFError
        return pending.pop(0)
    monkeypatch.setattr(builtins, 'input', fake_input)


def write(tmp_path, source, name='program.dom'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_file_mode_prints_output(tmp_path, capsys):
    path = write(tmp_path, 'print("hi")\nprint(1 + 1)')
    main([str(path)])
    captured = capsys.readouterr()
    assert captured.out == 'hi\n2\n'
    assert captured.err == ''


def test_file_mode_exits_nonzero_on_diagnostic(tmp_path, capsys):
    path = write(tmp_path, 'print("before")\nprint(get([], 0))')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'before\n'
    assert captured.err.startswith('error[IndexOutOfBounds]')


def test_file_mode_parse_error(tmp_path, capsys):
    path = write(tmp_path, 'print("x"')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'UnexpectedEOF' in captured.err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.dom')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_file_mode_reads_stdin(tmp_path, monkeypatch, capsys):
    feed(monkeypatch, ['world'])
    path = write(tmp_path, 'print("hello ", input())')
    main([str(path)])
    assert capsys.readouterr().out == 'hello world\n'


def test_interactive_session(monkeypatch, capsys):
    feed(monkeypatch, ['let x = 2', 'x * 21', 'print("hi")', '1 / 0', '', 'x'])
    main([])
    captured = capsys.readouterr()
    assert captured.out.strip().splitlines() == ['42', 'hi', '2']
    assert captured.err.strip() == 'error[DivisionByZero]: division by zero (line 1, column 1)'


def test_emit_ast_then_execute(tmp_path, capsys):
    path = write(tmp_path, 'let xs = [1, 2]\nprint(xs |> push(3))')
    main(['--emit-ast', str(path)])
    out_path = capsys.readouterr().out.strip()
    assert out_path.endswith('program.dom.ast.json')
    with open(out_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    assert data['type'] == 'Program'
    assert data['statements'][0]['span']['line'] == 1
    main(['--ast', out_path])
    assert capsys.readouterr().out == '[1, 2, 3]\n'


def test_stored_ast_runtime_error(tmp_path, capsys):
    path = write(tmp_path, '\nprint(1 / 0)')
    main(['--emit-ast', str(path)])
    out_path = capsys.readouterr().out.strip()
    with pytest.raises(SystemExit) as excinfo:
        main(['--ast', out_path])
    assert excinfo.value.code == 1
    assert '(line 2, column 7)' in capsys.readouterr().err


def test_dump_ast(tmp_path, capsys):
    path = write(tmp_path, 'print(-1)')
    main(['--dump-ast', str(path)])
    obj = json.loads(capsys.readouterr().out)
    assert obj['statements'][0]['expr']['args'][0] == {
        'type': 'Unary', 'op': '-', 'operand': {'type': 'IntLit', 'value': 1},
    }
