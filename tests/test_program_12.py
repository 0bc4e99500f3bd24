import builtins
from pathlib import Path
from dom.interpreter import run_program


def test_program_12(monkeypatch, capsys):
    path = Path(__file__).parent.parent / 'examples' / 'program_12.dom'
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    monkeypatch.setattr(builtins, 'input', lambda *args: 'Ada')
    run_program(source)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['What is your name?', 'Hello, Ada!', '3']
