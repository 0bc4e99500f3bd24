from pathlib import Path
from dom.interpreter import run_program


def test_program_6(capsys):
    path = Path(__file__).parent.parent / 'examples' / 'program_6.dom'
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    run_program(source)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['1:1', '1:2', '2:1', '2:2', 'done']
