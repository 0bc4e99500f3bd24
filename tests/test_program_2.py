from pathlib import Path
from dom.interpreter import run_program


def test_program_2(capsys):
    path = Path(__file__).parent.parent / 'examples' / 'program_2.dom'
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    run_program(source)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['2', '7', '3', '-3', 'true']
