from pathlib import Path
from dom.interpreter import run_program


def test_program_16(capsys):
    path = Path(__file__).parent.parent / 'examples' / 'program_16.dom'
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    run_program(source)
    out = capsys.readouterr().out.strip().splitlines()
    assert out == ['12', '-1']
