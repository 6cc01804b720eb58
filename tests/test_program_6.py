from pathlib import Path

from plc.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_scoping(capsys):
    """Globals are shared with every function, IF runs in the enclosing
    scope, and a WHILE body may shadow an outer name without touching it."""
    with open(EXAMPLES / 'program_6.plc', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    result = interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['outer inner', '0', '10', '20', 'outer']
    assert result == 3
