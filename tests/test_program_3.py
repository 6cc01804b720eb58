from pathlib import Path

from plc.interpreter import parse_program, Interpreter
from plc.types import NIL

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_recursive_factorial(capsys):
    with open(EXAMPLES / 'program_3.plc', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    result = interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['120', '265252859812191058636308480000000']
    # main has no RETURN
    assert result is NIL
