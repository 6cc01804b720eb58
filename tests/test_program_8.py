from pathlib import Path

from plc.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_8_fibonacci(capsys):
    with open(EXAMPLES / 'program_8.plc', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    result = interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out.split('\n') == ['0', '1', '1', '2', '3', '5', '8', '13', '21', '34']
    assert result == 2880067194370816120
