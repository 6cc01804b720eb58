from pathlib import Path

from plc.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_early_return_and_short_circuit(capsys):
    with open(EXAMPLES / 'program_7.plc', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    # "evaluated" only appears when the right operand is needed
    assert out_lines == [
        '8',
        'FALSE',
        'TRUE',
        'evaluated',
        'FALSE',
        'TRUE',
        'TRUE',
        'FALSE',
        'NIL',
    ]
