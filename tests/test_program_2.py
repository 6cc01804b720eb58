from pathlib import Path

from plc.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_while_sum(capsys):
    with open(EXAMPLES / 'program_2.plc', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    result = interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == '55'
    assert result == 55
    # the global was updated through the loop body's child scopes
    assert interp.globals.lookup_variable('total').value == 55
