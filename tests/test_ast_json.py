import json
from decimal import Decimal
from pathlib import Path

import pytest

from plc.ast import Literal
from plc.ast_json import ast_from_obj, ast_to_obj
from plc.interpreter import Interpreter, parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


@pytest.mark.parametrize('program', ['program_5.plc', 'program_7.plc', 'program_8.plc'])
def test_example_survives_json(program):
    with open(EXAMPLES / program, 'r', encoding='utf-8') as f:
        ast = parse_program(f.read())
    text = json.dumps(ast_to_obj(ast))
    assert ast_from_obj(json.loads(text)) == ast


def test_decimal_payload_is_a_string():
    obj = ast_to_obj(Literal(Decimal('0.10'), 'Decimal'))
    assert obj == {'type': 'Literal', 'literal_type': 'Decimal', 'value': '0.10'}
    assert ast_from_obj(obj).value == Decimal('0.10')


def test_restored_ast_runs(capsys):
    with open(EXAMPLES / 'program_4.plc', 'r', encoding='utf-8') as f:
        ast = parse_program(f.read())
    restored = ast_from_obj(json.loads(json.dumps(ast_to_obj(ast))))
    Interpreter().run(restored)
    assert capsys.readouterr().out.split() == ['1', '4', '9', '16', '25']


def test_invalid_objects():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'Lambda'})
    with pytest.raises(TypeError):
        ast_from_obj(['Source'])
    with pytest.raises(TypeError):
        ast_to_obj(object())
