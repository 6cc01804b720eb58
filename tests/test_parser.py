from decimal import Decimal

import pytest

from plc.ast import (
    Source, Field, Method,
    ExprStmt, DeclStmt, AssignStmt, IfStmt, ForStmt, WhileStmt, ReturnStmt,
    Literal, Group, BinaryOp, Access, Call,
)
from plc.errors import ParseError
from plc.lexer import lex
from plc.parser import Parser, parse, unescape


def parse_source(text):
    return parse(lex(text))


def parse_statement(text):
    return Parser(lex(text)).parse_statement()


def parse_expression(text):
    return Parser(lex(text)).parse_expression()


def name(n):
    return Access(None, n)


def integer(n):
    return Literal(n, 'Integer')


def test_field():
    assert parse_source('LET x = 5;') == Source(
        (Field('x', False, Literal(5, 'Integer')),),
        (),
    )


def test_constant_field_without_initializer():
    assert parse_source('LET CONST name;') == Source((Field('name', True, None),), ())


def test_methods_follow_fields():
    source = parse_source('LET a = 1; LET b; DEF main() DO RETURN a; END DEF add(x, y) DO END')
    assert [f.name for f in source.fields] == ['a', 'b']
    assert source.methods == (
        Method('main', (), (ReturnStmt(name('a')),)),
        Method('add', ('x', 'y'), ()),
    )


def test_empty_source():
    assert parse_source('') == Source((), ())


def test_field_after_method_is_rejected():
    with pytest.raises(ParseError) as excinfo:
        parse_source('DEF f() DO END LET x;')
    assert excinfo.value.offset == 15


@pytest.mark.parametrize('text, expected', [
    ('f();', ExprStmt(Call(None, 'f', ()))),
    ('LET y;', DeclStmt('y', None)),
    ('LET y = TRUE;', DeclStmt('y', Literal(True, 'Boolean'))),
    ('x = 1;', AssignStmt(name('x'), integer(1))),
    ('obj.field = NIL;', AssignStmt(Access(name('obj'), 'field'), Literal(None, 'Nil'))),
    ('RETURN x;', ReturnStmt(name('x'))),
])
def test_simple_statements(text, expected):
    assert parse_statement(text) == expected


def test_assignment_target_is_any_expression():
    assert parse_statement('1 + 2 = 3;') == AssignStmt(
        BinaryOp('+', integer(1), integer(2)),
        integer(3),
    )


def test_if_else():
    stmt = parse_statement('IF x DO f(); ELSE RETURN 1; END')
    assert stmt == IfStmt(
        name('x'),
        (ExprStmt(Call(None, 'f', ())),),
        (ReturnStmt(integer(1)),),
    )


def test_if_without_else():
    assert parse_statement('IF x DO END') == IfStmt(name('x'), (), ())


def test_while():
    assert parse_statement('WHILE i < 3 DO i = i + 1; END') == WhileStmt(
        BinaryOp('<', name('i'), integer(3)),
        (AssignStmt(name('i'), BinaryOp('+', name('i'), integer(1))),),
    )


def test_for():
    stmt = parse_statement('FOR (i = 0; i < 3; i = i + 1) print(i); END')
    assert stmt == ForStmt(
        DeclStmt('i', integer(0)),
        BinaryOp('<', name('i'), integer(3)),
        AssignStmt(name('i'), BinaryOp('+', name('i'), integer(1))),
        (ExprStmt(Call(None, 'print', (name('i'),))),),
    )


def test_for_with_empty_clauses():
    assert parse_statement('FOR (; running; ) END') == ForStmt(None, name('running'), None, ())


@pytest.mark.parametrize('text, expected', [
    ('NIL', Literal(None, 'Nil')),
    ('FALSE', Literal(False, 'Boolean')),
    ('-12', integer(-12)),
    ('1.50', Literal(Decimal('1.50'), 'Decimal')),
    ("'\\n'", Literal('\n', 'Character')),
    ("'c'", Literal('c', 'Character')),
    ('"a\\tb"', Literal('a\tb', 'String')),
    ('""', Literal('', 'String')),
])
def test_literals(text, expected):
    assert parse_expression(text) == expected


def test_precedence():
    assert parse_expression('1 + 2 * 3') == BinaryOp(
        '+', integer(1), BinaryOp('*', integer(2), integer(3)),
    )
    assert parse_expression('a < b && c') == BinaryOp(
        '&&', BinaryOp('<', name('a'), name('b')), name('c'),
    )


def test_left_associative():
    assert parse_expression('1 - 2 - 3') == BinaryOp(
        '-', BinaryOp('-', integer(1), integer(2)), integer(3),
    )
    assert parse_expression('a || b && c') == BinaryOp(
        '&&', BinaryOp('||', name('a'), name('b')), name('c'),
    )


def test_group():
    assert parse_expression('(1 + 2) * 3') == BinaryOp(
        '*', Group(BinaryOp('+', integer(1), integer(2))), integer(3),
    )


def test_member_chains():
    assert parse_expression('a.b.c') == Access(Access(name('a'), 'b'), 'c')
    assert parse_expression('obj.method(1, x)') == Call(name('obj'), 'method', (integer(1), name('x')))
    assert parse_expression('f().g()') == Call(Call(None, 'f', ()), 'g', ())


@pytest.mark.parametrize('text, offset', [
    ('LET x = 5', 9),
    ('LET = 5;', 4),
    # DO is read as a parameter name, so the missing ')' is reported at END
    ('DEF main( DO END', 13),
    ('DEF main() RETURN 1; END', 11),
    ('DEF main() DO RETURN; END', 20),
    ('DEF main() DO f(1, 2; END', 20),
    ('DEF main() DO IF x DO', 21),
    ('DEF main() DO x = ; END', 18),
])
def test_error_offsets(text, offset):
    with pytest.raises(ParseError) as excinfo:
        parse_source(text)
    assert excinfo.value.offset == offset


def test_unescape():
    assert unescape('a\\nb\\\\c\\"') == 'a\nb\\c"'
    assert unescape('\\\\n') == '\\n'
