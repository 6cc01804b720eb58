import pytest

from plc.builtin_function import BuiltinFunction
from plc.environment import Environment, Variable
from plc.errors import (
    ArityError, ConstantReassignmentError, RedefinitionError, UnboundNameError,
)
from plc.std import populate_standard_environment
from plc.types import NIL


def test_define_and_lookup_variable():
    env = Environment()
    env.define_variable('x', False, 1)
    assert env.lookup_variable('x') == Variable('x', False, 1)


def test_lookup_walks_parent_chain():
    root = Environment()
    root.define_variable('x', False, 1)
    child = Environment(Environment(root))
    assert child.lookup_variable('x').value == 1


def test_shadowing_leaves_parent_untouched():
    parent = Environment()
    parent.define_variable('x', False, 1)
    child = Environment(parent)
    child.define_variable('x', False, 2)
    assert child.lookup_variable('x').value == 2
    assert parent.lookup_variable('x').value == 1


def test_redefinition_in_same_scope():
    env = Environment()
    env.define_variable('x', False, 1)
    with pytest.raises(RedefinitionError):
        env.define_variable('x', True, 2)


def test_assign_rebinds_nearest():
    parent = Environment()
    parent.define_variable('x', False, 1)
    child = Environment(parent)
    child.assign_variable('x', 5)
    assert parent.lookup_variable('x').value == 5
    assert 'x' not in child.variables


def test_assign_constant_and_unbound():
    env = Environment()
    env.define_variable('pi', True, 3)
    with pytest.raises(ConstantReassignmentError):
        env.assign_variable('pi', 4)
    with pytest.raises(UnboundNameError):
        env.assign_variable('missing', 1)
    with pytest.raises(UnboundNameError):
        env.lookup_variable('missing')


def test_functions_are_keyed_by_arity():
    env = Environment()
    one = BuiltinFunction('f', 1, lambda args: args[0])
    two = BuiltinFunction('f', 2, lambda args: args[1])
    env.define_function('f', 1, one)
    env.define_function('f', 2, two)
    child = Environment(env)
    assert child.lookup_function('f', 1) is one
    assert child.lookup_function('f', 2).invoke([1, 2]) == 2
    assert child.function_arities('f') == [1, 2]
    with pytest.raises(RedefinitionError):
        env.define_function('f', 1, one)


def test_function_lookup_errors():
    env = Environment(populate_standard_environment())
    with pytest.raises(ArityError):
        env.lookup_function('print', 0)
    with pytest.raises(UnboundNameError):
        env.lookup_function('nothing', 0)


def test_variables_and_functions_are_separate_namespaces():
    env = Environment()
    env.define_variable('f', False, 1)
    env.define_function('f', 0, BuiltinFunction('f', 0, lambda args: NIL))
    assert env.lookup_variable('f').value == 1
    assert env.lookup_function('f', 0).invoke([]) is NIL


def test_standard_print(capsys):
    std = populate_standard_environment()
    result = std.lookup_function('print', 1).invoke(['hi'])
    assert result is NIL
    assert capsys.readouterr().out == 'hi\n'
