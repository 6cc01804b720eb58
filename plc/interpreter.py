"""Tree-walking interpreter for the PLC language.

The interpreter evaluates a `Source` AST against a chain of
`Environment` scopes. `Interpreter.scope` is the current scope. Anything
that opens a new scope (a function call, a loop iteration) saves the
previous one and restores it in a `finally` block, so the pointer is
correct on every exit path, including errors.

Statement execution returns `None` when it finishes normally and a
`ReturnSignal` when a RETURN ran. The signal is passed up through
enclosing statement lists until `call_function` takes its value.

Program entry: all fields are declared, then all methods, then the
zero-argument function `main` is invoked and its value is the result
of the program.
"""

from __future__ import annotations

import sys
from decimal import Context, Decimal, MAX_EMAX, MAX_PREC, MIN_EMIN
from typing import Any, List, Optional, Sequence, Tuple

from .ast import (
    Source, Field, Method, Statement, Expression,
    ExprStmt, DeclStmt, AssignStmt, IfStmt, ForStmt, WhileStmt, ReturnStmt,
    Literal, Group, BinaryOp, Access, Call,
)
from .environment import Environment
from .errors import (
    ArityError, CallDepthError, DivisionByZeroError, InvalidAssignmentError, NoSuchFieldError,
    ReturnSignal, TypeMismatchError,
)
from .lexer import lex
from .parser import parse
from .std import populate_standard_environment
from .types import (
    NIL, CallableVal, CharVal, Kind, ObjectVal,
    kind_of, require, to_string, type_name, values_equal,
)

# Exact context for decimal + - *: precision never limits the result.
EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

COMPARABLE_KINDS = (Kind.INTEGER, Kind.DECIMAL, Kind.CHARACTER, Kind.STRING)
NUMERIC_KINDS = (Kind.INTEGER, Kind.DECIMAL)

# Python frames available while a program runs; each PLC call uses about ten.
RECURSION_LIMIT = 10000


class FunctionValue(CallableVal):
    """A user-defined PLC function closing over its defining scope."""
    def __init__(self, interpreter: 'Interpreter', method: Method, closure: Environment):
        self.interpreter = interpreter
        self.name = method.name
        self.parameters = method.parameters
        self.statements = method.statements
        self.arity = len(method.parameters)
        self.closure = closure

    def invoke(self, args: List[Any]) -> Any:
        return self.interpreter.call_function(self, args)


def _coefficient(d: Decimal) -> Tuple[int, int]:
    sign, digits, exponent = d.as_tuple()
    coefficient = int(''.join(map(str, digits)) or '0')
    return (-coefficient if sign else coefficient), exponent


def divide_decimal(a: Decimal, b: Decimal) -> Decimal:
    """Divide, rounding half-up to the scale of the dividend.

    Done in integer arithmetic so the quotient is rounded exactly once.
    """
    ca, ea = _coefficient(a)
    cb, eb = _coefficient(b)
    scale = max(-ea, 0)
    shift = ea + scale - eb
    numerator = ca * 10 ** shift if shift >= 0 else ca
    denominator = cb if shift >= 0 else cb * 10 ** -shift
    magnitude = (2 * abs(numerator) + abs(denominator)) // (2 * abs(denominator))
    negative = (numerator < 0) != (denominator < 0)
    return Decimal(-magnitude if negative else magnitude).scaleb(-scale, EXACT)


def divide_integer(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class Interpreter:
    """Core interpreter that executes a PLC AST."""
    def __init__(self, parent: Optional[Environment] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt'):
        if parent is None:
            parent = populate_standard_environment()
        self.globals = Environment(parent)
        self.scope = self.globals
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, source: Source) -> Any:
        previous_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(previous_limit, RECURSION_LIMIT))
        try:
            for field in source.fields:
                self.declare_field(field)
            for method in source.methods:
                self.declare_method(method)
            main = self.scope.lookup_function('main', 0)
            return main.invoke([])
        except RecursionError:
            raise CallDepthError('maximum call depth exceeded') from None
        finally:
            sys.setrecursionlimit(previous_limit)
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def declare_field(self, field: Field) -> None:
        value = self.evaluate(field.initializer) if field.initializer is not None else NIL
        self.scope.define_variable(field.name, field.is_constant, value)
        if self.debug_level >= 2:
            const = 'constant ' if field.is_constant else ''
            self.debug(f"declare {const}{field.name}: {type_name(value)} = {to_string(value)}")

    def declare_method(self, method: Method) -> None:
        function = FunctionValue(self, method, self.scope)
        self.scope.define_function(method.name, function.arity, function)
        if self.debug_level >= 2:
            self.debug(f"define function {method.name}/{function.arity}")

    def call_function(self, func: FunctionValue, args: List[Any]) -> Any:
        if len(args) != func.arity:
            raise ArityError(f"{func.name} expects {func.arity} arguments, got {len(args)}")
        if self.debug_level >= 1:
            self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")
        call_env = Environment(parent=func.closure)
        for name, arg in zip(func.parameters, args):
            call_env.define_variable(name, False, arg)
        result = self.execute_block(func.statements, call_env)
        value = result.value if isinstance(result, ReturnSignal) else NIL
        if self.debug_level >= 1:
            self.debug(f"return {func.name} -> {to_string(value)}")
        return value

    # Statements

    def execute_block(self, statements: Sequence[Statement], env: Environment) -> Optional[ReturnSignal]:
        """Run `statements` with `env` as the current scope, then restore it."""
        previous = self.scope
        self.scope = env
        try:
            return self.execute_statements(statements)
        finally:
            self.scope = previous

    def execute_statements(self, statements: Sequence[Statement]) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt)
            # propagate return signals
            if result is not None:
                return result
        return None

    def execute(self, node: Statement) -> Optional[ReturnSignal]:
        if isinstance(node, ExprStmt):
            self.evaluate(node.expression)
            return None
        if isinstance(node, DeclStmt):
            value = self.evaluate(node.initializer) if node.initializer is not None else NIL
            self.scope.define_variable(node.name, False, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name}: {type_name(value)} = {to_string(value)}")
            return None
        if isinstance(node, AssignStmt):
            self.assign(node.receiver, node.value)
            return None
        if isinstance(node, IfStmt):
            # branches share the current scope
            if self.evaluate_condition(node.condition, 'IF'):
                return self.execute_statements(node.then_statements)
            return self.execute_statements(node.else_statements)
        if isinstance(node, WhileStmt):
            while self.evaluate_condition(node.condition, 'WHILE'):
                res = self.execute_block(node.statements, Environment(parent=self.scope))
                if res is not None:
                    return res
            return None
        if isinstance(node, ForStmt):
            return self.execute_for(node)
        if isinstance(node, ReturnStmt):
            return ReturnSignal(self.evaluate(node.value))
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def execute_for(self, node: ForStmt) -> Optional[ReturnSignal]:
        # the loop scope holds the initializer binding; each iteration's body
        # gets a fresh child of it
        previous = self.scope
        self.scope = Environment(parent=previous)
        try:
            if node.initializer is not None:
                self.execute(node.initializer)
            while self.evaluate_condition(node.condition, 'FOR'):
                res = self.execute_block(node.statements, Environment(parent=self.scope))
                if res is not None:
                    return res
                if node.increment is not None:
                    self.execute(node.increment)
            return None
        finally:
            self.scope = previous

    def evaluate_condition(self, expr: Expression, context: str) -> bool:
        cond = require(Kind.BOOLEAN, self.evaluate(expr), f'{context} condition')
        if self.debug_level >= 3:
            self.debug(f"{context} condition -> {to_string(cond)}")
        return cond

    def assign(self, receiver: Expression, value_expr: Expression) -> None:
        if not isinstance(receiver, Access):
            raise InvalidAssignmentError('assignment target must be a variable or field')
        if receiver.receiver is None:
            value = self.evaluate(value_expr)
            self.scope.assign_variable(receiver.name, value)
            return
        target = self.evaluate(receiver.receiver)
        value = self.evaluate(value_expr)
        self.require_object(target, receiver.name).set_field(receiver.name, value)

    # Expressions

    def evaluate(self, node: Expression) -> Any:
        if isinstance(node, Literal):
            if node.literal_type == 'Nil':
                return NIL
            if node.literal_type == 'Character':
                return CharVal(node.value)
            return node.value
        if isinstance(node, Group):
            return self.evaluate(node.expression)
        if isinstance(node, Access):
            if node.receiver is not None:
                target = self.evaluate(node.receiver)
                return self.require_object(target, node.name).get_field(node.name)
            return self.scope.lookup_variable(node.name).value
        if isinstance(node, Call):
            target = self.evaluate(node.receiver) if node.receiver is not None else None
            args = [self.evaluate(arg) for arg in node.arguments]
            if node.receiver is not None:
                method = self.require_object(target, node.name).lookup_method(node.name, len(args))
                return method.invoke(args)
            function = self.scope.lookup_function(node.name, len(args))
            return function.invoke(args)
        if isinstance(node, BinaryOp):
            return self.evaluate_binary(node)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def require_object(self, value: Any, member: str) -> ObjectVal:
        if not isinstance(value, ObjectVal):
            raise NoSuchFieldError(f'cannot access {member} on {type_name(value)}')
        return value

    def evaluate_binary(self, node: BinaryOp) -> Any:
        op = node.operator
        left = self.evaluate(node.left)
        # Short-circuit for && and ||
        if op in ('&&', '||'):
            require(Kind.BOOLEAN, left, f'left operand of {op}')
            if (op == '&&' and not left) or (op == '||' and left):
                return left
            return require(Kind.BOOLEAN, self.evaluate(node.right), f'right operand of {op}')
        right = self.evaluate(node.right)
        return self.apply_binary_op(op, left, right)

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '==':
            return values_equal(a, b)
        if op == '!=':
            return not values_equal(a, b)
        kind = kind_of(a)
        if op in ('<', '<=', '>', '>='):
            if kind not in COMPARABLE_KINDS or kind_of(b) is not kind:
                raise TypeMismatchError(f'comparison not supported for {type_name(a)} and {type_name(b)}')
            if op == '<': return a < b
            if op == '<=': return a <= b
            if op == '>': return a > b
            return a >= b
        if op == '+' and kind is Kind.STRING and kind_of(b) is Kind.STRING:
            return a + b
        if op in ('+', '-', '*', '/'):
            if kind not in NUMERIC_KINDS or kind_of(b) is not kind:
                raise TypeMismatchError(f'unsupported {op} for {type_name(a)} and {type_name(b)}')
            if kind is Kind.INTEGER:
                if op == '+': return a + b
                if op == '-': return a - b
                if op == '*': return a * b
                if b == 0:
                    raise DivisionByZeroError('division by zero')
                return divide_integer(a, b)
            if op == '+': return EXACT.add(a, b)
            if op == '-': return EXACT.subtract(a, b)
            if op == '*': return EXACT.multiply(a, b)
            if b.is_zero():
                raise DivisionByZeroError('division by zero')
            return divide_decimal(a, b)
        raise TypeMismatchError(f'unknown operator {op}')


def parse_program(source: str) -> Source:
    """Lex and parse source text into a `Source` AST."""
    return parse(lex(source))


def interpret(source: Source, builtin_scope: Optional[Environment] = None) -> Any:
    """Interpret a parsed program and return the value of `main()`."""
    return Interpreter(builtin_scope).run(source)


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a PLC program from source text."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(ast_program)


def run_file(file_path: str, debug_level: int = 0) -> Any:
    """Parse and run a PLC file, returning the value of `main()`."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
