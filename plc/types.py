"""Runtime values for the PLC interpreter.

Every value the interpreter produces belongs to exactly one `Kind`:

    Nil        the `NIL` singleton
    Boolean    Python bool
    Integer    Python int (arbitrary precision)
    Decimal    decimal.Decimal (arbitrary precision)
    Character  `CharVal`
    String     Python str
    Function   any `CallableVal` (builtin or user-defined)
    Object     `ObjectVal`, whose fields and methods live in its own scope

`kind_of` recovers the tag of a value and `require` checks it, raising
`TypeMismatchError` on a mismatch. Operators never coerce between kinds.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List

from .environment import Environment
from .errors import ArityError, NoSuchFieldError, TypeMismatchError


class Kind(Enum):
    NIL = 'Nil'
    BOOLEAN = 'Boolean'
    INTEGER = 'Integer'
    DECIMAL = 'Decimal'
    CHARACTER = 'Character'
    STRING = 'String'
    FUNCTION = 'Function'
    OBJECT = 'Object'


class NilVal:
    """Marker object for the PLC `NIL` value."""
    def __eq__(self, other: Any) -> bool:
        return isinstance(other, NilVal)

    def __hash__(self) -> int:
        return hash(NilVal)

    def __repr__(self) -> str:
        return 'NIL'


NIL = NilVal()


@dataclass(frozen=True, order=True)
class CharVal:
    """A single character. Kept distinct from one-character strings."""
    value: str

    def __repr__(self) -> str:
        return f"CharVal({self.value!r})"


class CallableVal:
    """Something that can be invoked with a fixed number of arguments."""
    name: str
    arity: int

    def invoke(self, args: List[Any]) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<function {self.name}/{self.arity}>"


class ObjectVal:
    """A structured value. Fields are variables and methods are functions
    of the object's own scope; lookups never fall through to a parent."""
    def __init__(self, name: str, scope: Environment | None = None):
        self.name = name
        self.scope = scope if scope is not None else Environment()

    def get_field(self, name: str) -> Any:
        if name not in self.scope.variables:
            raise NoSuchFieldError(f'object {self.name} has no field {name}')
        return self.scope.variables[name].value

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.scope.variables:
            raise NoSuchFieldError(f'object {self.name} has no field {name}')
        # scope has no parent, so this rebinds exactly the field found above
        self.scope.assign_variable(name, value)

    def lookup_method(self, name: str, arity: int) -> CallableVal:
        key = (name, arity)
        if key in self.scope.functions:
            return self.scope.functions[key]
        arities = sorted(a for (n, a) in self.scope.functions if n == name)
        if arities:
            expected = ', '.join(str(a) for a in arities)
            raise ArityError(f'method {self.name}.{name} expects {expected} arguments, got {arity}')
        raise NoSuchFieldError(f'object {self.name} has no method {name}')

    def __repr__(self) -> str:
        return f"<object {self.name}>"


def kind_of(value: Any) -> Kind:
    """Return the runtime kind of a value."""
    if isinstance(value, NilVal):
        return Kind.NIL
    # bool is a subclass of int; check it first
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        return Kind.INTEGER
    if isinstance(value, Decimal):
        return Kind.DECIMAL
    if isinstance(value, CharVal):
        return Kind.CHARACTER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, CallableVal):
        return Kind.FUNCTION
    if isinstance(value, ObjectVal):
        return Kind.OBJECT
    raise TypeMismatchError(f'unsupported host value of type {type(value).__name__}')


def type_name(value: Any) -> str:
    return kind_of(value).value


def require(kind: Kind, value: Any, context: str = '') -> Any:
    """Return `value` if it has the given kind, otherwise raise TypeMismatchError."""
    actual = kind_of(value)
    if actual is not kind:
        where = f' in {context}' if context else ''
        raise TypeMismatchError(f'expected {kind.value}, received {actual.value}{where}')
    return value


def to_string(value: Any) -> str:
    """Display form used by `print` and the CLI."""
    kind = kind_of(value)
    if kind is Kind.NIL:
        return 'NIL'
    if kind is Kind.BOOLEAN:
        return 'TRUE' if value else 'FALSE'
    if kind is Kind.INTEGER:
        return str(value)
    if kind is Kind.DECIMAL:
        # plain notation, never scientific
        return format(value, 'f')
    if kind is Kind.CHARACTER:
        return value.value
    if kind is Kind.STRING:
        return value
    return repr(value)


def values_equal(a: Any, b: Any) -> bool:
    """Value equality. Values of different kinds are never equal."""
    kind = kind_of(a)
    if kind is not kind_of(b):
        return False
    if kind in (Kind.FUNCTION, Kind.OBJECT):
        return a is b
    if kind is Kind.DECIMAL:
        # scale counts: 1.0 and 1.00 differ
        return a == b and a.as_tuple().exponent == b.as_tuple().exponent
    return a == b
