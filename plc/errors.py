from typing import Any


class PlcError(Exception):
    """Base class for every error raised by the lexer, parser or interpreter."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LexError(PlcError):
    """Malformed token, unterminated literal or invalid escape."""
    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.message = message
        self.offset = offset


class ParseError(PlcError):
    """Unexpected or missing token. `offset` points at the offending token."""
    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.message = message
        self.offset = offset


class PlcRuntimeError(PlcError):
    """Base class for errors raised while evaluating a program."""


class UnboundNameError(PlcRuntimeError):
    pass


class ArityError(PlcRuntimeError):
    pass


class TypeMismatchError(PlcRuntimeError):
    pass


class NoSuchFieldError(PlcRuntimeError):
    pass


class ConstantReassignmentError(PlcRuntimeError):
    pass


class DivisionByZeroError(PlcRuntimeError):
    pass


class RedefinitionError(PlcRuntimeError):
    """A name (or name/arity pair) is already bound in the same scope."""


class InvalidAssignmentError(PlcRuntimeError):
    """The left side of an assignment is not an access expression."""


class CallDepthError(PlcRuntimeError):
    """Calls nested deeper than the host stack allows."""


class ReturnSignal:
    """Result of executing a RETURN statement.

    Statement execution hands this back up to the nearest function call
    instead of raising, so it never mixes with real errors.
    """
    __slots__ = ('value',)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"
