"""Abstract Syntax Tree (AST) definitions for the PLC language.

Every node is a frozen dataclass and child sequences are tuples, so a
tree is never modified once the parser has built it. Statements and
expressions each form a closed set of variants; the interpreter
dispatches over `STATEMENT_TYPES` and `EXPRESSION_TYPES`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Expression(Node):
    pass


@dataclass(frozen=True)
class Source(Node):
    fields: Tuple['Field', ...]
    methods: Tuple['Method', ...]


@dataclass(frozen=True)
class Field(Node):
    name: str
    is_constant: bool
    initializer: Optional[Expression]


@dataclass(frozen=True)
class Method(Node):
    name: str
    parameters: Tuple[str, ...]
    statements: Tuple[Statement, ...]


# Statements

@dataclass(frozen=True)
class ExprStmt(Statement):
    expression: Expression


@dataclass(frozen=True)
class DeclStmt(Statement):
    name: str
    initializer: Optional[Expression]


@dataclass(frozen=True)
class AssignStmt(Statement):
    receiver: Expression  # only an Access is valid, checked at evaluation time
    value: Expression


@dataclass(frozen=True)
class IfStmt(Statement):
    condition: Expression
    then_statements: Tuple[Statement, ...]
    else_statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class ForStmt(Statement):
    initializer: Optional[DeclStmt]
    condition: Expression
    increment: Optional[AssignStmt]
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class WhileStmt(Statement):
    condition: Expression
    statements: Tuple[Statement, ...]


@dataclass(frozen=True)
class ReturnStmt(Statement):
    value: Expression


# Expressions

@dataclass(frozen=True)
class Literal(Expression):
    value: Any
    literal_type: str  # 'Nil', 'Boolean', 'Integer', 'Decimal', 'Character', 'String'


@dataclass(frozen=True)
class Group(Expression):
    expression: Expression


@dataclass(frozen=True)
class BinaryOp(Expression):
    operator: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class Access(Expression):
    receiver: Optional[Expression]
    name: str


@dataclass(frozen=True)
class Call(Expression):
    receiver: Optional[Expression]
    name: str
    arguments: Tuple[Expression, ...]


STATEMENT_TYPES = (ExprStmt, DeclStmt, AssignStmt, IfStmt, ForStmt, WhileStmt, ReturnStmt)
EXPRESSION_TYPES = (Literal, Group, BinaryOp, Access, Call)
