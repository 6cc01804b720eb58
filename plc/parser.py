"""Recursive-descent parser for the PLC language.

Each grammar rule has its own `parse_*` method. Expressions are parsed by
a ladder of left-associative binary-operator loops, lowest precedence
first:

    logical         &&  ||
    comparison      <  <=  >  >=  ==  !=
    additive        +  -
    multiplicative  *  /
    secondary       receiver.field  receiver.method(args)
    primary         literals, (group), name, name(args)

Statement and primary dispatch is decided by looking at the next token
only, so the parser never backtracks. When a rule does not find the
token it needs it raises `ParseError` with the offset of the current
token (or the end of the input once the tokens run out).
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import List, Optional, Union

from .ast import (
    Source, Field, Method, Statement, Expression,
    ExprStmt, DeclStmt, AssignStmt, IfStmt, ForStmt, WhileStmt, ReturnStmt,
    Literal, Group, BinaryOp, Access, Call,
)
from .errors import ParseError
from .lexer import ESCAPES, Token, TokenType

Pattern = Union[TokenType, str]

_ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)


def unescape(text: str) -> str:
    """Decode the escape sequences the lexer accepted."""
    return _ESCAPE_RE.sub(lambda m: ESCAPES[m.group(1)], text)


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # Token stream helpers

    def has(self, offset: int = 0) -> bool:
        return self.pos + offset < len(self.tokens)

    def get(self, offset: int = 0) -> Token:
        return self.tokens[self.pos + offset]

    def peek(self, *patterns: Pattern) -> bool:
        """Check, without consuming, whether the next tokens match `patterns`.

        A `TokenType` pattern matches by category and a `str` pattern
        matches by exact token text.
        """
        for i, pattern in enumerate(patterns):
            if not self.has(i):
                return False
            token = self.get(i)
            if isinstance(pattern, TokenType):
                if token.type != pattern:
                    return False
            elif token.value != pattern:
                return False
        return True

    def match(self, *patterns: Pattern) -> bool:
        if self.peek(*patterns):
            self.pos += len(patterns)
            return True
        return False

    def current_offset(self) -> int:
        if self.has():
            return self.get().offset
        if self.tokens:
            last = self.tokens[-1]
            return last.offset + len(last.value)
        return 0

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.current_offset())

    def consume(self, pattern: Pattern, message: str) -> Token:
        if not self.peek(pattern):
            raise self.error(message)
        token = self.get()
        self.pos += 1
        return token

    def consume_identifier(self) -> str:
        return self.consume(TokenType.IDENTIFIER, 'expected identifier').value

    # Declarations

    def parse_source(self) -> Source:
        fields: List[Field] = []
        methods: List[Method] = []
        while self.peek('LET'):
            fields.append(self.parse_field())
        while self.peek('DEF'):
            methods.append(self.parse_method())
        if self.has():
            raise self.error("expected 'DEF' or end of input")
        return Source(tuple(fields), tuple(methods))

    def parse_field(self) -> Field:
        self.consume('LET', "expected 'LET'")
        is_constant = self.match('CONST')
        name = self.consume_identifier()
        initializer: Optional[Expression] = None
        if self.match('='):
            initializer = self.parse_expression()
        self.consume(';', "expected ';'")
        return Field(name, is_constant, initializer)

    def parse_method(self) -> Method:
        self.consume('DEF', "expected 'DEF'")
        name = self.consume_identifier()
        self.consume('(', "expected '('")
        parameters: List[str] = []
        if not self.peek(')'):
            parameters.append(self.consume_identifier())
            while self.match(','):
                parameters.append(self.consume_identifier())
        self.consume(')', "expected ')'")
        self.consume('DO', "expected 'DO'")
        statements = self.parse_block('END')
        self.consume('END', "expected 'END'")
        return Method(name, tuple(parameters), statements)

    def parse_block(self, *terminators: str) -> tuple:
        """Parse statements until one of `terminators` is next (not consumed)."""
        statements: List[Statement] = []
        while not any(self.peek(t) for t in terminators):
            statements.append(self.parse_statement())
        return tuple(statements)

    # Statements

    def parse_statement(self) -> Statement:
        if self.peek('LET'):
            return self.parse_declaration()
        if self.peek('IF'):
            return self.parse_if()
        if self.peek('FOR'):
            return self.parse_for()
        if self.peek('WHILE'):
            return self.parse_while()
        if self.peek('RETURN'):
            return self.parse_return()
        expression = self.parse_expression()
        if self.match('='):
            value = self.parse_expression()
            self.consume(';', "expected ';'")
            return AssignStmt(expression, value)
        self.consume(';', "expected ';'")
        return ExprStmt(expression)

    def parse_declaration(self) -> DeclStmt:
        self.consume('LET', "expected 'LET'")
        name = self.consume_identifier()
        initializer: Optional[Expression] = None
        if self.match('='):
            initializer = self.parse_expression()
        self.consume(';', "expected ';'")
        return DeclStmt(name, initializer)

    def parse_if(self) -> IfStmt:
        self.consume('IF', "expected 'IF'")
        condition = self.parse_expression()
        self.consume('DO', "expected 'DO'")
        then_statements = self.parse_block('ELSE', 'END')
        else_statements: tuple = ()
        if self.match('ELSE'):
            else_statements = self.parse_block('END')
        self.consume('END', "expected 'END'")
        return IfStmt(condition, then_statements, else_statements)

    def parse_for(self) -> ForStmt:
        self.consume('FOR', "expected 'FOR'")
        self.consume('(', "expected '('")
        initializer: Optional[DeclStmt] = None
        if not self.peek(';'):
            name = self.consume_identifier()
            self.consume('=', "expected '='")
            initializer = DeclStmt(name, self.parse_expression())
        self.consume(';', "expected ';'")
        condition = self.parse_expression()
        self.consume(';', "expected ';'")
        increment: Optional[AssignStmt] = None
        if not self.peek(')'):
            receiver = self.parse_expression()
            self.consume('=', "expected '='")
            increment = AssignStmt(receiver, self.parse_expression())
        self.consume(')', "expected ')'")
        statements = self.parse_block('END')
        self.consume('END', "expected 'END'")
        return ForStmt(initializer, condition, increment, statements)

    def parse_while(self) -> WhileStmt:
        self.consume('WHILE', "expected 'WHILE'")
        condition = self.parse_expression()
        self.consume('DO', "expected 'DO'")
        statements = self.parse_block('END')
        self.consume('END', "expected 'END'")
        return WhileStmt(condition, statements)

    def parse_return(self) -> ReturnStmt:
        self.consume('RETURN', "expected 'RETURN'")
        value = self.parse_expression()
        self.consume(';', "expected ';'")
        return ReturnStmt(value)

    # Expressions

    def parse_expression(self) -> Expression:
        return self.parse_logical()

    def parse_binary(self, operators: tuple, operand) -> Expression:
        node = operand()
        while True:
            for op in operators:
                if self.match(op):
                    node = BinaryOp(op, node, operand())
                    break
            else:
                return node

    def parse_logical(self) -> Expression:
        return self.parse_binary(('&&', '||'), self.parse_comparison)

    def parse_comparison(self) -> Expression:
        return self.parse_binary(('<', '<=', '>', '>=', '==', '!='), self.parse_additive)

    def parse_additive(self) -> Expression:
        return self.parse_binary(('+', '-'), self.parse_multiplicative)

    def parse_multiplicative(self) -> Expression:
        return self.parse_binary(('*', '/'), self.parse_secondary)

    def parse_secondary(self) -> Expression:
        node = self.parse_primary()
        while self.match('.'):
            name = self.consume_identifier()
            if self.match('('):
                node = Call(node, name, self.parse_arguments())
            else:
                node = Access(node, name)
        return node

    def parse_arguments(self) -> tuple:
        # opening '(' already consumed
        arguments: List[Expression] = []
        if not self.peek(')'):
            arguments.append(self.parse_expression())
            while self.match(','):
                arguments.append(self.parse_expression())
        self.consume(')', "expected ')'")
        return tuple(arguments)

    def parse_primary(self) -> Expression:
        if self.match('NIL'):
            return Literal(None, 'Nil')
        if self.match('TRUE'):
            return Literal(True, 'Boolean')
        if self.match('FALSE'):
            return Literal(False, 'Boolean')
        if self.peek(TokenType.INTEGER):
            token = self.consume(TokenType.INTEGER, 'expected integer')
            return Literal(int(token.value), 'Integer')
        if self.peek(TokenType.DECIMAL):
            token = self.consume(TokenType.DECIMAL, 'expected decimal')
            return Literal(Decimal(token.value), 'Decimal')
        if self.peek(TokenType.CHARACTER):
            token = self.consume(TokenType.CHARACTER, 'expected character')
            return Literal(unescape(token.value[1:-1]), 'Character')
        if self.peek(TokenType.STRING):
            token = self.consume(TokenType.STRING, 'expected string')
            return Literal(unescape(token.value[1:-1]), 'String')
        if self.match('('):
            expression = self.parse_expression()
            self.consume(')', "expected ')'")
            return Group(expression)
        if self.peek(TokenType.IDENTIFIER):
            name = self.consume_identifier()
            if self.match('('):
                return Call(None, name, self.parse_arguments())
            return Access(None, name)
        raise self.error('expected expression')


def parse(tokens: List[Token]) -> Source:
    """Parse a token list into a `Source` AST."""
    return Parser(tokens).parse_source()
