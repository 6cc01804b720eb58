"""Tokenizer for the PLC language.

The lexer walks the source one character at a time. After skipping
whitespace it looks at the next character to decide which kind of token
starts there, then consumes that token completely or raises a
`LexError` pointing at the first character that cannot belong to it.

Token values are the raw source text. Quotes and escape sequences in
character and string literals are kept as written; the parser decodes
them. Every token records the offset of its first character in the
original source string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import LexError


class TokenType(Enum):
    IDENTIFIER = 'IDENTIFIER'
    INTEGER = 'INTEGER'
    DECIMAL = 'DECIMAL'
    CHARACTER = 'CHARACTER'
    STRING = 'STRING'
    OPERATOR = 'OPERATOR'


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    offset: int


# Characters allowed after a backslash, mapped to what they decode to.
ESCAPES = {
    'b': '\b',
    'n': '\n',
    'r': '\r',
    't': '\t',
    "'": "'",
    '"': '"',
    '\\': '\\',
}

TWO_CHAR_OPERATORS = {'!=', '==', '<=', '>=', '&&', '||'}

DIGITS = '0123456789'


def is_identifier_start(c: str) -> bool:
    return c.isascii() and (c.isalpha() or c == '_')


def is_identifier_part(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c in '_-')


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.length = len(source)
        self.index = 0

    def peek(self, offset: int = 0) -> str:
        """Return the character `offset` places ahead, or '' past the end."""
        i = self.index + offset
        if i < self.length:
            return self.source[i]
        return ''

    def at_digit(self, offset: int = 0) -> bool:
        c = self.peek(offset)
        return c != '' and c in DIGITS

    def emit(self, token_type: TokenType, start: int) -> Token:
        return Token(token_type, self.source[start:self.index], start)

    def skip_whitespace(self) -> None:
        while self.index < self.length and self.source[self.index].isspace():
            self.index += 1

    def lex(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            self.skip_whitespace()
            if self.index >= self.length:
                break
            tokens.append(self.lex_token())
        return tokens

    def lex_token(self) -> Token:
        """Lex exactly one token starting at the current index."""
        c = self.peek()
        if is_identifier_start(c):
            return self.lex_identifier()
        if self.at_digit() or (c in ('+', '-') and self.at_digit(1)):
            return self.lex_number()
        if c == "'":
            return self.lex_character()
        if c == '"':
            return self.lex_string()
        return self.lex_operator()

    def lex_identifier(self) -> Token:
        start = self.index
        if not is_identifier_start(self.peek()):
            raise LexError('invalid identifier start', self.index)
        self.index += 1
        while self.index < self.length and is_identifier_part(self.source[self.index]):
            self.index += 1
        return self.emit(TokenType.IDENTIFIER, start)

    def lex_number(self) -> Token:
        start = self.index
        signed = self.peek() in ('+', '-')
        if signed:
            self.index += 1
        if not self.at_digit():
            raise LexError('expected digit', self.index)
        digits_start = self.index
        while self.at_digit():
            self.index += 1
        integer_part = self.source[digits_start:self.index]

        if self.peek() == '.':
            if not self.at_digit(1):
                raise LexError('expected digit after decimal point', self.index + 1)
            self.index += 1
            while self.at_digit():
                self.index += 1
            return self.emit(TokenType.DECIMAL, start)

        if len(integer_part) > 1 and integer_part[0] == '0':
            raise LexError('leading zero in integer literal', digits_start + 1)
        if signed and integer_part == '0':
            raise LexError('signed zero integer literal', self.index)
        return self.emit(TokenType.INTEGER, start)

    def lex_character(self) -> Token:
        start = self.index
        self.index += 1
        c = self.peek()
        if c == '':
            raise LexError('unterminated character literal', self.index)
        if c == '\\':
            self.lex_escape()
        elif c == "'":
            raise LexError('empty character literal', self.index)
        else:
            self.index += 1
        if self.peek() != "'":
            raise LexError('unterminated character literal', self.index)
        self.index += 1
        return self.emit(TokenType.CHARACTER, start)

    def lex_string(self) -> Token:
        start = self.index
        self.index += 1
        while True:
            c = self.peek()
            if c == '':
                raise LexError('unterminated string literal', self.length)
            if c == '"':
                self.index += 1
                return self.emit(TokenType.STRING, start)
            if c == '\\':
                self.lex_escape()
            else:
                self.index += 1

    def lex_escape(self) -> None:
        # current character is the backslash
        self.index += 1
        c = self.peek()
        if c == '' or c not in ESCAPES:
            raise LexError('invalid escape sequence', self.index)
        self.index += 1

    def lex_operator(self) -> Token:
        start = self.index
        if self.source[start:start + 2] in TWO_CHAR_OPERATORS:
            self.index += 2
        elif self.peek() != '' and not self.peek().isspace():
            self.index += 1
        else:
            raise LexError('invalid operator', self.index)
        return self.emit(TokenType.OPERATOR, start)


def lex(source: str) -> List[Token]:
    """Convert source text into a list of tokens."""
    return Lexer(source).lex()
