# PLC language package
# This package provides the lexer, parser and tree-walking interpreter for the PLC language.
from .errors import PlcError, LexError, ParseError, PlcRuntimeError
from .lexer import lex, Token, TokenType
from .parser import parse
from .interpreter import parse_program, interpret, run_program, run_file, Interpreter

__all__ = [
    'lex',
    'parse',
    'parse_program',
    'interpret',
    'run_program',
    'run_file',
    'Interpreter',
    'Token',
    'TokenType',
    'PlcError',
    'LexError',
    'ParseError',
    'PlcRuntimeError',
]
