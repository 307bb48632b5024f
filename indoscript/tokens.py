"""Token definitions for IndoScript.

A token is the smallest unit the parser works with. The scanner produces
an ordered list of them, always terminated by an ``EOF`` token.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

class TokenType(Enum):
    # Keywords
    LET = 'misal'
    IF = 'jika'
    ELSE = 'lain'
    FUNCTION = 'fungsi'
    RETURN = 'balikin'
    NIL = 'kosong'
    TRUE = 'benar'
    FALSE = 'salah'
    LOOP = 'selama'
    PRINT = 'cetak'
    AND = 'dan'
    OR = 'atau'

    # Punctuation
    LEFT_PAREN = '('
    RIGHT_PAREN = ')'
    LEFT_BRACE = '{'
    RIGHT_BRACE = '}'
    COMMA = ','
    DOT = '.'
    SEMICOLON = ';'

    # Operators
    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    EQUAL = '='
    EQUAL_EQUAL = '=='
    BANG = '!'
    BANG_EQUAL = '!='
    GREATER = '>'
    GREATER_EQUAL = '>='
    LESS = '<'
    LESS_EQUAL = '<='

    # Literals
    IDENTIFIER = 'IDENTIFIER'
    STRING = 'STRING'
    NUMBER = 'NUMBER'

    EOF = 'EOF'


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: Any
    line: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, line={self.line})"
