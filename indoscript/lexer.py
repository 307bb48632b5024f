"""Scanner for IndoScript source text.

Terminals are declared in a tiny lark grammar and tokenized with
``Lark.lex``. Scanning never stops on bad input: each problem is written
to the error sink as ``[line N] message`` and the scanner resumes after
the offending character (or, for an unterminated string, at the end of
the line), so the parser always receives a token list ending in ``EOF``.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .tokens import Token, TokenType


INDOSCRIPT_TERMINALS = r"""
    start: _token*
    _token: LET | IF | ELSE | FUNCTION | RETURN | NIL | TRUE | FALSE
          | LOOP | PRINT | AND | OR
          | LEFT_PAREN | RIGHT_PAREN | LEFT_BRACE | RIGHT_BRACE
          | COMMA | DOT | SEMICOLON
          | PLUS | MINUS | STAR | SLASH
          | EQUAL | EQUAL_EQUAL | BANG | BANG_EQUAL
          | GREATER | GREATER_EQUAL | LESS | LESS_EQUAL
          | IDENTIFIER | STRING | NUMBER

    LET: "misal"
    IF: "jika"
    ELSE: "lain"
    FUNCTION: "fungsi"
    RETURN: "balikin"
    NIL: "kosong"
    TRUE: "benar"
    FALSE: "salah"
    LOOP: "selama"
    PRINT: "cetak"
    AND: "dan"
    OR: "atau"

    LEFT_PAREN: "("
    RIGHT_PAREN: ")"
    LEFT_BRACE: "{"
    RIGHT_BRACE: "}"
    COMMA: ","
    DOT: "."
    SEMICOLON: ";"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    EQUAL: "="
    EQUAL_EQUAL: "=="
    BANG: "!"
    BANG_EQUAL: "!="
    GREATER: ">"
    GREATER_EQUAL: ">="
    LESS: "<"
    LESS_EQUAL: "<="

    IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
    STRING: /"[^"\n]*"/
    NUMBER: /[0-9]+(\.[0-9]+)?/

    WS: /[ \t\r\n]+/
    LINE_COMMENT: /\/\/[^\n]*/
    %ignore WS
    %ignore LINE_COMMENT
"""


INDOSCRIPT_LEXER = Lark(
    INDOSCRIPT_TERMINALS,
    parser='lalr',
    lexer='basic',
)


class Scanner:
    """Turns source text into a list of tokens."""

    def __init__(self, source: str, stderr: Optional[TextIO] = None):
        self.source = source
        self.stderr = stderr if stderr is not None else sys.stderr
        self.tokens: List[Token] = []
        self.had_error = False

    def scan_tokens(self) -> List[Token]:
        pos = 0
        length = len(self.source)
        while pos <= length:
            base_line = 1 + self.source.count('\n', 0, pos)
            try:
                for tok in INDOSCRIPT_LEXER.lex(self.source[pos:]):
                    self.add_token(tok.type, str(tok), tok.line + base_line - 1)
                break
            except UnexpectedCharacters as e:
                bad = pos + e.pos_in_stream
                line = base_line + e.line - 1
                if self.source[bad] == '"':
                    self.error(line, 'unterminated string')
                    newline = self.source.find('\n', bad)
                    pos = length if newline == -1 else newline
                else:
                    self.error(line, f'found unexpected character "{self.source[bad]}"')
                    pos = bad + 1
        self.tokens.append(Token(TokenType.EOF, '', None, 1 + self.source.count('\n')))
        return self.tokens

    def add_token(self, type_name: str, lexeme: str, line: int):
        token_type = TokenType[type_name]
        literal = None
        if token_type is TokenType.NUMBER:
            literal = float(lexeme)
        elif token_type is TokenType.STRING:
            literal = lexeme[1:-1]
        self.tokens.append(Token(token_type, lexeme, literal, line))

    def error(self, line: int, message: str):
        self.had_error = True
        self.stderr.write(f"[line {line}] {message}\n")


def scan(source: str, stderr: Optional[TextIO] = None) -> List[Token]:
    """Convenience wrapper returning the token list for ``source``."""
    return Scanner(source, stderr).scan_tokens()
