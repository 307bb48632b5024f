"""Recursive-descent parser for IndoScript.

Grammar, lowest precedence first::

    program      -> declaration* EOF
    declaration  -> funcDecl | varDecl | assignment | statement
    funcDecl     -> "fungsi" IDENT "(" parameters? ")" "{" declaration* "}"
    varDecl      -> "misal" IDENT "=" expression ";"
    assignment   -> IDENT "=" expression ";"
    statement    -> exprStmt | printStmt | block | ifStmt | whileStmt | returnStmt
    ifStmt       -> "jika" expression block ( "lain" ( ifStmt | block ) )?
    whileStmt    -> "selama" expression block
    returnStmt   -> "balikin" expression? ";"
    printStmt    -> "cetak" expression ";"
    exprStmt     -> expression ";"
    expression   -> logic_or
    logic_or     -> logic_and ( "atau" logic_and )*
    logic_and    -> equality ( "dan" equality )*
    equality     -> comparison ( ( "!=" | "==" ) comparison )*
    comparison   -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term         -> factor ( ( "-" | "+" ) factor )*
    factor       -> unary ( ( "/" | "*" ) unary )*
    unary        -> ( "!" | "-" ) unary | call
    call         -> primary ( "(" arguments? ")" )*
    primary      -> "benar" | "salah" | "kosong" | NUMBER | STRING
                  | "(" expression ")" | IDENT

Errors use panic mode: the failing rule raises :class:`ParseError`,
``declaration`` catches it, skips to the next statement boundary and
carries on, so a single pass can report several problems.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO, Tuple

from .ast import (
    Expr, Stmt, Binary, Logical, Unary, Primary, Group, Variable, Call,
    ExpressionStmt, Print, VarDeclaration, Assign, Block, If, While,
    FunctionDeclaration, Return,
)
from .errors import ParseError
from .tokens import Token, TokenType
from .types import NIL


MAX_ARGUMENTS = 255

# Tokens that start a new statement; synchronization stops in front of them.
STATEMENT_STARTERS = frozenset({
    TokenType.FUNCTION, TokenType.LET, TokenType.LOOP, TokenType.IF,
    TokenType.PRINT, TokenType.RETURN,
})


class Parser:
    def __init__(self, tokens: List[Token], stderr: Optional[TextIO] = None):
        if not tokens or tokens[-1].type is not TokenType.EOF:
            raise ValueError("token stream must end with an EOF token")
        self.tokens = tokens
        self.pos = 0
        self.stderr = stderr if stderr is not None else sys.stderr
        self.had_error = False

    def parse(self) -> Tuple[List[Stmt], bool]:
        """Parse the whole token stream.

        Returns the statements that parsed cleanly and whether any error
        was reported. Callers must not execute the result when the flag
        is set.
        """
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements, self.had_error

    # Declarations and statements

    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.FUNCTION):
                return self.function_declaration()
            if self.match(TokenType.LET):
                return self.var_declaration()
            if self.check(TokenType.IDENTIFIER) and self.check_next(TokenType.EQUAL):
                return self.assignment()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def function_declaration(self) -> FunctionDeclaration:
        name = self.consume(TokenType.IDENTIFIER, "expect function name after 'fungsi'")
        self.consume(TokenType.LEFT_PAREN, "expect '(' after function name")
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"can't have more than {MAX_ARGUMENTS} parameters")
                params.append(self.consume(TokenType.IDENTIFIER, "expect parameter name"))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "expect ')' after parameters")
        self.consume(TokenType.LEFT_BRACE, "expect '{' before function body")
        body = self.block()
        return FunctionDeclaration(name, tuple(params), tuple(body))

    def var_declaration(self) -> VarDeclaration:
        name = self.consume(TokenType.IDENTIFIER, "expect variable name after 'misal'")
        self.consume(TokenType.EQUAL, "variable declaration requires an initializer")
        initializer = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after statement")
        return VarDeclaration(name, initializer)

    def assignment(self) -> Assign:
        name = self.advance()
        self.advance()  # '='
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after statement")
        return Assign(name, value)

    def statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(tuple(self.block()))
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.LOOP):
            return self.while_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        return self.expression_statement()

    def print_statement(self) -> Print:
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after statement")
        return Print(value)

    def expression_statement(self) -> ExpressionStmt:
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after statement")
        return ExpressionStmt(expr)

    def block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "expect '}' to close the block")
        return statements

    def if_statement(self) -> If:
        condition = self.expression()
        self.consume(TokenType.LEFT_BRACE, "expect '{' after 'jika' condition")
        then_branch = Block(tuple(self.block()))
        else_branch = Block(())
        if self.match(TokenType.ELSE):
            if self.match(TokenType.IF):
                # lain jika ... is sugar for lain { jika ... }
                else_branch = Block((self.if_statement(),))
            else:
                self.consume(TokenType.LEFT_BRACE, "expect '{' or 'jika' after 'lain'")
                else_branch = Block(tuple(self.block()))
        return If(condition, then_branch, else_branch)

    def while_statement(self) -> While:
        condition = self.expression()
        self.consume(TokenType.LEFT_BRACE, "expect '{' after 'selama' condition")
        body = Block(tuple(self.block()))
        return While(condition, body)

    def return_statement(self) -> Return:
        keyword = self.previous()
        value: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()
        self.consume(TokenType.SEMICOLON, "expect ';' after return value")
        return Return(keyword, value)

    # Expressions

    def expression(self) -> Expr:
        return self.logic_or()

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.equality()
            expr = Logical(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)
        return expr

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)
        return expr

    def unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"can't have more than {MAX_ARGUMENTS} arguments")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break
        paren = self.consume(TokenType.RIGHT_PAREN, "expect ')' after arguments")
        return Call(callee, tuple(arguments), paren)

    def primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Primary(False)
        if self.match(TokenType.TRUE):
            return Primary(True)
        if self.match(TokenType.NIL):
            return Primary(NIL)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Primary(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "expect ')' after expression")
            return Group(expr)
        raise self.error(self.peek(), "expect expression")

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type is TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        return self.peek().type is token_type

    def check_next(self, token_type: TokenType) -> bool:
        if self.pos + 1 >= len(self.tokens):
            return False
        return self.tokens[self.pos + 1].type is token_type

    def match(self, *token_types: TokenType) -> bool:
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    # Error reporting and recovery

    def error(self, token: Token, message: str) -> ParseError:
        """Report a diagnostic and return the error for the caller to raise."""
        self.had_error = True
        if token.type is TokenType.EOF:
            location = 'at end'
        else:
            location = f"at '{token.lexeme}'"
        self.stderr.write(f"[line {token.line}] Error {location}: {message}\n")
        return ParseError(token, message)

    def synchronize(self):
        """Discard tokens until a likely statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTERS:
                return
            self.advance()
