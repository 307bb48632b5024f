"""Abstract Syntax Tree (AST) definitions for IndoScript.

The parser builds these nodes bottom-up and the interpreter walks them.
Nodes are frozen dataclasses holding tuples, so a tree is never mutated
after construction.

Dispatch goes through ``accept``: every expression variant calls one
method of :class:`ExprVisitor` and every statement variant one method of
:class:`StmtVisitor`. Both visitors are abstract base classes, so a
visitor that forgets a variant cannot be instantiated.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .tokens import Token


class ExprVisitor(ABC):
    @abstractmethod
    def visit_binary(self, expr: 'Binary', env: Any) -> Any: ...

    @abstractmethod
    def visit_logical(self, expr: 'Logical', env: Any) -> Any: ...

    @abstractmethod
    def visit_unary(self, expr: 'Unary', env: Any) -> Any: ...

    @abstractmethod
    def visit_primary(self, expr: 'Primary', env: Any) -> Any: ...

    @abstractmethod
    def visit_group(self, expr: 'Group', env: Any) -> Any: ...

    @abstractmethod
    def visit_variable(self, expr: 'Variable', env: Any) -> Any: ...

    @abstractmethod
    def visit_call(self, expr: 'Call', env: Any) -> Any: ...


class StmtVisitor(ABC):
    @abstractmethod
    def visit_expression_stmt(self, stmt: 'ExpressionStmt', env: Any) -> Any: ...

    @abstractmethod
    def visit_print(self, stmt: 'Print', env: Any) -> Any: ...

    @abstractmethod
    def visit_var_declaration(self, stmt: 'VarDeclaration', env: Any) -> Any: ...

    @abstractmethod
    def visit_assign(self, stmt: 'Assign', env: Any) -> Any: ...

    @abstractmethod
    def visit_block(self, stmt: 'Block', env: Any) -> Any: ...

    @abstractmethod
    def visit_if(self, stmt: 'If', env: Any) -> Any: ...

    @abstractmethod
    def visit_while(self, stmt: 'While', env: Any) -> Any: ...

    @abstractmethod
    def visit_function_declaration(self, stmt: 'FunctionDeclaration', env: Any) -> Any: ...

    @abstractmethod
    def visit_return(self, stmt: 'Return', env: Any) -> Any: ...


###############################################################################
# Expressions
###############################################################################


@dataclass(frozen=True)
class Expr:
    """Base class for all expression nodes."""

    def accept(self, visitor: ExprVisitor, env: Any = None) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_binary(self, env)


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_logical(self, env)


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_unary(self, env)


@dataclass(frozen=True)
class Primary(Expr):
    value: Any  # float, str, bool or NIL

    def accept(self, visitor, env=None):
        return visitor.visit_primary(self, env)


@dataclass(frozen=True)
class Group(Expr):
    expression: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_group(self, env)


@dataclass(frozen=True)
class Variable(Expr):
    name: Token

    def accept(self, visitor, env=None):
        return visitor.visit_variable(self, env)


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    arguments: Tuple[Expr, ...]
    paren: Token  # closing paren, used for error reporting

    def accept(self, visitor, env=None):
        return visitor.visit_call(self, env)


###############################################################################
# Statements
###############################################################################


@dataclass(frozen=True)
class Stmt:
    """Base class for all statement nodes."""

    def accept(self, visitor: StmtVisitor, env: Any = None) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    expression: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_expression_stmt(self, env)


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_print(self, env)


@dataclass(frozen=True)
class VarDeclaration(Stmt):
    name: Token
    initializer: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_var_declaration(self, env)


@dataclass(frozen=True)
class Assign(Stmt):
    """Bare ``name = value;`` statement."""
    name: Token
    value: Expr

    def accept(self, visitor, env=None):
        return visitor.visit_assign(self, env)


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]

    def accept(self, visitor, env=None):
        return visitor.visit_block(self, env)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Block
    else_branch: Block  # empty block when no ``lain`` was written

    def accept(self, visitor, env=None):
        return visitor.visit_if(self, env)


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Block

    def accept(self, visitor, env=None):
        return visitor.visit_while(self, env)


@dataclass(frozen=True)
class FunctionDeclaration(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]

    def accept(self, visitor, env=None):
        return visitor.visit_function_declaration(self, env)


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]

    def accept(self, visitor, env=None):
        return visitor.visit_return(self, env)


EXPRESSION_TYPES = (Binary, Logical, Unary, Primary, Group, Variable, Call)
STATEMENT_TYPES = (
    ExpressionStmt, Print, VarDeclaration, Assign, Block, If, While,
    FunctionDeclaration, Return,
)
