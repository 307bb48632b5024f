"""Tree-walking interpreter for IndoScript.

This module ties the toolchain together: :func:`parse_program` scans and
parses source text, and :class:`Interpreter` executes the resulting
statement list. The current scope is passed explicitly to every
``execute``/``evaluate`` call, and ``balikin`` travels back to the call
site as a :class:`ReturnSignal` completion value rather than as an
exception.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, TextIO, Tuple

from .ast import (
    ExprVisitor, StmtVisitor, Expr, Stmt,
    Binary, Logical, Unary, Primary, Group, Variable, Call,
    ExpressionStmt, Print, VarDeclaration, Assign, Block, If, While,
    FunctionDeclaration, Return,
)
from .callable import Callable, FunctionValue
from .environment import Environment
from .errors import IndoRuntimeError
from .lexer import Scanner
from .parser import Parser
from .tokens import Token, TokenType
from .types import NIL, ValueKind, kind_of, to_string, type_name


EXIT_OK = 0
EXIT_PARSE_ERROR = 65
EXIT_RUNTIME_ERROR = 70


@dataclass(frozen=True)
class ReturnSignal:
    """Completion of a statement that executed ``balikin``."""
    value: Any


def parse_program(source: str, stderr: Optional[TextIO] = None) -> Tuple[List[Stmt], bool]:
    """Scan and parse ``source``; the flag is set if either stage failed."""
    scanner = Scanner(source, stderr)
    tokens = scanner.scan_tokens()
    statements, had_error = Parser(tokens, stderr).parse()
    return statements, had_error or scanner.had_error


class Interpreter(ExprVisitor, StmtVisitor):
    """Executes IndoScript statements.

    One instance owns one global environment. It survives across calls to
    :meth:`interpret`, so definitions from an earlier call stay visible to
    later ones (the REPL relies on this).
    """
    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: Any = None):
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.global_env = Environment()
        self.debug_level = debug_level
        self.debug_fp = None
        self._owns_debug_fp = False
        if debug_level > 0:
            if debug_file is None or isinstance(debug_file, str):
                self.debug_fp = open(debug_file or 'debug.txt', 'w', encoding='utf-8')
                self._owns_debug_fp = True
            else:
                self.debug_fp = debug_file

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp and self._owns_debug_fp:
            self.debug_fp.close()
        self.debug_fp = None

    # Public API
    def interpret(self, statements: Sequence[Stmt]) -> bool:
        """Execute ``statements`` in the global scope.

        Returns True if a runtime error stopped execution. The error is
        reported as a single line on the error sink.
        """
        try:
            for stmt in statements:
                if self.debug_level >= 1:
                    self.debug(f"exec {type(stmt).__name__}")
                self.execute(stmt, self.global_env)
        except IndoRuntimeError as e:
            self.stderr.write(f"[line {e.token.line}] Runtime error: {e}\n")
            self.stderr.flush()
            return True
        except RecursionError:
            # nesting too deep outside any call, e.g. a huge expression
            self.stderr.write("Runtime error: stack overflow\n")
            self.stderr.flush()
            return True
        return False

    def execute(self, stmt: Stmt, env: Environment) -> Optional[ReturnSignal]:
        return stmt.accept(self, env)

    def evaluate(self, expr: Expr, env: Environment) -> Any:
        return expr.accept(self, env)

    def execute_block(self, statements: Sequence[Stmt], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if result is not None:
                return result
        return None

    # Statements
    def visit_expression_stmt(self, stmt: ExpressionStmt, env: Environment):
        self.evaluate(stmt.expression, env)
        return None

    def visit_print(self, stmt: Print, env: Environment):
        value = self.evaluate(stmt.expression, env)
        self.stdout.write(to_string(value) + '\n')
        return None

    def visit_var_declaration(self, stmt: VarDeclaration, env: Environment):
        value = self.evaluate(stmt.initializer, env)
        env.define(stmt.name.lexeme, value)
        if self.debug_level >= 2:
            self.debug(f"declare {stmt.name.lexeme}: {type_name(value)} = {to_string(value)}"
                       f" (depth {env.ancestor_count()})")
        return None

    def visit_assign(self, stmt: Assign, env: Environment):
        value = self.evaluate(stmt.value, env)
        if env.is_defined(stmt.name.lexeme):
            env.assign(stmt.name, value)
        else:
            # assigning a fresh name declares it in the current scope
            env.define(stmt.name.lexeme, value)
        if self.debug_level >= 2:
            self.debug(f"assign {stmt.name.lexeme} = {to_string(value)}")
        return None

    def visit_block(self, stmt: Block, env: Environment):
        return self.execute_block(stmt.statements, Environment(parent=env))

    def visit_if(self, stmt: If, env: Environment):
        cond = self.evaluate(stmt.condition, env)
        truthy = self.is_truthy(cond)
        if self.debug_level >= 3:
            self.debug(f"if condition {to_string(cond)} -> {truthy}")
        if truthy:
            return self.execute(stmt.then_branch, env)
        return self.execute(stmt.else_branch, env)

    def visit_while(self, stmt: While, env: Environment):
        while True:
            cond = self.evaluate(stmt.condition, env)
            if self.debug_level >= 3:
                self.debug(f"loop condition {to_string(cond)}")
            if not self.is_truthy(cond):
                break
            # fresh scope per iteration
            res = self.execute_block(stmt.body.statements, Environment(parent=env))
            if res is not None:
                return res
        return None

    def visit_function_declaration(self, stmt: FunctionDeclaration, env: Environment):
        env.define(stmt.name.lexeme, FunctionValue(stmt, env))
        if self.debug_level >= 2:
            self.debug(f"define function {stmt.name.lexeme}/{len(stmt.params)}")
        return None

    def visit_return(self, stmt: Return, env: Environment):
        value = self.evaluate(stmt.value, env) if stmt.value is not None else NIL
        return ReturnSignal(value)

    # Expressions
    def visit_primary(self, expr: Primary, env: Environment):
        return expr.value

    def visit_group(self, expr: Group, env: Environment):
        return self.evaluate(expr.expression, env)

    def visit_variable(self, expr: Variable, env: Environment):
        return env.get(expr.name)

    def visit_logical(self, expr: Logical, env: Environment):
        left = self.evaluate(expr.left, env)
        if expr.operator.type is TokenType.OR:
            if self.is_truthy(left):
                return left
        elif not self.is_truthy(left):
            return left
        return self.evaluate(expr.right, env)

    def visit_unary(self, expr: Unary, env: Environment):
        operand = self.evaluate(expr.right, env)
        if expr.operator.type is TokenType.MINUS:
            self.check_number_operand(expr.operator, operand)
            return -operand
        if expr.operator.type is TokenType.BANG:
            return not self.is_truthy(operand)
        raise IndoRuntimeError(expr.operator, f'unsupported unary operator {expr.operator.lexeme}')

    def visit_binary(self, expr: Binary, env: Environment):
        left = self.evaluate(expr.left, env)
        right = self.evaluate(expr.right, env)
        return self.apply_binary_op(expr.operator, left, right)

    def visit_call(self, expr: Call, env: Environment):
        callee = self.evaluate(expr.callee, env)
        args = [self.evaluate(arg, env) for arg in expr.arguments]
        if not isinstance(callee, Callable):
            raise IndoRuntimeError(expr.paren, f'{type_name(callee)} value is not callable')
        if len(args) != callee.arity():
            raise IndoRuntimeError(expr.paren, f'expected {callee.arity()} arguments but got {len(args)}')
        if self.debug_level >= 3:
            self.debug(f"call {callee} with {len(args)} arguments")
        try:
            return callee.call(self, args)
        except RecursionError:
            raise IndoRuntimeError(expr.paren, 'stack overflow') from None

    # Helpers
    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op is TokenType.PLUS:
            ka, kb = kind_of(a), kind_of(b)
            if ka is ValueKind.NUMBER and kb is ValueKind.NUMBER:
                return a + b
            if ka is ValueKind.STRING and kb is ValueKind.STRING:
                return a + b
            raise IndoRuntimeError(operator, 'operands must be either numbers or strings')
        if op is TokenType.MINUS:
            self.check_number_operands(operator, a, b)
            return a - b
        if op is TokenType.STAR:
            self.check_number_operands(operator, a, b)
            return a * b
        if op is TokenType.SLASH:
            self.check_number_operands(operator, a, b)
            return divide(a, b)
        if op is TokenType.GREATER:
            self.check_number_operands(operator, a, b)
            return a > b
        if op is TokenType.GREATER_EQUAL:
            self.check_number_operands(operator, a, b)
            return a >= b
        if op is TokenType.LESS:
            self.check_number_operands(operator, a, b)
            return a < b
        if op is TokenType.LESS_EQUAL:
            self.check_number_operands(operator, a, b)
            return a <= b
        if op is TokenType.EQUAL_EQUAL:
            return self.equal_values(a, b)
        if op is TokenType.BANG_EQUAL:
            return not self.equal_values(a, b)
        raise IndoRuntimeError(operator, f'unknown operator {operator.lexeme}')

    def check_number_operand(self, operator: Token, operand: Any):
        if kind_of(operand) is not ValueKind.NUMBER:
            raise IndoRuntimeError(operator, 'operand must be a number')

    def check_number_operands(self, operator: Token, a: Any, b: Any):
        if kind_of(a) is not ValueKind.NUMBER or kind_of(b) is not ValueKind.NUMBER:
            raise IndoRuntimeError(operator, 'operands must be numbers')

    def is_truthy(self, value: Any) -> bool:
        kind = kind_of(value)
        if kind is ValueKind.BOOLEAN:
            return value
        if kind is ValueKind.NUMBER:
            return value != 0.0
        if kind is ValueKind.STRING:
            return len(value) > 0
        return False

    def equal_values(self, a: Any, b: Any) -> bool:
        # Values of different kinds are never equal; no coercion.
        ka, kb = kind_of(a), kind_of(b)
        if ka is not kb:
            return False
        if ka is ValueKind.NIL:
            return True
        if ka is ValueKind.CALLABLE:
            return a is b
        return a == b


def divide(a: float, b: float) -> float:
    """IEEE 754 division: a zero divisor gives an infinity or NaN."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def run_program(source: str, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None,
                debug_level: int = 0) -> int:
    """Convenience function to scan, parse and run a program from source.

    Returns a process-style status: 0 on success, 65 if the program did
    not parse (nothing is executed), 70 if a runtime error occurred.
    """
    statements, had_error = parse_program(source, stderr)
    if had_error:
        return EXIT_PARSE_ERROR
    interpreter = Interpreter(stdout=stdout, stderr=stderr, debug_level=debug_level)
    try:
        if interpreter.interpret(statements):
            return EXIT_RUNTIME_ERROR
    finally:
        interpreter.close()
    return EXIT_OK
