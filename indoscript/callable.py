"""Function values for IndoScript."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List

from .ast import FunctionDeclaration
from .environment import Environment
from .types import NIL

if TYPE_CHECKING:
    from .interpreter import Interpreter


class Callable(ABC):
    """A value that can appear as the callee of a call expression."""

    @abstractmethod
    def arity(self) -> int: ...

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any: ...


class FunctionValue(Callable):
    """A user-defined ``fungsi`` bundled with the scope it was declared in."""

    def __init__(self, declaration: FunctionDeclaration, closure: Environment):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        call_env = Environment(parent=self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            call_env.define(param.lexeme, arg)
        result = interpreter.execute_block(self.declaration.body, call_env)
        if result is not None:
            return result.value
        return NIL

    def __repr__(self) -> str:
        return f"<fungsi {self.name}>"

    __str__ = __repr__
