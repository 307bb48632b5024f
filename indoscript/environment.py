from typing import Any, Dict, Optional

from indoscript.errors import IndoRuntimeError
from indoscript.tokens import Token


class Environment:
    """A single scope mapping names to values, linked to its enclosing scope.

    The global scope has no parent. Parents are fixed at construction, so
    the chain can never contain a cycle.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        # Only ever touches this scope.
        self.values[name] = value

    def assign(self, name: Token, value: Any):
        env = self.resolve(name.lexeme)
        if env is None:
            raise IndoRuntimeError(name, f'undefined variable {name.lexeme}')
        env.values[name.lexeme] = value

    def get(self, name: Token) -> Any:
        env = self.resolve(name.lexeme)
        if env is None:
            raise IndoRuntimeError(name, f'undefined variable {name.lexeme}')
        return env.values[name.lexeme]

    def resolve(self, name: str) -> Optional['Environment']:
        """Return the nearest scope binding ``name``, or None."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def is_defined(self, name: str) -> bool:
        return self.resolve(name) is not None

    def ancestor_count(self) -> int:
        depth = 0
        env = self.parent
        while env is not None:
            depth += 1
            env = env.parent
        return depth

    def __repr__(self) -> str:
        names = ', '.join(self.values)
        return f"<Environment depth={self.ancestor_count()} {{{names}}}>"
