from indoscript.tokens import Token


class IndoError(Exception):
    """Base class for all IndoScript errors."""


class ParseError(IndoError):
    """Raised by the parser on a grammar violation."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class IndoRuntimeError(IndoError):
    """Fatal error raised while executing a program."""
    def __init__(self, token: Token, message: str):
        super().__init__(f"'{token.lexeme}' - {message}")
        self.token = token
        self.message = message
