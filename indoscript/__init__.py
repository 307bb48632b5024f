# IndoScript language package
# This package provides a scanner, parser and tree-walking interpreter for IndoScript.
from .interpreter import run_program, parse_program, Interpreter
from .errors import IndoError, ParseError, IndoRuntimeError

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'IndoError',
    'ParseError',
    'IndoRuntimeError',
]
