"""Runtime value domain for IndoScript.

Every runtime value is exactly one of number (``float``), string
(``str``), boolean (``bool``), nil (the :data:`NIL` marker) or callable
(a :class:`~indoscript.callable.Callable`). :func:`kind_of` is the single
discriminant the interpreter consults before applying an operator, so a
Python object outside this domain is rejected instead of slipping
through a type check.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from typing import Any


class ValueKind(Enum):
    NUMBER = 'number'
    STRING = 'string'
    BOOLEAN = 'boolean'
    NIL = 'nil'
    CALLABLE = 'callable'


class NilVal:
    """Marker object for the IndoScript ``kosong`` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'kosong'


NIL = NilVal()


def kind_of(value: Any) -> ValueKind:
    """Return the kind of a runtime value."""
    from .callable import Callable

    # bool before float: the order matters because bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, float):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, NilVal):
        return ValueKind.NIL
    if isinstance(value, Callable):
        return ValueKind.CALLABLE
    raise TypeError(f"not an IndoScript value: {value!r}")


def format_number(x: float) -> str:
    """Shortest round-trip positional text for a number.

    Integral values print without a fractional part (``7``, ``-0``) and
    exponents are never used (``1e-07`` prints as ``0.0000001``).
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return '+Inf' if x > 0 else '-Inf'
    text = format(Decimal(repr(x)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Convert a runtime value to the text ``cetak`` writes."""
    kind = kind_of(value)
    if kind is ValueKind.NUMBER:
        return format_number(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOLEAN:
        return 'benar' if value else 'salah'
    if kind is ValueKind.NIL:
        return 'kosong'
    return str(value)


def type_name(value: Any) -> str:
    """Return the IndoScript kind name of a runtime value, for messages."""
    try:
        return kind_of(value).value
    except TypeError:
        return type(value).__name__
