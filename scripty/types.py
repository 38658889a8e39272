"""Runtime value model for ScriptyScript.

Integers, floats, strings and booleans are represented by the matching
Python builtins. `nil` is the `NIL` singleton, user-defined functions are
`Closure` objects and native functions are `BuiltinFunction` records (see
`builtin_function.py`). This module also holds the helpers shared by the
interpreter and the standard library: stringification, truthiness, equality
and the numeric conversions.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, TYPE_CHECKING
import math

from .builtin_function import BuiltinFunction
from .errors import ScriptRuntimeError

if TYPE_CHECKING:
    from .ast import Block
    from .environment import Environment


INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


def check_int(value: int) -> int:
    """Return `value` unchanged if it fits a signed 64-bit Integer."""
    if not INT_MIN <= value <= INT_MAX:
        raise ScriptRuntimeError('OverflowError', f'integer overflow: {value}')
    return value


class NilVal:
    """Marker object for the ScriptyScript `nil` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'

    def __bool__(self) -> bool:
        return False


NIL = NilVal()


class Closure:
    """A user-defined function together with the environment it was created in.

    The environment is held by reference, not copied: assignments made in the
    defining scope after the closure was created (including the binding of the
    closure's own name) are visible when it runs.
    """
    def __init__(self, params: List[str], body: 'Block', env: 'Environment'):
        self.params = params
        self.body = body
        self.env = env

    def __repr__(self) -> str:
        return f"<fn({', '.join(self.params)})>"


def is_integer(value: Any) -> bool:
    # bool is a subclass of int; keep them apart
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    return is_integer(value) or isinstance(value, float)


def round_half_away_from_zero(x: float) -> int:
    """Round a floating point number to the nearest integer, halves away from zero.

    Python's built-in round uses bankers rounding, so `round(6.5)` would give 6;
    ScriptyScript rounds it to 7 and `-2.5` to -3.
    """
    return math.floor(x + 0.5) if x >= 0 else math.ceil(x - 0.5)


def type_name(value: Any) -> str:
    """Return the ScriptyScript type name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, int):
        return 'Integer'
    if isinstance(value, float):
        return 'Float'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NilVal):
        return 'Nil'
    if isinstance(value, Closure):
        return 'Function'
    if isinstance(value, BuiltinFunction):
        return 'NativeFunction'
    return type(value).__name__


def format_float(x: float) -> str:
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'inf' if x > 0 else '-inf'
    # shortest round-trip digits, written out without an exponent: 1e16 -> "10000000000000000"
    text = format(Decimal(repr(x)), 'f')
    if '.' in text:
        # integral floats print without a fractional part: 2.0 -> "2"
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Convert a value to the text `print` and `to_string` produce."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NilVal):
        return 'nil'
    return repr(value)


def is_truthy(value: Any) -> bool:
    # Only nil and false are falsy; 0 and "" count as true.
    if isinstance(value, NilVal):
        return False
    if value is False:
        return False
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Equality used by `==` and `!=`.

    Numbers compare by value across Integer and Float, other values only equal
    values of the same kind, and functions compare by identity.
    """
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, bool) and isinstance(b, bool):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if isinstance(a, NilVal) and isinstance(b, NilVal):
        return True
    return a is b
