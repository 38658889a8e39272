import builtins
import math
import re
from typing import Any, List

from scripty.errors import ScriptRuntimeError
from scripty.types import (
    NIL, NilVal, check_int, is_integer, is_number, round_half_away_from_zero, to_string, type_name,
)

_INT_RE = re.compile(r'[+-]?[0-9]+')


def write_line(values: List[Any]) -> None:
    print(' '.join(to_string(v) for v in values))


def read_line(prompt: str) -> str:
    try:
        line = builtins.input(prompt)
    except EOFError:
        return ''
    return line.rstrip('\r\n')


def require_finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise ScriptRuntimeError('OverflowError', f'{name}() cannot convert {to_string(value)} to Integer')
    return value


def to_int(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if is_integer(value):
        return value
    if isinstance(value, float):
        # truncates toward zero
        return check_int(int(require_finite('int', value)))
    if isinstance(value, str):
        if _INT_RE.fullmatch(value):
            return check_int(int(value))
        return NIL
    if isinstance(value, NilVal):
        return NIL
    raise ScriptRuntimeError('TypeError', f'int() cannot convert {type_name(value)}')


def to_float(value: Any) -> Any:
    if isinstance(value, bool):
        return float(value)
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return NIL
    if isinstance(value, NilVal):
        return NIL
    raise ScriptRuntimeError('TypeError', f'float() cannot convert {type_name(value)}')


def round_value(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if is_integer(value):
        return value
    if isinstance(value, float):
        return check_int(round_half_away_from_zero(require_finite('round', value)))
    raise ScriptRuntimeError('TypeError', f'round() expects a number, got {type_name(value)}')


def abs_value(value: Any) -> Any:
    if is_integer(value):
        # abs(INT_MIN) has no 64-bit counterpart
        return check_int(abs(value))
    if is_number(value):
        return abs(value)
    return NIL


def extreme(name: str, values: List[Any], pick_left) -> Any:
    """Fold `values` down to one, keeping the left operand when pick_left(left, right)."""
    for value in values:
        if not is_number(value):
            raise ScriptRuntimeError('TypeError', f'{name}() expects numbers, got {type_name(value)}')
    best = values[0]
    for value in values[1:]:
        if not pick_left(best, value):
            best = value
    return best
