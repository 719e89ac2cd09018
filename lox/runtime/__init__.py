"""
Runtime value helpers and native callables.

Values are plain Python objects: `None` is nil, `bool`, `float` for every
number, `str`, and `LoxCallable` instances.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

if TYPE_CHECKING:
    from ..interp import Interpreter


class LoxCallable:
    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: Interpreter, arguments: Sequence[object]) -> object:
        raise NotImplementedError

    def __str__(self) -> str:
        return "<fn>"


BuiltinImpl = Callable[["Interpreter", Sequence[object]], object]


@dataclass(frozen=True)
class BuiltinFunction(LoxCallable):
    name: str
    params: int
    impl: BuiltinImpl

    def arity(self) -> int:
        return self.params

    def call(self, interpreter: Interpreter, arguments: Sequence[object]) -> object:
        return self.impl(interpreter, arguments)

    def __str__(self) -> str:
        return "<native fn>"


def _builtin_clock(interpreter: Interpreter, arguments: Sequence[object]) -> object:
    return time.time()


BUILTINS: Mapping[str, BuiltinFunction] = {
    "clock": BuiltinFunction(name="clock", params=0, impl=_builtin_clock),
}


def is_truthy(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: object, right: object) -> bool:
    # bool is an int subclass, so compare exact types before values.
    if type(left) is not type(right):
        return False
    if isinstance(left, float):
        # Same-value semantics: NaN equals itself, -0 and 0 differ.
        if math.isnan(left) and math.isnan(right):
            return True
        return left == right and math.copysign(1.0, left) == math.copysign(1.0, right)
    return left == right


def is_number(value: object) -> bool:
    return isinstance(value, float)


def divide(left: float, right: float) -> float:
    """IEEE 754 division: a zero divisor gives an infinity or NaN, never raises."""
    if right != 0.0:
        return left / right
    if left == 0.0 or math.isnan(left):
        return math.nan
    sign = math.copysign(1.0, left) * math.copysign(1.0, right)
    return math.copysign(math.inf, sign)


def stringify(value: object) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return _format_float(value)
    return str(value)


def _format_float(value: float) -> str:
    """Shortest round-trip digits, exponent form only below 1e-6 or from 1e21 up."""
    text = repr(value)
    mantissa, _, exponent = text.partition("e")
    if not exponent:
        return text
    power = int(exponent)
    if -7 < power < 0:
        sign = "-" if mantissa.startswith("-") else ""
        digits = mantissa.lstrip("-").replace(".", "")
        zeros = "0" * (-power - 1)
        return f"{sign}0.{zeros}{digits}"
    exponent_sign = "+" if power > 0 else "-"
    return f"{mantissa}e{exponent_sign}{abs(power)}"
