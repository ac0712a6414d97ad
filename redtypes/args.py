"""Turning Python values into command arguments."""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping, Set
from dataclasses import dataclass
from decimal import Decimal
from typing import Any


class NumericBehavior(enum.Enum):
    """How an argument behaves in a numeric context."""

    NON_NUMERIC = enum.auto()
    NUMBER_IS_INTEGER = enum.auto()
    NUMBER_IS_FLOAT = enum.auto()


_EXPIRY_WITH_VALUE = frozenset({"EX", "PX", "EXAT", "PXAT"})
_EXPIRY_WITHOUT_VALUE = frozenset({"PERSIST"})


@dataclass(frozen=True)
class Expiry:
    """An expiry option: EX, PX, EXAT or PXAT with a time, or PERSIST."""

    kind: str
    value: int | None = None

    def __post_init__(self) -> None:
        kind = str(self.kind).upper()
        object.__setattr__(self, "kind", kind)
        if kind in _EXPIRY_WITHOUT_VALUE:
            if self.value is not None:
                raise ValueError(f"{kind} takes no value")
            return
        if kind not in _EXPIRY_WITH_VALUE:
            raise ValueError(f"unknown expiry kind {self.kind!r}")
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"{kind} needs an integer value")
        if self.value < 0:
            raise ValueError(f"{kind} needs a non-negative value")


def _format_float(x: float) -> str:
    """Shortest round-tripping decimal text, laid out like the server expects."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if x == 0:
        return "-0.0" if math.copysign(1.0, x) < 0 else "0.0"
    sign = "-" if x < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(x))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    length = len(digits)
    point = length + exponent
    if exponent >= 0 and point <= 16:
        body = digits + "0" * exponent + ".0"
    elif 0 < point <= 16:
        body = digits[:point] + "." + digits[point:]
    elif -5 < point <= 0:
        body = "0." + "0" * (-point) + digits
    elif length == 1:
        body = f"{digits}e{point - 1}"
    else:
        body = f"{digits[0]}.{digits[1:]}e{point - 1}"
    return sign + body


def _write(value: Any, out: list[bytes]) -> None:
    if value is None:
        return
    if isinstance(value, bool):
        out.append(b"1" if value else b"0")
    elif isinstance(value, (bytes, bytearray, memoryview)):
        out.append(bytes(value))
    elif isinstance(value, str):
        out.append(value.encode("utf-8"))
    elif isinstance(value, int):
        out.append(str(value).encode("ascii"))
    elif isinstance(value, float):
        out.append(_format_float(value).encode("ascii"))
    elif isinstance(value, Mapping):
        try:
            items = sorted(value.items())
        except TypeError as exc:
            raise TypeError("mapping keys must be mutually orderable") from exc
        for key, item in items:
            if not (is_single_arg(key) and is_single_arg(item)):
                raise ValueError("mapping keys and values must each be a single argument")
            _write(key, out)
            _write(item, out)
    elif isinstance(value, (list, tuple, Set)):
        for item in value:
            _write(item, out)
    else:
        writer = getattr(value, "redis_args", None)
        if not callable(writer):
            raise TypeError(f"cannot turn {type(value).__name__} into command arguments")
        out.extend(bytes(arg) for arg in writer())


def to_redis_args(value: Any) -> list[bytes]:
    """Convert a value into a list of byte-string arguments."""
    out: list[bytes] = []
    _write(value, out)
    return out


def is_single_arg(value: Any) -> bool:
    """Whether the value produces exactly one argument for single/multi switching."""
    if value is None:
        return False
    if isinstance(value, (bytes, bytearray, memoryview, str, int, float)):
        return True
    if isinstance(value, tuple):
        return len(value) == 1
    if isinstance(value, list):
        return len(value) == 1 and is_single_arg(value[0])
    if isinstance(value, (Mapping, Set)):
        return len(value) <= 1
    return True


def describe_numeric_behavior(value: Any) -> NumericBehavior:
    """Describe how the value behaves in a numeric context."""
    if isinstance(value, bool):
        return NumericBehavior.NON_NUMERIC
    if isinstance(value, int):
        return NumericBehavior.NUMBER_IS_INTEGER
    if isinstance(value, float):
        return NumericBehavior.NUMBER_IS_FLOAT
    return NumericBehavior.NON_NUMERIC