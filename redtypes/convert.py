"""Converting server values into Python values of a requested type."""

from __future__ import annotations

import re
import types
import typing
from collections.abc import Sequence
from typing import Any

from .errors import ErrorKind, RedisError
from .values import Bulk, Data, Int, Nil, Okay, Status, Value

_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)
_NONE_TYPE = type(None)


def _incompatible(shown: str, detail: str) -> RedisError:
    return RedisError(
        ErrorKind.TYPE_ERROR,
        "Response was of incompatible type",
        f'"{detail}" (response was {shown})',
    )


def _invalid(value: Value, detail: str) -> RedisError:
    return _incompatible(repr(value), detail)


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RedisError(ErrorKind.TYPE_ERROR, "Invalid UTF-8") from exc


def _number_text(value: Value) -> str:
    if isinstance(value, Status):
        return value.value
    if isinstance(value, Data):
        return _decode(value.value)
    raise _invalid(value, "Response type not convertible to numeric.")


def _to_int(value: Value) -> int:
    if isinstance(value, Int):
        return value.value
    text = _number_text(value)
    if not _INT_TEXT.fullmatch(text):
        raise _invalid(value, "Could not convert from string.")
    return int(text)


def _to_float(value: Value) -> float:
    if isinstance(value, Int):
        return float(value.value)
    text = _number_text(value)
    if not _FLOAT_TEXT.fullmatch(text):
        raise _invalid(value, "Could not convert from string.")
    return float(text)


def _to_byte(value: Value) -> int:
    if isinstance(value, Int):
        return value.value & 0xFF
    number = _to_int(value)
    if not 0 <= number <= 0xFF:
        raise _invalid(value, "Could not convert from string.")
    return number


def _to_bool(value: Value) -> bool:
    if isinstance(value, Nil):
        return False
    if isinstance(value, Int):
        return value.value != 0
    if isinstance(value, Okay):
        return True
    if isinstance(value, Status):
        if value.value == "1":
            return True
        if value.value == "0":
            return False
        raise _invalid(value, "Response status not valid boolean")
    if isinstance(value, Data):
        if value.value == b"1":
            return True
        if value.value == b"0":
            return False
    raise _invalid(value, "Response type not bool compatible.")


def _to_str(value: Value) -> str:
    if isinstance(value, Data):
        return _decode(value.value)
    if isinstance(value, Okay):
        return "OK"
    if isinstance(value, Status):
        return value.value
    raise _invalid(value, "Response type not string compatible.")


def _to_bytes(value: Value) -> bytes:
    if isinstance(value, Data):
        return value.value
    if isinstance(value, Bulk):
        return bytes(_to_byte(item) for item in value.items)
    if isinstance(value, Nil):
        return b""
    raise _invalid(value, "Response type not vector compatible.")


def _fixed_tuple_args(target: Any) -> tuple[Any, ...] | None:
    if typing.get_origin(target) is not tuple:
        return None
    args = typing.get_args(target)
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        return None
    return args


def _from_values(items: Sequence[Value], element: Any) -> list[Any]:
    fields = _fixed_tuple_args(element)
    if fields is None:
        return [_convert(item, element) for item in items]
    width = len(fields)
    if len(items) % width:
        shown = "[" + ", ".join(repr(item) for item in items) + "]"
        raise _incompatible(shown, "Bulk response of wrong dimension")
    return [
        tuple(_convert(item, field) for item, field in zip(items[start : start + width], fields))
        for start in range(0, len(items), width)
    ]


def _to_list(value: Value, element: Any) -> list[Any]:
    if isinstance(value, Bulk):
        return _from_values(value.items, element)
    if isinstance(value, Nil):
        return []
    raise _invalid(value, "Response type not vector compatible.")


def _to_tuple(value: Value, fields: tuple[Any, ...]) -> tuple[Any, ...]:
    if not isinstance(value, Bulk):
        raise _invalid(value, "Not a bulk response")
    if len(value.items) != len(fields):
        raise _invalid(value, "Bulk response of wrong dimension")
    return tuple(_convert(item, field) for item, field in zip(value.items, fields))


def _to_dict(value: Value, key_type: Any, value_type: Any) -> dict[Any, Any]:
    pairs = value.as_map_items()
    if pairs is None:
        raise _invalid(value, "Response type not hashmap compatible")
    return {_convert(k, key_type): _convert(v, value_type) for k, v in pairs}


def _to_set(value: Value, element: Any) -> set[Any]:
    items = value.as_sequence()
    if items is None:
        raise _invalid(value, "Response type not hashset compatible")
    return {_convert(item, element) for item in items}


def _convert(value: Value, target: Any) -> Any:
    if target is Any:
        return value
    if target is None or target is _NONE_TYPE:
        return None

    origin = typing.get_origin(target)
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(target) if arg is not _NONE_TYPE]
        if len(members) != 1 or len(members) == len(typing.get_args(target)):
            raise TypeError(f"unsupported union target {target!r}")
        if isinstance(value, Nil):
            return None
        return _convert(value, members[0])

    if origin is list:
        (element,) = typing.get_args(target) or (Value,)
        return _to_list(value, element)
    if origin is tuple:
        fields = _fixed_tuple_args(target)
        if fields is not None:
            return _to_tuple(value, fields)
        args = typing.get_args(target)
        return tuple(_to_list(value, args[0] if args else Value))
    if origin is dict:
        args = typing.get_args(target) or (Value, Value)
        return _to_dict(value, args[0], args[1])
    if origin in (set, frozenset):
        (element,) = typing.get_args(target) or (Value,)
        result = _to_set(value, element)
        return frozenset(result) if origin is frozenset else result

    if not isinstance(target, type):
        raise TypeError(f"unsupported conversion target {target!r}")
    if issubclass(target, Value):
        if isinstance(value, target):
            return value
        raise _invalid(value, f"Response is not {target.__name__}.")
    if target is bool:
        return _to_bool(value)
    if target is int:
        return _to_int(value)
    if target is float:
        return _to_float(value)
    if target is str:
        return _to_str(value)
    if target is bytes:
        return _to_bytes(value)
    if target is list:
        return _to_list(value, Value)
    if target is dict:
        return _to_dict(value, Value, Value)
    if target is set:
        return _to_set(value, Value)
    if target is frozenset:
        return frozenset(_to_set(value, Value))
    reader = getattr(target, "from_redis_value", None)
    if callable(reader):
        return reader(value)
    raise TypeError(f"unsupported conversion target {target!r}")


def from_redis_value(value: Value, target: Any) -> Any:
    """Convert a server value into an instance of ``target``.

    ``target`` may be a plain type (``int``, ``float``, ``bool``, ``str``,
    ``bytes``, a :class:`Value` class, or a class with a ``from_redis_value``
    classmethod), a generic alias such as ``list[int]``, ``dict[str, int]``,
    ``set[str]`` or ``tuple[str, bytes]``, an optional ``X | None``, or
    ``None`` to accept and discard anything.  Raises :class:`RedisError` of
    kind ``TYPE_ERROR`` when the value does not fit.
    """
    if not isinstance(value, Value):
        raise TypeError("from_redis_value expects a Value")
    return _convert(value, target)