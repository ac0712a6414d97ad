"""Low-level values as they come back from the server."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1

_ESCAPES = {"\t": "\\t", "\r": "\\r", "\n": "\\n", "\\": "\\\\", '"': '\\"', "\0": "\\0"}


def _debug_str(text: str) -> str:
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif not ch.isprintable():
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _pairs(items: tuple[Value, ...]) -> Iterator[tuple[Value, Value]]:
    it = iter(items)
    return zip(it, it)


class Value:
    """Base of every server value."""

    __slots__ = ()

    def looks_like_cursor(self) -> bool:
        """Whether this is a two-item bulk of a cursor and a bulk response."""
        return False

    def as_sequence(self) -> tuple[Value, ...] | None:
        """The items, if this value can be read as a sequence."""
        return None

    def as_map_items(self) -> Iterator[tuple[Value, Value]] | None:
        """Key/value pairs, if this value can be read as a map."""
        return None


@dataclass(frozen=True, slots=True)
class Nil(Value):
    """A nil reply."""

    def as_sequence(self) -> tuple[Value, ...]:
        return ()

    def __repr__(self) -> str:
        return "nil"


@dataclass(frozen=True, slots=True)
class Int(Value):
    """A signed 64-bit integer reply."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("Int holds an integer")
        if not _I64_MIN <= self.value <= _I64_MAX:
            raise ValueError("Int is out of the signed 64-bit range")

    def __repr__(self) -> str:
        return f"int({self.value})"


@dataclass(frozen=True, slots=True)
class Data(Value):
    """Arbitrary binary data."""

    value: bytes

    def __post_init__(self) -> None:
        if isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, "value", bytes(self.value))
        elif not isinstance(self.value, bytes):
            raise TypeError("Data holds bytes")

    def __repr__(self) -> str:
        try:
            text = self.value.decode("utf-8")
        except UnicodeDecodeError:
            return f"binary-data([{', '.join(str(b) for b in self.value)}])"
        return f"string-data('{_debug_str(text)}')"


@dataclass(frozen=True, slots=True)
class Bulk(Value):
    """A nested list of values."""

    items: tuple[Value, ...]

    def __post_init__(self) -> None:
        items = tuple(self.items) if isinstance(self.items, Iterable) else None
        if items is None or not all(isinstance(item, Value) for item in items):
            raise TypeError("Bulk holds values")
        object.__setattr__(self, "items", items)

    def looks_like_cursor(self) -> bool:
        return (
            len(self.items) == 2
            and isinstance(self.items[0], Data)
            and isinstance(self.items[1], Bulk)
        )

    def as_sequence(self) -> tuple[Value, ...]:
        return self.items

    def as_map_items(self) -> Iterator[tuple[Value, Value]]:
        return _pairs(self.items)

    def __repr__(self) -> str:
        return f"bulk({', '.join(repr(item) for item in self.items)})"


@dataclass(frozen=True, slots=True)
class Status(Value):
    """A status reply."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("Status holds a string")

    def __repr__(self) -> str:
        return f"status({_debug_str(self.value)})"


@dataclass(frozen=True, slots=True)
class Okay(Value):
    """The status reply "OK"."""

    def __repr__(self) -> str:
        return "ok"