"""Access to the key/value text returned by the INFO command."""

from __future__ import annotations

from typing import Any

from .convert import from_redis_value
from .errors import RedisError
from .values import Status, Value


class InfoDict:
    """A mapping of INFO fields, each kept as a status value."""

    def __init__(self, kvpairs: str):
        self._map: dict[str, Value] = {}
        for line in kvpairs.split("\n"):
            if line.endswith("\r"):
                line = line[:-1]
            if not line or line.startswith("#"):
                continue
            key, sep, rest = line.partition(":")
            if not sep:
                continue
            self._map[key] = Status(rest)

    def get(self, key: str, target: Any = str) -> Any:
        """Fetch a field converted to ``target``, or None if missing or unconvertible."""
        found = self.find(key)
        if found is None:
            return None
        try:
            return from_redis_value(found, target)
        except RedisError:
            return None

    def find(self, key: str) -> Value | None:
        """Look up the raw value of a field."""
        return self._map.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"InfoDict({self._map!r})"

    @classmethod
    def from_redis_value(cls, value: Value) -> InfoDict:
        """Build from a reply that holds the INFO text."""
        return cls(from_redis_value(value, str))