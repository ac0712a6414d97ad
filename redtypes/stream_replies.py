"""Reply types for the stream commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .convert import from_redis_value
from .errors import ErrorKind, RedisError, from_io_error
from .values import Bulk, Data, Int, Value

_USIZE_MASK = 0xFFFF_FFFF_FFFF_FFFF

_ENTRIES = list[dict[str, dict[str, Value]]]
_READ_ROWS = list[dict[str, list[dict[str, dict[str, Value]]]]]
_PENDING = tuple[int, Optional[str], Optional[str], list[Optional[tuple[str, str]]]]


def _parse_count(text: str) -> int:
    body = text[1:] if text.startswith("+") else text
    if body and body.isascii() and body.isdigit():
        return int(body)
    return 0


def _utf8(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RedisError(ErrorKind.TYPE_ERROR, "Cannot convert from UTF-8") from exc


@dataclass
class StreamId:
    """One stream entry: its id and its field/value map."""

    id: str = ""
    map: dict[str, Value] = field(default_factory=dict)

    def get(self, key: str, target: Any = str) -> Any:
        """A field converted to ``target``, or None if missing or unconvertible."""
        found = self.map.get(key)
        if found is None:
            return None
        try:
            return from_redis_value(found, target)
        except RedisError:
            return None

    def __contains__(self, key: object) -> bool:
        return key in self.map

    def __len__(self) -> int:
        return len(self.map)

    @classmethod
    def from_bulk_value(cls, value: Value) -> StreamId:
        """Read ``[id, [field, value, ...]]``; anything else gives an empty entry."""
        entry = cls()
        if isinstance(value, Bulk):
            if len(value.items) > 0:
                entry.id = from_redis_value(value.items[0], str)
            if len(value.items) > 1:
                entry.map = from_redis_value(value.items[1], dict[str, Value])
        return entry


def _entries(value: Value) -> list[StreamId]:
    rows = from_redis_value(value, _ENTRIES)
    return [StreamId(id=entry_id, map=fields) for row in rows for entry_id, fields in row.items()]


@dataclass
class StreamKey:
    """A stream key and the entries read from it."""

    key: str = ""
    ids: list[StreamId] = field(default_factory=list)


@dataclass
class StreamReadReply:
    """Reply of XREAD and XREADGROUP."""

    keys: list[StreamKey] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamReadReply:
        rows = from_redis_value(value, _READ_ROWS)
        keys = [
            StreamKey(
                key=key,
                ids=[
                    StreamId(id=entry_id, map=fields)
                    for id_row in entries
                    for entry_id, fields in id_row.items()
                ],
            )
            for row in rows
            for key, entries in row.items()
        ]
        return cls(keys=keys)


@dataclass
class StreamRangeReply:
    """Reply of XRANGE and XREVRANGE."""

    ids: list[StreamId] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamRangeReply:
        return cls(ids=_entries(value))


@dataclass
class StreamClaimReply:
    """Reply of XCLAIM."""

    ids: list[StreamId] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamClaimReply:
        return cls(ids=_entries(value))


@dataclass
class StreamInfoConsumer:
    """A consumer of a group."""

    name: str = ""
    pending: int = 0
    idle: int = 0


@dataclass
class StreamInfoGroup:
    """A consumer group of a stream."""

    name: str = ""
    consumers: int = 0
    pending: int = 0
    last_delivered_id: str = ""


@dataclass
class StreamPendingData:
    """Summary of the pending entries of a group."""

    count: int = 0
    start_id: str = ""
    end_id: str = ""
    consumers: list[StreamInfoConsumer] = field(default_factory=list)


@dataclass
class StreamPendingReply:
    """Summary reply of XPENDING; ``data`` is None when nothing is pending."""

    data: StreamPendingData | None = None

    def count(self) -> int:
        """How many entries are pending."""
        return 0 if self.data is None else self.data.count

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamPendingReply:
        count, start, end, consumer_data = from_redis_value(value, _PENDING)
        if count == 0:
            return cls()
        if start is None:
            raise from_io_error(OSError("IllegalState: Non-zero pending expects start id"))
        if end is None:
            raise from_io_error(OSError("IllegalState: Non-zero pending expects end id"))
        consumers = [
            StreamInfoConsumer(name=name, pending=_parse_count(pending))
            for name, pending in filter(None, consumer_data)
        ]
        return cls(
            StreamPendingData(count=count, start_id=start, end_id=end, consumers=consumers)
        )


@dataclass
class StreamPendingId:
    """A pending entry and who owns it."""

    id: str = ""
    consumer: str = ""
    last_delivered_ms: int = 0
    times_delivered: int = 0


@dataclass
class StreamPendingCountReply:
    """Detailed reply of XPENDING with a range and count."""

    ids: list[StreamPendingId] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamPendingCountReply:
        if not isinstance(value, Bulk):
            raise RedisError(ErrorKind.TYPE_ERROR, "Cannot parse redis data (1)")
        reply = cls()
        for outer in value.items:
            if not isinstance(outer, Bulk):
                raise RedisError(ErrorKind.TYPE_ERROR, "Cannot parse redis data (2)")
            match outer.items:
                case (Data() as id_raw, Data() as consumer_raw, Int() as last, Int() as times):
                    reply.ids.append(
                        StreamPendingId(
                            id=_utf8(id_raw.value),
                            consumer=_utf8(consumer_raw.value),
                            last_delivered_ms=last.value & _USIZE_MASK,
                            times_delivered=times.value & _USIZE_MASK,
                        )
                    )
                case _:
                    raise RedisError(ErrorKind.TYPE_ERROR, "Cannot parse redis data (3)")
        return reply


@dataclass
class StreamInfoStreamReply:
    """Reply of XINFO STREAM."""

    last_generated_id: str = ""
    radix_tree_keys: int = 0
    groups: int = 0
    length: int = 0
    first_entry: StreamId = field(default_factory=StreamId)
    last_entry: StreamId = field(default_factory=StreamId)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamInfoStreamReply:
        info = from_redis_value(value, dict[str, Value])
        reply = cls()
        if "last-generated-id" in info:
            reply.last_generated_id = from_redis_value(info["last-generated-id"], str)
        if "radix-tree-nodes" in info:
            reply.radix_tree_keys = from_redis_value(info["radix-tree-nodes"], int)
        if "groups" in info:
            reply.groups = from_redis_value(info["groups"], int)
        if "length" in info:
            reply.length = from_redis_value(info["length"], int)
        if "first-entry" in info:
            reply.first_entry = StreamId.from_bulk_value(info["first-entry"])
        if "last-entry" in info:
            reply.last_entry = StreamId.from_bulk_value(info["last-entry"])
        return reply


@dataclass
class StreamInfoConsumersReply:
    """Reply of XINFO CONSUMERS."""

    consumers: list[StreamInfoConsumer] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamInfoConsumersReply:
        reply = cls()
        for info in from_redis_value(value, list[dict[str, Value]]):
            consumer = StreamInfoConsumer()
            if "name" in info:
                consumer.name = from_redis_value(info["name"], str)
            if "pending" in info:
                consumer.pending = from_redis_value(info["pending"], int)
            if "idle" in info:
                consumer.idle = from_redis_value(info["idle"], int)
            reply.consumers.append(consumer)
        return reply


@dataclass
class StreamInfoGroupsReply:
    """Reply of XINFO GROUPS."""

    groups: list[StreamInfoGroup] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamInfoGroupsReply:
        reply = cls()
        for info in from_redis_value(value, list[dict[str, Value]]):
            group = StreamInfoGroup()
            if "name" in info:
                group.name = from_redis_value(info["name"], str)
            if "pending" in info:
                group.pending = from_redis_value(info["pending"], int)
            if "consumers" in info:
                group.consumers = from_redis_value(info["consumers"], int)
            if "last-delivered-id" in info:
                group.last_delivered_id = from_redis_value(info["last-delivered-id"], str)
            reply.groups.append(group)
        return reply