import pytest
from hypothesis import given
from hypothesis import strategies as st

from redtypes.convert import from_redis_value
from redtypes.errors import ErrorKind, RedisError
from redtypes.stream_replies import (
    StreamClaimReply,
    StreamId,
    StreamInfoConsumersReply,
    StreamInfoGroupsReply,
    StreamInfoStreamReply,
    StreamPendingCountReply,
    StreamPendingReply,
    StreamRangeReply,
    StreamReadReply,
)
from redtypes.values import Bulk, Data, Int, Nil, Status


def _entry(entry_id, *fields):
    return Bulk([Data(entry_id), Bulk([Data(f) for f in fields])])


def test_range_reply_reads_entries():
    value = Bulk([_entry(b"1-0", b"name", b"ann"), _entry(b"2-0", b"age", b"30")])
    reply = StreamRangeReply.from_redis_value(value)
    assert [e.id for e in reply.ids] == ["1-0", "2-0"]
    assert reply.ids[0].map == {"name": Data(b"ann")}
    assert reply.ids[1].get("age", int) == 30


def test_range_reply_from_nil_is_empty():
    assert StreamRangeReply.from_redis_value(Nil()).ids == []


def test_range_reply_wrong_shape():
    with pytest.raises(RedisError) as info:
        StreamRangeReply.from_redis_value(Int(1))
    assert info.value.kind is ErrorKind.TYPE_ERROR


def test_claim_reply_through_convert():
    value = Bulk([_entry(b"5-1", b"k", b"v")])
    reply = from_redis_value(value, StreamClaimReply)
    assert reply.ids[0].id == "5-1"
    assert reply.ids[0].get("k") == "v"


def test_stream_id_helpers():
    entry = StreamId(id="1-0", map={"n": Data(b"42"), "s": Data(b"abc")})
    assert len(entry) == 2
    assert "n" in entry
    assert "missing" not in entry
    assert entry.get("n", int) == 42
    assert entry.get("missing") is None
    assert entry.get("s", int) is None


def test_stream_id_from_bulk_value():
    entry = StreamId.from_bulk_value(_entry(b"9-9", b"a", b"b"))
    assert entry.id == "9-9"
    assert entry.map == {"a": Data(b"b")}


def test_stream_id_from_non_bulk_is_empty():
    entry = StreamId.from_bulk_value(Nil())
    assert entry.id == ""
    assert len(entry) == 0


def test_read_reply_groups_by_key():
    value = Bulk([
        Bulk([Data(b"s1"), Bulk([_entry(b"1-0", b"f", b"x"), _entry(b"1-1", b"f", b"y")])]),
        Bulk([Data(b"s2"), Bulk([_entry(b"3-0", b"g", b"z")])]),
    ])
    reply = StreamReadReply.from_redis_value(value)
    assert [k.key for k in reply.keys] == ["s1", "s2"]
    assert [e.id for e in reply.keys[0].ids] == ["1-0", "1-1"]
    assert reply.keys[1].ids[0].get("g") == "z"


def test_pending_reply_empty():
    reply = StreamPendingReply.from_redis_value(Bulk([Int(0), Nil(), Nil(), Nil()]))
    assert reply.count() == 0
    assert reply.data is None


def test_pending_reply_with_data():
    value = Bulk([
        Int(3),
        Data(b"1-0"),
        Data(b"2-0"),
        Bulk([Bulk([Data(b"alice"), Data(b"3")]), Nil(), Bulk([Data(b"bob"), Data(b"many")])]),
    ])
    reply = StreamPendingReply.from_redis_value(value)
    assert reply.count() == 3
    assert reply.data.start_id == "1-0"
    assert reply.data.end_id == "2-0"
    assert [(c.name, c.pending, c.idle) for c in reply.data.consumers] == [
        ("alice", 3, 0),
        ("bob", 0, 0),
    ]


def test_pending_reply_missing_start():
    with pytest.raises(RedisError) as info:
        StreamPendingReply.from_redis_value(Bulk([Int(2), Nil(), Data(b"2-0"), Bulk([])]))
    assert info.value.kind is ErrorKind.IO_ERROR
    assert "Non-zero pending expects start id" in str(info.value)


def test_pending_reply_missing_end():
    with pytest.raises(RedisError) as info:
        StreamPendingReply.from_redis_value(Bulk([Int(2), Data(b"1-0"), Nil(), Bulk([])]))
    assert "Non-zero pending expects end id" in str(info.value)


def test_pending_count_reply():
    value = Bulk([Bulk([Data(b"1-0"), Data(b"alice"), Int(1500), Int(2)])])
    reply = StreamPendingCountReply.from_redis_value(value)
    (pending,) = reply.ids
    assert pending.id == "1-0"
    assert pending.consumer == "alice"
    assert pending.last_delivered_ms == 1500
    assert pending.times_delivered == 2


@pytest.mark.parametrize(
    "value, message",
    [
        (Int(1), "Cannot parse redis data (1)"),
        (Bulk([Int(1)]), "Cannot parse redis data (2)"),
        (Bulk([Bulk([Data(b"1-0"), Data(b"alice"), Int(1)])]), "Cannot parse redis data (3)"),
        (Bulk([Bulk([Data(b"1-0"), Status("alice"), Int(1), Int(1)])]), "Cannot parse redis data (3)"),
        (Bulk([Bulk([Data(b"\xff"), Data(b"alice"), Int(1), Int(1)])]), "Cannot convert from UTF-8"),
    ],
)
def test_pending_count_reply_errors(value, message):
    with pytest.raises(RedisError) as info:
        StreamPendingCountReply.from_redis_value(value)
    assert info.value.kind is ErrorKind.TYPE_ERROR
    assert str(info.value) == message


def test_info_stream_reply():
    value = Bulk([
        Data(b"length"), Int(2),
        Data(b"radix-tree-nodes"), Int(1),
        Data(b"groups"), Int(4),
        Data(b"last-generated-id"), Data(b"7-0"),
        Data(b"first-entry"), _entry(b"6-0", b"a", b"1"),
        Data(b"last-entry"), _entry(b"7-0", b"b", b"2"),
    ])
    reply = StreamInfoStreamReply.from_redis_value(value)
    assert reply.length == 2
    assert reply.radix_tree_keys == 1
    assert reply.groups == 4
    assert reply.last_generated_id == "7-0"
    assert reply.first_entry.id == "6-0"
    assert reply.last_entry.get("b", int) == 2


def test_info_stream_reply_missing_fields_default():
    reply = StreamInfoStreamReply.from_redis_value(Bulk([Data(b"length"), Int(5)]))
    assert reply.length == 5
    assert reply.last_generated_id == ""
    assert reply.first_entry.id == ""


def test_info_consumers_reply():
    value = Bulk([
        Bulk([Data(b"name"), Data(b"alice"), Data(b"pending"), Int(1), Data(b"idle"), Int(99)]),
        Bulk([Data(b"name"), Data(b"bob")]),
    ])
    reply = StreamInfoConsumersReply.from_redis_value(value)
    assert [(c.name, c.pending, c.idle) for c in reply.consumers] == [
        ("alice", 1, 99),
        ("bob", 0, 0),
    ]


def test_info_groups_reply():
    value = Bulk([
        Bulk([
            Data(b"name"), Data(b"workers"),
            Data(b"consumers"), Int(2),
            Data(b"pending"), Int(6),
            Data(b"last-delivered-id"), Data(b"8-0"),
        ])
    ])
    (group,) = StreamInfoGroupsReply.from_redis_value(value).groups
    assert group.name == "workers"
    assert group.consumers == 2
    assert group.pending == 6
    assert group.last_delivered_id == "8-0"


_ids = st.text(alphabet="0123456789-", min_size=1, max_size=8)
_fields = st.dictionaries(st.text(min_size=1, max_size=5), st.binary(max_size=5), max_size=4)


@given(st.lists(st.tuples(_ids, _fields), max_size=5))
def test_range_reply_round_trip(entries):
    value = Bulk([
        Bulk([
            Data(entry_id.encode()),
            Bulk([item for k, v in fields.items() for item in (Data(k.encode()), Data(v))]),
        ])
        for entry_id, fields in entries
    ])
    reply = StreamRangeReply.from_redis_value(value)
    assert [(e.id, {k: v.value for k, v in e.map.items()}) for e in reply.ids] == entries